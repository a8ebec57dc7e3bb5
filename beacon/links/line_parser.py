# ==============================================
# LinkLineParser
# ==============================================
#
# PURPOSE:
#   Turn one raw body line "ID|LABEL|DESCRIPTION|TARGET" into a
#   LinkTuple, and turn a LinkTuple back into its shortest line.
#
# RESULTS OF parse():
# -------------------
#   LinkTuple  → (id, label, description, target), missing parts ""
#   LineError  → recoverable problem with this one line
#   None       → blank line, or a line whose first field is empty
#
# LAYOUT RULES:
# -------------
#   1. Split on "|", trim every part, drop trailing empty parts.
#   2. More than 4 parts is an error.
#   3. A 4th part must be a URI.
#   4. Without a TARGET template (positional=False), a 2nd or 3rd
#      part that is the LAST part and looks like a URI is the target:
#        "qid|lab|u:ri"  → ("qid", "lab", "", "u:ri")
#      With a template the parts are strictly positional.
#
# ==============================================

from typing import NamedTuple, Optional, Union

from beacon.meta.validators import is_uri


class LinkTuple(NamedTuple):
    """A parsed body line, not yet expanded."""
    id: str
    label: str = ""
    description: str = ""
    target: str = ""


class LineError(NamedTuple):
    """A body line that could not be read."""
    message: str

    def __str__(self) -> str:
        return self.message


ParseResult = Union[LinkTuple, LineError, None]


class LinkLineParser:
    """Stateless parser for single body lines."""

    TOO_MANY_PARTS = "found too many parts (>4), divided by '|' characters"
    INVALID_TARGET = "URI part has not valid URI form"

    @classmethod
    def parse(cls, raw_line: str, positional: bool = False) -> ParseResult:
        """
        Parse one body line.

        Args:
            raw_line: The line, with or without its line break
            positional: True when a TARGET template is declared

        Returns:
            LinkTuple, LineError, or None for a blank line
        """
        parts = [part.strip() for part in raw_line.split("|")]
        while parts and parts[-1] == "":
            parts.pop()

        if not parts or parts[0] == "":
            return None

        if len(parts) > 4:
            return LineError(cls.TOO_MANY_PARTS)

        target = ""
        if len(parts) == 4:
            target = parts.pop()
            if not is_uri(target):
                return LineError(cls.INVALID_TARGET)
        elif len(parts) > 1 and not positional and is_uri(parts[-1]):
            target = parts.pop()

        parts += [""] * (3 - len(parts))
        return LinkTuple(parts[0], parts[1], parts[2], target)


def render(id, label: str = "", description: str = "", target: str = "") -> str:
    """
    Build the canonical body line for a link.

    Accepts either the four fields or a single tuple holding them
    (extra fields of an expanded link are ignored). Empty trailing
    fields are left out, and an empty label/description in front of a
    URI target is dropped so that the target moves left.

    Returns:
        The line without line break, "" if id is empty
    """
    if isinstance(id, (tuple, list)):
        id, label, description, target = (tuple(id) + ("", "", ""))[:4]

    if not id:
        return ""

    link = [("" if part is None else str(part)).replace("|", " ")
            for part in (id, label, description, target)]

    if link[3] == "":
        link.pop()
        if link[2] == "":
            link.pop()
            if link[1] == "":
                link.pop()
    elif is_uri(link[3]) and link[2] == "":
        link[2] = link.pop()
        if link[1] == "":
            link[1] = link.pop()

    return "|".join(link)
