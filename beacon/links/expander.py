# ==============================================
# LinkExpander
# ==============================================
#
# PURPOSE:
#   Derive the full identifier and the full target of a link from the
#   PREFIX and TARGET meta fields.
#
#   full_id     = PREFIX + id                     (PREFIX set)
#               = id                              (otherwise)
#   full_target = TARGET with {ID} → id and
#                 {LABEL} → escaped label         (TARGET set)
#               = explicit target of the line     (otherwise)
#
#   The expander never looks at a live store: it is always handed
#   a meta snapshot (a plain dict).
#
# ==============================================

from typing import Mapping, NamedTuple, Optional
from urllib.parse import quote

from beacon.links.line_parser import LinkTuple


# RFC 3986 path-segment characters besides unreserved ones
LABEL_SAFE_CHARS = "!$&'()*+,;=:@"


class ExpandedLink(NamedTuple):
    """A link as handed out to callers."""
    id: str
    label: str
    description: str
    target: str
    full_id: str
    full_target: str


class LinkExpander:

    def __init__(self, meta: Optional[Mapping[str, str]] = None):
        self._prefix = None
        self._template = None
        if meta:
            self._prefix = meta.get("PREFIX")
            self._template = meta.get("TARGET")

    @property
    def has_template(self) -> bool:
        return self._template is not None

    def full_id(self, id: str) -> str:
        return self._prefix + id if self._prefix is not None else id

    def full_target(self, id: str, label: str, target: str) -> str:
        if self._template is None:
            return target or ""
        full_target = self._template.replace("{ID}", id)
        return full_target.replace("{LABEL}", quote(label, safe=LABEL_SAFE_CHARS))

    def expand(self, link: LinkTuple, meta: Optional[Mapping[str, str]] = None) -> ExpandedLink:
        """
        Expand a parsed link.

        Args:
            link: (id, label, description, target)
            meta: Snapshot to use instead of the one given at construction

        Returns:
            ExpandedLink with full_id and full_target filled in
        """
        if meta is not None:
            return LinkExpander(meta).expand(link)

        id, label, description, target = link[:4]
        return ExpandedLink(
            id, label, description, target,
            self.full_id(id),
            self.full_target(id, label, target),
        )
