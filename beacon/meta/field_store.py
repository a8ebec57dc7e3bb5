# ==============================================
# MetaFieldStore
# ==============================================
#
# PURPOSE:
#   Hold the document-level meta fields of one link dump and keep
#   them valid. Every value goes through trimming and line-break
#   removal; reserved names additionally go through their FieldRule.
#
# CLASS: MetaFieldStore
# ---------------------
#   Stateful — one store per beacon.
#
#   Methods:
#   --------
#   - get() -> dict[str, str]
#       All fields currently set (FORMAT is always there).
#
#   - get(name) -> str | None
#       One field, name is case-insensitive.
#
#   - set(name, value, [name, value, ...]) -> None
#       Pairs are applied one after another. An empty value removes
#       the field (FORMAT falls back to "BEACON").
#       Raises ArgumentError on misuse, ValidationError on bad values.
#
#   - serialize(link_count) -> str
#       "#FORMAT" first, other fields newest-first, "#COUNT" last.
#
# ==============================================

import re
from typing import Any, Dict, List, Optional

from beacon.errors import ArgumentError, ValidationError
from beacon.meta.validators import FIELD_RULES


NAME_PATTERN = re.compile(r"^[A-Za-z_-]+$")
DEFAULT_FORMAT = "BEACON"


class MetaFieldStore:
    """
    Canonical uppercase name → string value.

    Insertion order of the underlying dict is the order of the most
    recent assignment; serialize() walks it backwards.
    """

    def __init__(self):
        self._fields: Dict[str, str] = {"FORMAT": DEFAULT_FORMAT}

    def get(self, name: Optional[str] = None) -> Any:
        if name is None:
            return dict(self._fields)
        if not isinstance(name, str):
            raise ArgumentError(f"meta field name must be a string, got {type(name).__name__}")
        return self._fields.get(name.strip().upper())

    def set(self, *pairs: Any) -> None:
        """
        Set one or more meta fields.

        Args:
            *pairs: name, value, name, value, ...

        Raises:
            ArgumentError: odd number of arguments, non-string or invalid name
            ValidationError: reserved field with an unacceptable value
        """
        if not pairs or len(pairs) % 2:
            raise ArgumentError("meta fields must be given as name/value pairs")

        for i in range(0, len(pairs), 2):
            self._set_one(pairs[i], pairs[i + 1])

    def _set_one(self, name: Any, value: Any) -> None:
        if not isinstance(name, str):
            raise ArgumentError(f"meta field name must be a string, got {type(name).__name__}")

        name = name.strip()
        if not NAME_PATTERN.match(name):
            raise ArgumentError(f'invalid meta name: "{name}"')
        name = name.upper()

        value = "" if value is None else str(value)
        value = re.sub(r"[\r\n]", "", value).strip()

        rule = FIELD_RULES.get(name)
        if rule is not None and value != "":
            value = rule.normalize(value)
            if value != "" and not rule.validate(value):
                raise ValidationError(rule.message)

        self._fields.pop(name, None)
        if value != "":
            self._fields[name] = value
        elif name == "FORMAT":
            self._fields["FORMAT"] = DEFAULT_FORMAT

    def declared_count(self) -> Optional[int]:
        count = self._fields.get("COUNT")
        return int(count) if count is not None else None

    def examples(self) -> List[str]:
        examples = self._fields.get("EXAMPLES")
        return examples.split("|") if examples else []

    def serialize(self, link_count: int = 0) -> str:
        """
        Render the header as canonical text.

        Args:
            link_count: number written into the trailing #COUNT line

        Returns:
            One "#NAME: value" line per field, newline terminated
        """
        lines = [f"#FORMAT: {self._fields['FORMAT']}"]
        for name in reversed(list(self._fields)):
            if name in ("FORMAT", "COUNT"):
                continue
            lines.append(f"#{name}: {self._fields[name]}")
        lines.append(f"#COUNT: {link_count}")
        return "\n".join(lines) + "\n"
