# ==============================================
# Meta Field Validators
# ==============================================
#
# PURPOSE:
#   Validation and normalization rules for the reserved meta fields.
#   Every reserved name maps to one FieldRule in FIELD_RULES; the
#   store looks the rule up by canonical name instead of branching
#   on the name itself.
#
# RESERVED FIELDS:
# ----------------
#   FORMAT    → "BEACON" or "<UPPERCASE>-BEACON"
#   PREFIX    → URI
#   FEED      → absolute http(s) URL
#   TARGET    → URI template with {ID} and/or {LABEL}
#   REVISIT   → normalized to YYYY-MM-DDTHH:MM:SS (overflow rolls forward)
#   EXAMPLES  → pipe-joined, trimmed, non-empty ids
#   COUNT     → non-negative integer
#
# A normalizer may itself raise ValidationError when a value cannot
# be read at all (e.g. a REVISIT that is not a date).
#
# ==============================================

import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, NamedTuple

from beacon.errors import ValidationError


URI_PATTERN = re.compile(
    r"^[A-Za-z][A-Za-z0-9+.\-]*:"
    r"(?:[A-Za-z0-9\-._~!$&'()*+,;=:@/?#\[\]]|%[0-9A-Fa-f]{2})*$"
)

FORMAT_PATTERN = re.compile(r"^([A-Z]+-)?BEACON$")
FEED_PATTERN = re.compile(r"^https?://\S+\.\S+$")
COUNT_PATTERN = re.compile(r"^[0-9]+$")
EPOCH_PATTERN = re.compile(r"^[0-9]{5,}$")
PLACEHOLDER_PATTERN = re.compile(r"\{(ID|LABEL)\}")

REVISIT_PATTERN = re.compile(
    r"^(\d{4})-(\d{1,2})-(\d{1,2})"
    r"(?:[T ](\d{1,2}):(\d{1,2})(?::(\d{1,2}))?)?Z?$"
)
ISO_FORMAT = "%Y-%m-%dT%H:%M:%S"


def is_uri(value: str) -> bool:
    """Check that a string has the syntax of an absolute URI."""
    return bool(value) and bool(URI_PATTERN.match(value))


def _same(value: str) -> str:
    return value


def _always(value: str) -> bool:
    return True


def normalize_target(value: str) -> str:
    # placeholders are matched case-insensitively but stored uppercase
    value = re.sub(r"\{id\}", "{ID}", value, flags=re.IGNORECASE)
    return re.sub(r"\{label\}", "{LABEL}", value, flags=re.IGNORECASE)


def is_target_template(value: str) -> bool:
    uri = PLACEHOLDER_PATTERN.sub("", value)
    return uri != value and is_uri(uri)


def normalize_revisit(value: str) -> str:
    """
    Parse a REVISIT timestamp into ISO-8601 form.

    Calendar overflow rolls forward ("2010-02-31" → "2010-03-03").
    Integers of five or more digits are read as seconds since the
    epoch (UTC). Shorter ones, such as a bare year, are rejected.

    Raises:
        ValidationError: if the value is not a date/time at all
    """
    if EPOCH_PATTERN.match(value):
        try:
            moment = datetime.fromtimestamp(int(value), tz=timezone.utc)
        except (OverflowError, ValueError, OSError):
            raise ValidationError(f"REVISIT out of range: {value}")
        return moment.strftime(ISO_FORMAT)

    match = REVISIT_PATTERN.match(value)
    if not match:
        raise ValidationError("REVISIT must be of form YYYY-MM-DDTHH:MM:SS")

    year, month, day, hour, minute, second = (
        int(part) if part else 0 for part in match.groups()
    )
    try:
        moment = datetime(year + (month - 1) // 12, (month - 1) % 12 + 1, 1)
        moment += timedelta(days=day - 1, hours=hour, minutes=minute, seconds=second)
    except (OverflowError, ValueError):
        raise ValidationError(f"REVISIT out of range: {value}")
    return moment.strftime(ISO_FORMAT)


def normalize_examples(value: str) -> str:
    ids = [part.strip() for part in value.split("|")]
    return "|".join(part for part in ids if part)


def normalize_count(value: str) -> str:
    if not COUNT_PATTERN.match(value):
        raise ValidationError("COUNT must be a non-negative integer")
    return str(int(value))


class FieldRule(NamedTuple):
    """How one reserved field is normalized and then checked."""
    normalize: Callable[[str], str]
    validate: Callable[[str], bool]
    message: str


FIELD_RULES: Dict[str, FieldRule] = {
    "FORMAT": FieldRule(
        _same,
        lambda v: bool(FORMAT_PATTERN.match(v)),
        "Invalid FORMAT, must be BEACON or end with -BEACON",
    ),
    "PREFIX": FieldRule(_same, is_uri, "PREFIX must be URI"),
    "FEED": FieldRule(
        _same,
        lambda v: bool(FEED_PATTERN.match(v)) and is_uri(v),
        "FEED must be HTTP or HTTPS URL",
    ),
    "TARGET": FieldRule(
        normalize_target,
        is_target_template,
        "TARGET must be URI pattern with {ID} and/or {LABEL}",
    ),
    "REVISIT": FieldRule(normalize_revisit, _always, ""),
    "EXAMPLES": FieldRule(normalize_examples, _always, ""),
    "COUNT": FieldRule(normalize_count, _always, ""),
}
