# ==============================================
# Errors
# ==============================================
#
# PURPOSE:
#   Two error channels:
#
#   1. RAISED — misuse of the direct configuration API.
#        ArgumentError    → odd pair count, non-string name, bad name token,
#                           non-callable handler
#        ValidationError  → reserved meta field given an invalid value
#
#   2. RECORDED — anything met while driving a reader (header scan, body
#      scan, end-of-stream checks, handler dispatch). These never raise;
#      they bump errorcount and replace lasterror.
#        ErrorKind        → which kind of condition was recorded
#        ErrorRecord      → (message, line, raw_line)
#
# ==============================================

from enum import Enum
from typing import NamedTuple


class BeaconError(Exception):
    """Base class for all raised beacon errors."""


class ArgumentError(BeaconError, ValueError):
    """Bad direct API usage. Never counted toward errorcount."""


class ValidationError(BeaconError, ValueError):
    """A reserved meta field was given a value it does not accept."""


class ErrorKind(Enum):
    VALIDATION = "validation"
    PARSE = "parse"
    CONSISTENCY = "consistency"
    SOURCE = "source"
    HANDLER = "handler"


class ErrorRecord(NamedTuple):
    """
    A recorded (not raised) error.

    Unpacks as a (message, line, raw_line) triple; str() gives
    just the message.
    """
    message: str
    line: int = 0
    raw_line: str = ""

    def __str__(self) -> str:
        return self.message
