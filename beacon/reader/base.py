# ==============================================
# BeaconBase
# ==============================================
#
# PURPOSE:
#   What every beacon shares, no matter where its links come from
#   (text stream or database table):
#     - the recorded-error channel (errorcount / lasterror)
#     - link and error handlers, and their protection
#     - the last link handed out
#     - the bulk drain loop used by parse()
#
#   Subclasses provide nextlink().
#
# ==============================================

from typing import Any, Callable, Iterator, Optional

from beacon.config import AppConfig, get_config
from beacon.errors import ArgumentError, ErrorKind, ErrorRecord
from beacon.links.expander import ExpandedLink


class BeaconBase:

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or get_config()
        self._errorcount = 0
        self._lasterror: Optional[ErrorRecord] = None
        self._lasterror_kind: Optional[ErrorKind] = None
        self._link: Optional[ExpandedLink] = None
        self._link_handler: Optional[Callable] = None
        self._error_handler: Optional[Callable] = None
        self._line = 0

    # --- accessors ---

    def errorcount(self) -> int:
        return self._errorcount

    def lasterror(self) -> Optional[ErrorRecord]:
        """(message, line, raw_line) of the last recorded error, or None."""
        return self._lasterror

    def lasterror_kind(self) -> Optional[ErrorKind]:
        return self._lasterror_kind

    def line(self) -> int:
        return self._line

    def link(self) -> Optional[ExpandedLink]:
        """The last link that was read successfully."""
        return self._link

    def nextlink(self) -> Optional[ExpandedLink]:
        raise NotImplementedError

    def __iter__(self) -> Iterator[ExpandedLink]:
        while True:
            link = self.nextlink()
            if link is None:
                return
            yield link

    # --- handlers ---

    def _set_handlers(self, link: Any = None, error: Any = None) -> None:
        for name, handler in (("link", link), ("error", error)):
            if handler is None:
                continue
            if not callable(handler):
                raise ArgumentError(f"{name} handler must be callable")
            setattr(self, f"_{name}_handler", handler)

    def _dispatch_link(self, link: ExpandedLink) -> None:
        if self._link_handler is None:
            return
        try:
            self._link_handler(link)
        except Exception as e:
            self._handle_error(f"link handler died: {e}", ErrorKind.HANDLER)

    def _drain(self) -> None:
        """Pull links until the end, feeding each one to the link handler."""
        for link in self:
            self._dispatch_link(link)

    # --- error channel ---

    def _handle_error(self, message: Any, kind: ErrorKind,
                      line: Optional[int] = None, raw_line: str = "") -> None:
        record = self._record_error(message, kind, line, raw_line)
        if self._error_handler is None:
            return
        try:
            self._error_handler(record)
        except Exception as e:
            # not passed to the error handler again
            self._record_error(f"error handler died: {e}", ErrorKind.HANDLER, line, raw_line)

    def _record_error(self, message: Any, kind: ErrorKind,
                      line: Optional[int], raw_line: str) -> ErrorRecord:
        record = ErrorRecord(
            str(message),
            self._line if line is None else line,
            raw_line or "",
        )
        self._errorcount += 1
        self._lasterror = record
        self._lasterror_kind = kind
        if self._config.reader.verbose:
            print(f"✗ line {record.line}: {record.message}")
        return record
