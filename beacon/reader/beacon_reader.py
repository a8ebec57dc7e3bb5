# ==============================================
# BeaconReader — Pull-Based Reader
# ==============================================
#
# PURPOSE:
#   Read one link dump from a LineSource. This is the class users
#   interact with; everything else in the package is used by it.
#
# STATE MACHINE:
#
#   ┌────────┐  first body-shaped line   ┌──────┐  source exhausted  ┌──────┐
#   │ HEADER │ ────────────────────────▶ │ BODY │ ─────────────────▶ │ DONE │
#   └────────┘  (or end of input)        └──────┘  deferred checks   └──────┘
#
#   HEADER  "#NAME: value" lines go into the MetaFieldStore. Bad names
#           or values are recorded and scanning goes on. Runs as soon
#           as a source is bound, so meta() is ready right away.
#   BODY    nextlink() pulls one physical line at a time, skips blank
#           and comment lines, records bad lines and moves on, and
#           returns the next ExpandedLink. Expansion uses the meta
#           snapshot taken when the header ended.
#   DONE    Reached once, when the source runs dry. COUNT and EXAMPLES
#           are checked here and mismatches are recorded.
#
# CLASS: BeaconReader
# -------------------
#   Constructor:
#   ------------
#   - __init__(source=None, link=None, error=None, config=None)
#
#   Public Methods:
#   ---------------
#   - nextlink() -> ExpandedLink | None
#   - parse(source=None, link=None, error=None) -> bool
#   - meta(*args)            get all / get one / set pairs
#   - metafields() -> str    canonical header text
#   - count(), line(), errorcount(), lasterror(), link(), phase()
#   - append_link(id, label, description, target) -> str | None
#   - expand(link) -> ExpandedLink
#
# ==============================================

import os
import re
from enum import Enum
from typing import Any, Dict, Optional

from beacon.config import AppConfig
from beacon.errors import ArgumentError, ErrorKind, ValidationError
from beacon.links.expander import ExpandedLink, LinkExpander
from beacon.links.line_parser import LineError, LinkLineParser, LinkTuple, render
from beacon.meta.field_store import MetaFieldStore
from beacon.meta.validators import is_uri
from beacon.reader.base import BeaconBase
from beacon.reader.line_source import LineSource


HEADER_LINE = re.compile(r"^#([^:=\s]+)\s*[:=]?\s*(.*)$")
BYTE_ORDER_MARK = "\ufeff"


class Phase(Enum):
    HEADER = "header"
    BODY = "body"
    DONE = "done"


class BeaconReader(BeaconBase):
    """
    Single-pass reader of a link dump.

    Errors met while reading are never raised. They show up in
    errorcount() / lasterror() and in the result of parse().
    """

    def __init__(self, source: Any = None, link: Any = None, error: Any = None,
                 config: Optional[AppConfig] = None):
        """
        Args:
            source: Path, text, file object, iterator or callable (see LineSource).
                A single-line str such as "a:b|c:d" is read as text unless a
                file of that name exists.
            link: Handler called with every ExpandedLink during parse()
            error: Handler called with every recorded ErrorRecord
            config: Application configuration. If None, loads from environment.

        Raises:
            ArgumentError: if a handler is not callable
        """
        super().__init__(config)
        self._set_handlers(link, error)

        self._meta = MetaFieldStore()
        self._source: Optional[LineSource] = None
        self._phase = Phase.DONE
        self._lookahead: Optional[str] = None
        self._link_count = 0
        self._snapshot: Dict[str, str] = {}
        self._expander = LinkExpander()
        self._declared_count: Optional[int] = None
        self._pending_examples: Dict[str, str] = {}
        # errorcount when the current pass was bound, None once parse() reported it
        self._pass_errors: Optional[int] = None

        if source is not None:
            self._bind(source)

    # ==============================================
    # Binding and header scan
    # ==============================================

    def _bind(self, source: Any) -> None:
        # a new pass discards the old cursor
        if self._source is not None:
            self._source.close()

        self._meta = MetaFieldStore()
        self._source = None
        self._phase = Phase.HEADER
        self._lookahead = None
        self._line = 0
        self._link_count = 0
        self._link = None
        self._expander = LinkExpander()
        self._declared_count = None
        self._pending_examples = {}
        self._pass_errors = self._errorcount

        try:
            self._source = LineSource.open(source, self._config.reader.encoding)
        except (OSError, TypeError):
            self._phase = Phase.DONE
            self._handle_error(f"Failed to open {_describe(source)}", ErrorKind.SOURCE)
            return

        self._scan_header()

    def _scan_header(self) -> None:
        while True:
            line = self._pull()
            if line is None:
                break
            if line.strip() == "":
                continue
            if not line.startswith("#"):
                self._lookahead = line
                break

            match = HEADER_LINE.match(line)
            if not match:
                continue  # comment
            try:
                self._meta.set(match.group(1), match.group(2))
            except (ArgumentError, ValidationError) as e:
                self._handle_error(e, ErrorKind.VALIDATION, raw_line=line)

        self._start_body()

    def _start_body(self) -> None:
        self._snapshot = self._meta.get()
        self._expander = LinkExpander(self._snapshot)
        self._declared_count = self._meta.declared_count()
        self._pending_examples = {
            example: self._expander.full_id(example)
            for example in self._meta.examples()
        }
        self._phase = Phase.BODY

    def _pull(self) -> Optional[str]:
        """Next physical line from the source, or None at the end."""
        failures = 0
        while True:
            try:
                line = self._source.readline()
            except Exception as e:
                failures += 1
                self._handle_error(f"Failed to read line: {e}", ErrorKind.SOURCE)
                if failures >= self._config.reader.max_source_failures:
                    self._source.close()
                    return None
                continue

            if line is None:
                return None
            self._line += 1
            if self._line == 1 and line.startswith(BYTE_ORDER_MARK):
                line = line[len(BYTE_ORDER_MARK):]
            return line

    # ==============================================
    # Body
    # ==============================================

    def nextlink(self) -> Optional[ExpandedLink]:
        """
        Read up to the next valid link.

        Returns:
            The next ExpandedLink, or None when there are no more links
        """
        if self._phase != Phase.BODY:
            return None

        while True:
            if self._lookahead is not None:
                line, self._lookahead = self._lookahead, None
            else:
                line = self._pull()

            if line is None:
                self._finish()
                return None

            link = self._read_link(line)
            if link is not None:
                return link

    def _read_link(self, line: str) -> Optional[ExpandedLink]:
        if line.lstrip().startswith("#"):
            return None

        parsed = LinkLineParser.parse(line, positional=self._expander.has_template)
        if parsed is None:
            return None
        if isinstance(parsed, LineError):
            self._handle_error(parsed.message, ErrorKind.PARSE, raw_line=line)
            return None
        if not is_uri(self._expander.full_id(parsed.id)):
            self._handle_error("id must be URI", ErrorKind.PARSE, raw_line=line)
            return None

        link = self._expander.expand(parsed)
        self._accept(link)
        return link

    def _accept(self, link: ExpandedLink) -> None:
        self._link = link
        self._link_count += 1
        if self._pending_examples:
            self._pending_examples = {
                example: full_id
                for example, full_id in self._pending_examples.items()
                if example != link.id and full_id != link.full_id
            }

    def _finish(self) -> None:
        self._phase = Phase.DONE
        if self._source is not None:
            self._source.close()

        if self._declared_count is not None and self._declared_count != self._link_count:
            self._handle_error(
                f"expected {self._declared_count} links, but got {self._link_count}",
                ErrorKind.CONSISTENCY,
            )
        if self._pending_examples:
            missing = next(iter(self._pending_examples))
            self._handle_error(f"examples not found: {missing}", ErrorKind.CONSISTENCY)

    def open(self, source: Any) -> bool:
        """
        Bind a new source and scan its header, without reading links.

        Returns:
            True if the source could be opened
        """
        self._bind(source)
        return self._source is not None

    # ==============================================
    # Bulk driver
    # ==============================================

    def parse(self, source: Any = None, link: Any = None, error: Any = None) -> bool:
        """
        Read all remaining links, optionally from a new source.

        Args:
            source: New source to bind before reading (starts a new pass)
            link: Handler called with every ExpandedLink
            error: Handler called with every recorded ErrorRecord

        Returns:
            True if no error was recorded during this call. The first
            call of a pass counts every error since the source was
            bound, so a failed open or a bad header field makes it False.

        Raises:
            ArgumentError: if a handler is not callable
        """
        self._set_handlers(link, error)
        errors_before = self._errorcount

        if source is not None:
            self._bind(source)
        if self._pass_errors is not None:
            errors_before = min(errors_before, self._pass_errors)
            self._pass_errors = None
        self._drain()

        return self._errorcount == errors_before

    # ==============================================
    # Meta fields and accessors
    # ==============================================

    def meta(self, *args: Any) -> Any:
        """
        meta()                  → dict of all fields
        meta(name)              → value or None
        meta(name, value, ...)  → set fields (raises on misuse)

        Fields set here do not change the expansion of a pass that
        is already reading its body.
        """
        if not args:
            return self._meta.get()
        if len(args) == 1:
            return self._meta.get(args[0])
        self._meta.set(*args)
        return None

    def metafields(self) -> str:
        return self._meta.serialize(self._link_count)

    def count(self) -> int:
        """Declared COUNT if set, else the number of links read so far."""
        declared = self._meta.declared_count()
        return declared if declared is not None else self._link_count

    def phase(self) -> Phase:
        return self._phase

    def expand(self, link: LinkTuple) -> ExpandedLink:
        return self._expander.expand(link)

    def append_link(self, id: str, label: str = "", description: str = "",
                    target: str = "") -> Optional[str]:
        """
        Check and count a link given as separate fields.

        Expansion uses the current meta fields. A bad link is recorded
        like a bad body line.

        Returns:
            The canonical body line, or None if the link was rejected
        """
        parsed = LinkTuple(*(("" if part is None else str(part)).strip()
                             for part in (id, label, description, target)))
        expander = LinkExpander(self._meta.get())

        message = None
        if parsed.id == "":
            message = "missing id"
        elif parsed.target != "" and not is_uri(parsed.target):
            message = LinkLineParser.INVALID_TARGET
        elif not is_uri(expander.full_id(parsed.id)):
            message = "id must be URI"

        line = render(parsed)
        if message is not None:
            self._handle_error(message, ErrorKind.PARSE, raw_line=line)
            return None

        self._link = expander.expand(parsed)
        self._link_count += 1
        return line


def _describe(source: Any) -> str:
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    return getattr(source, "name", None) or type(source).__name__
