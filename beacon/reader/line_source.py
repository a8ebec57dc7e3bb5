# ==============================================
# LineSource
# ==============================================
#
# PURPOSE:
#   Give the reader ONE way to pull lines, whatever the caller hands
#   in. Every source becomes a "next line or None" callable.
#
# ACCEPTED SOURCES (LineSource.open):
# -----------------------------------
#   LineSource            → used as is
#   str with a line break → in-memory text
#   str that is no file   → in-memory text if it starts with "#" or holds a "|"
#   str / os.PathLike     → file system path (opened right away)
#   object with readline  → file-like object ("" means end)
#   iterator / generator  → next() until StopIteration
#   callable              → called with no arguments, None means end
#
#   Lines come back without their line break. bytes are decoded
#   with the configured encoding.
#
# FAILURES:
# ---------
#   open() raises OSError for unreadable paths and TypeError for
#   unsupported objects. readline() lets whatever the underlying
#   source raises propagate; the reader records it.
#
# ==============================================

import io
import os
from typing import Any, Callable, Optional


class LineSource:
    """A pull-based producer of raw lines."""

    def __init__(self, pull: Callable[[], Any], name: str = "<callable>",
                 encoding: str = "utf-8", on_close: Optional[Callable[[], None]] = None):
        self._pull = pull
        self._encoding = encoding
        self._on_close = on_close
        self.name = name
        self.exhausted = False

    @classmethod
    def from_text(cls, text: str, name: str = "<text>") -> "LineSource":
        buffer = io.StringIO(text)
        return cls(_readline_puller(buffer.readline), name)

    @classmethod
    def from_path(cls, path, encoding: str = "utf-8") -> "LineSource":
        handle = open(path, "r", encoding=encoding, newline="")
        return cls(_readline_puller(handle.readline), os.fspath(path), encoding, handle.close)

    @classmethod
    def from_file(cls, handle, encoding: str = "utf-8") -> "LineSource":
        name = getattr(handle, "name", "<file>")
        return cls(_readline_puller(handle.readline), str(name), encoding)

    @classmethod
    def open(cls, source: Any, encoding: str = "utf-8") -> "LineSource":
        """
        Wrap any supported source.

        Args:
            source: See ACCEPTED SOURCES above
            encoding: Used for paths and for bytes coming from callables

        Returns:
            LineSource ready to pull from

        Raises:
            OSError: path cannot be opened
            TypeError: unsupported source type
        """
        if isinstance(source, LineSource):
            return source
        if isinstance(source, str) and _looks_like_text(source):
            return cls.from_text(source)
        if isinstance(source, (str, os.PathLike)):
            return cls.from_path(source, encoding)
        if hasattr(source, "readline"):
            return cls.from_file(source, encoding)
        if hasattr(source, "__next__"):
            return cls(lambda: next(source, None), "<iterator>", encoding)
        if callable(source):
            return cls(source, getattr(source, "__name__", "<callable>"), encoding)
        raise TypeError(f"unsupported line source: {type(source).__name__}")

    def readline(self) -> Optional[str]:
        """Next line without its line break, or None once exhausted."""
        if self.exhausted:
            return None

        line = self._pull()
        if line is None:
            self.close()
            return None

        if isinstance(line, bytes):
            line = line.decode(self._encoding)
        return str(line).rstrip("\r\n")

    def close(self) -> None:
        self.exhausted = True
        if self._on_close is not None:
            self._on_close()
            self._on_close = None


def _readline_puller(readline: Callable[[], Any]) -> Callable[[], Any]:
    # file-style readline returns "" at end of input
    def pull():
        line = readline()
        return line if line else None
    return pull


def _looks_like_text(source: str) -> bool:
    if "\n" in source or "\r" in source:
        return True
    # a single header or link line, unless a file of that name exists
    return (source.startswith("#") or "|" in source) and not os.path.exists(source)
