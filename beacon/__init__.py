# ==============================================
# Beacon Link-Dump Toolkit
# ==============================================
#
# Package Structure (4 Topics + Config):
#
# beacon/
# ├── meta/       # Topic 1: Meta fields (#NAME: value header)
# ├── links/      # Topic 2: Body lines (parse, expand, render)
# ├── reader/     # Topic 3: Pull-based reader state machine
# ├── storage/    # Topic 4: Database-backed beacon (MySQL)
# ├── config.py   # Configuration management
# └── errors.py   # Exceptions + recorded error types
#
# ==============================================

__version__ = "0.1.0"

from beacon.errors import (
    ArgumentError,
    BeaconError,
    ErrorKind,
    ErrorRecord,
    ValidationError,
)
from beacon.meta.field_store import MetaFieldStore
from beacon.links.line_parser import LinkLineParser, LinkTuple, LineError, render
from beacon.links.expander import ExpandedLink, LinkExpander
from beacon.reader.line_source import LineSource
from beacon.reader.beacon_reader import BeaconReader, Phase

__all__ = [
    "ArgumentError",
    "BeaconError",
    "BeaconReader",
    "ErrorKind",
    "ErrorRecord",
    "ExpandedLink",
    "LineError",
    "LineSource",
    "LinkExpander",
    "LinkLineParser",
    "LinkTuple",
    "MetaFieldStore",
    "Phase",
    "ValidationError",
    "render",
]
