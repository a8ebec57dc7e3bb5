# ==============================================
# TOPIC 3: READING
# ==============================================
#
# This package drives a link dump from raw lines to expanded links.
#
# Modules:
# --------
# - line_source.py   → LineSource (path / text / file / iterator / callable)
# - base.py          → BeaconBase (error channel, handlers, last link)
# - beacon_reader.py → BeaconReader (HEADER → BODY → DONE state machine)
#
# ==============================================

from .line_source import LineSource
from .base import BeaconBase
from .beacon_reader import BeaconReader, Phase

__all__ = ["BeaconBase", "BeaconReader", "LineSource", "Phase"]
