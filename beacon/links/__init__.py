# ==============================================
# TOPIC 2: LINKS
# ==============================================
#
# This package handles the body of a link dump: one short link
# record per line.
#
# Modules:
# --------
# - line_parser.py → LinkLineParser (line → LinkTuple), render (LinkTuple → line)
# - expander.py    → LinkExpander (PREFIX / TARGET expansion)
#
# ==============================================

from .line_parser import LinkLineParser, LinkTuple, LineError, render
from .expander import ExpandedLink, LinkExpander

__all__ = ["ExpandedLink", "LineError", "LinkExpander", "LinkLineParser", "LinkTuple", "render"]
