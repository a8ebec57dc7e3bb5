# ==============================================
# TOPIC 1: META FIELDS
# ==============================================
#
# This package handles the document-level named values found in the
# header of a link dump ("#NAME: value" lines).
#
# Modules:
# --------
# - validators.py   → URI syntax, REVISIT date parsing, per-field rule table
# - field_store.py  → MetaFieldStore (get / set / serialize)
#
# ==============================================

from .validators import FIELD_RULES, FieldRule, is_uri
from .field_store import MetaFieldStore

__all__ = ["FIELD_RULES", "FieldRule", "MetaFieldStore", "is_uri"]
