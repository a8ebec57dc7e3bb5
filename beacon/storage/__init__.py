# ==============================================
# TOPIC 4: STORAGE
# ==============================================
#
# Beacons kept in a database instead of a text stream. They answer
# the same read calls as BeaconReader (meta, count, nextlink, parse,
# errorcount, lasterror, link).
#
# Modules:
# --------
# - mysql_beacon.py → MySQLBeacon (pymysql)
#
# ==============================================

from .mysql_beacon import MySQLBeacon

__all__ = ["MySQLBeacon"]
