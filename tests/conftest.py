# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - config          → AppConfig with defaults (quiet, no .env)
# - reader_factory  → build a BeaconReader from text with that config
# - fake_db         → in-memory stand-in for a pymysql connection
#
# ==============================================

import pymysql
import pytest

from beacon.config import AppConfig
from beacon.reader.beacon_reader import BeaconReader


@pytest.fixture
def config():
    """Default configuration, independent of the environment."""
    return AppConfig()


@pytest.fixture
def reader_factory(config):
    """Build a reader over in-memory text."""
    def make(text, **kwargs):
        return BeaconReader(text, config=config, **kwargs)
    return make


class FakeCursor:
    """Answers the few SELECTs MySQLBeacon sends."""

    def __init__(self, db):
        self.db = db
        self.rows = []
        self.closed = False

    def execute(self, query, params=None):
        self.db.queries.append((query, params))
        if self.db.fail_on and self.db.fail_on in query:
            raise pymysql.MySQLError("lost connection")

        name = params[0]
        if "FROM beacons" in query:
            self.rows = [(k, v) for (b, k, v) in self.db.meta if b == name]
        elif "COUNT(*)" in query:
            self.rows = [(sum(1 for row in self.db.links if row[0] == name),)]
        elif "AND source" in query:
            self.rows = [row[1:] for row in self.db.links if row[0] == name and row[1] == params[1]]
        else:
            self.rows = [row[1:] for row in self.db.links if row[0] == name]

    def fetchall(self):
        rows, self.rows = self.rows, []
        return rows

    def fetchone(self):
        return self.rows.pop(0) if self.rows else None

    def close(self):
        self.closed = True


class FakeConnection:

    def __init__(self):
        self.meta = []
        self.links = []
        self.queries = []
        self.fail_on = None
        self.closed = False

    def cursor(self):
        return FakeCursor(self)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_db():
    """A connection holding one beacon named "gnd"."""
    db = FakeConnection()
    db.meta = [
        ("gnd", "FORMAT", "BEACON"),
        ("gnd", "PREFIX", "http://d-nb.info/gnd/"),
        ("gnd", "TARGET", "http://example.org/{ID}"),
    ]
    db.links = [
        ("gnd", "118540238", "Goethe", "", None),
        ("gnd", "118607626", "Schiller", "poet", ""),
    ]
    return db
