# ==============================================
# MySQLBeacon
# ==============================================
#
# PURPOSE:
#   A beacon whose meta fields and links live in MySQL tables
#   instead of a text stream. Read-only.
#
# TABLES:
# -------
#   beacons (bname, bmeta, bvalue)                       → one row per meta field
#   links   (bname, source, label, description, target)  → one row per link
#
#   Table names come from MySQLConfig (beacons_table / links_table).
#
# CLASS: MySQLBeacon
# ------------------
#   Stateful — holds a connection and, while iterating, a cursor.
#
#   Constructor:
#   ------------
#   - __init__(name, connection=None, config=None)
#       Use the given DB-API connection, or connect() later.
#
#   Methods:
#   --------
#   - connect() / disconnect(), context manager
#   - exists() -> bool            → a FORMAT row exists for this name
#   - meta([name]) -> dict | str  → always includes COUNT
#   - count() -> int              → SELECT COUNT(*)
#   - line() -> int               → always 0, there are no lines
#   - parse(link=None, error=None) -> bool
#   - nextlink() -> ExpandedLink | None
#   - query(source) -> list[ExpandedLink] | None
#
#   Expansion uses the meta fields cached when parse() starts.
#   Database failures are recorded, not raised.
#
# ==============================================

from typing import Any, Dict, List, Optional

import pymysql

from beacon.config import AppConfig
from beacon.errors import ArgumentError, ErrorKind
from beacon.links.expander import ExpandedLink, LinkExpander
from beacon.links.line_parser import LinkTuple
from beacon.reader.base import BeaconBase


class MySQLBeacon(BeaconBase):

    def __init__(self, name: str, connection: Any = None, config: Optional[AppConfig] = None):
        super().__init__(config)
        if not isinstance(name, str) or not name.strip():
            raise ArgumentError("beacon name must be a non-empty string")
        self.name = name
        self.connection = connection
        self._mysql = self._config.mysql
        self._cursor = None
        self._cached_meta: Dict[str, str] = {}
        self._expander = LinkExpander()

    def connect(self) -> None:
        self.connection = pymysql.connect(
            host=self._mysql.host,
            port=self._mysql.port,
            user=self._mysql.user,
            password=self._mysql.password,
            database=self._mysql.database,
            charset="utf8mb4",
        )
        print(f"✓ Connected to MySQL {self._mysql.host}:{self._mysql.port}/{self._mysql.database}")

    def disconnect(self) -> None:
        self._finish_cursor()
        if self.connection:
            self.connection.close()
            self.connection = None

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()

    # ==============================================
    # Meta fields
    # ==============================================

    def meta(self, *args: Any) -> Any:
        """
        meta()      → dict of all fields, COUNT included
        meta(name)  → one value or None

        Raises:
            ArgumentError: when called with more than one argument
        """
        if len(args) > 1:
            raise ArgumentError("meta fields of a stored beacon cannot be changed")

        fields = self._fetch_meta()
        if args:
            name = args[0]
            if not isinstance(name, str):
                raise ArgumentError("meta field name must be a string")
            return fields.get(name.strip().upper())
        return fields

    def _fetch_meta(self) -> Dict[str, str]:
        rows = self._fetch_all(
            f"SELECT bmeta, bvalue FROM {self._mysql.beacons_table} WHERE bname = %s",
            (self.name,),
        )
        if not rows:
            return {}
        fields = {str(key).upper(): str(value) for key, value in rows}
        fields["COUNT"] = str(self.count())
        return fields

    def exists(self) -> bool:
        return "FORMAT" in self._fetch_meta()

    def count(self) -> int:
        """Number of links stored for this beacon, or zero."""
        rows = self._fetch_all(
            f"SELECT COUNT(*) FROM {self._mysql.links_table} WHERE bname = %s",
            (self.name,),
        )
        if not rows:
            return 0
        return int(rows[0][0])

    def line(self) -> int:
        return 0

    # ==============================================
    # Iteration
    # ==============================================

    def parse(self, link: Any = None, error: Any = None) -> bool:
        """
        Iterate over all stored links.

        Args:
            link: Handler called with every ExpandedLink
            error: Handler called with every recorded ErrorRecord

        Returns:
            True if no error was recorded during this call
        """
        self._set_handlers(link, error)
        errors_before = self._errorcount

        self._finish_cursor()
        self._cached_meta = self._fetch_meta()
        self._expander = LinkExpander(self._cached_meta)

        if self.connection is None:
            self._handle_error(f"Failed to open beacon {self.name}: not connected", ErrorKind.SOURCE)
            return False

        try:
            self._cursor = self.connection.cursor()
            self._cursor.execute(
                f"SELECT source, label, description, target FROM {self._mysql.links_table} "
                "WHERE bname = %s",
                (self.name,),
            )
        except pymysql.MySQLError as e:
            self._cursor = None
            self._handle_error(e, ErrorKind.SOURCE)
        else:
            self._drain()

        return self._errorcount == errors_before

    def nextlink(self) -> Optional[ExpandedLink]:
        if self._cursor is None:
            return None

        try:
            row = self._cursor.fetchone()
        except pymysql.MySQLError as e:
            self._handle_error(e, ErrorKind.SOURCE)
            row = None

        if row is None:
            self._finish_cursor()
            return None

        self._link = self._expand_row(row)
        return self._link

    def query(self, source: str) -> Optional[List[ExpandedLink]]:
        """
        All links of this beacon with the given source id.

        Returns:
            List of ExpandedLink, None if the query failed
        """
        if not self._cached_meta:
            self._cached_meta = self._fetch_meta()
            self._expander = LinkExpander(self._cached_meta)

        rows = self._fetch_all(
            f"SELECT source, label, description, target FROM {self._mysql.links_table} "
            "WHERE bname = %s AND source = %s",
            (self.name, source),
        )
        if rows is None:
            return None
        return [self._expand_row(row) for row in rows]

    # ==============================================
    # Internal helpers
    # ==============================================

    def _expand_row(self, row) -> ExpandedLink:
        link = LinkTuple(*(("" if value is None else str(value)) for value in row[:4]))
        return self._expander.expand(link)

    def _fetch_all(self, query: str, params: tuple) -> Optional[list]:
        # Execute SELECT and return rows as tuples, None on failure
        if self.connection is None:
            return None
        cursor = None
        try:
            cursor = self.connection.cursor()
            cursor.execute(query, params)
            return list(cursor.fetchall())
        except pymysql.MySQLError as e:
            self._handle_error(e, ErrorKind.SOURCE)
            return None
        finally:
            if cursor is not None:
                cursor.close()

    def _finish_cursor(self) -> None:
        if self._cursor is not None:
            self._cursor.close()
            self._cursor = None
