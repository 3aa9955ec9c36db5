"""
Block Filter Table Schema

Named-column descriptor for the per-variant filter tables and the SQL
statements built from it. Table names only ever come from the filter
type allow-list; every value is a bound parameter.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple, Union

from blockfilter.constants import FILTER_NAME_PATTERN
from blockfilter.core.types import FilterType, filter_type_name
from blockfilter.errors import UnknownFilterTypeError, SchemaMismatchError


@dataclass(frozen=True)
class Column:
    name: str
    sql_type: str
    not_null: bool
    pk_position: int = 0          # 1-based position in the primary key, 0 if not part of it

    def ddl(self) -> str:
        return f"{self.name} {self.sql_type}" + (" NOT NULL" if self.not_null else "")


FILTER_COLUMNS: Tuple[Column, ...] = (
    Column("height", "INTEGER", not_null=False, pk_position=1),
    Column("block_identity", "BLOB", not_null=True, pk_position=2),
    Column("filter_header_hash", "BLOB", not_null=True),
    Column("filter_bytes", "BLOB", not_null=True),
)

COLUMN_NAMES: str = ", ".join(c.name for c in FILTER_COLUMNS)

_NAME_RE = re.compile(FILTER_NAME_PATTERN)


@dataclass(frozen=True)
class FilterTable:
    """SQL for one filter variant's table."""
    name: str

    @property
    def create_sql(self) -> str:
        columns = ", ".join(c.ddl() for c in FILTER_COLUMNS)
        pk = ", ".join(
            c.name for c in sorted(FILTER_COLUMNS, key=lambda c: c.pk_position)
            if c.pk_position
        )
        return f"CREATE TABLE IF NOT EXISTS {self.name} ({columns}, PRIMARY KEY ({pk}))"

    @property
    def table_info_sql(self) -> str:
        return f"PRAGMA table_info({self.name})"

    @property
    def wipe_sql(self) -> str:
        return f"DELETE FROM {self.name}"

    @property
    def select_active_range_sql(self) -> str:
        return (
            f"SELECT {COLUMN_NAMES} FROM {self.name} "
            "WHERE height BETWEEN ? AND ? ORDER BY height DESC"
        )

    @property
    def select_displaced_sql(self) -> str:
        return (
            f"SELECT {COLUMN_NAMES} FROM {self.name} "
            "WHERE height IS NULL AND block_identity = ? LIMIT 1"
        )

    @property
    def select_header_sql(self) -> str:
        return (
            f"SELECT filter_header_hash FROM {self.name} "
            "WHERE (height = ? OR height IS NULL) AND block_identity = ? LIMIT 1"
        )

    @property
    def select_occupants_sql(self) -> str:
        return f"SELECT block_identity FROM {self.name} WHERE height = ?"

    @property
    def insert_sql(self) -> str:
        return (
            f"INSERT OR REPLACE INTO {self.name} ({COLUMN_NAMES}) "
            "VALUES (?, ?, ?, ?)"
        )

    @property
    def reactivate_sql(self) -> str:
        return (
            f"UPDATE {self.name} SET height = ?, filter_header_hash = ?, filter_bytes = ? "
            "WHERE height IS NULL AND block_identity = ?"
        )

    @property
    def drop_redundant_sql(self) -> str:
        return (
            f"DELETE FROM {self.name} WHERE height BETWEEN ? AND ? AND block_identity IN "
            f"(SELECT block_identity FROM {self.name} WHERE height IS NULL)"
        )

    @property
    def displace_sql(self) -> str:
        return f"UPDATE {self.name} SET height = NULL WHERE height BETWEEN ? AND ?"

    @property
    def count_sql(self) -> str:
        return (
            f"SELECT COUNT(*) AS total, COUNT(height) AS active, MAX(height) AS best_height "
            f"FROM {self.name}"
        )

    def verify(self, table_info: Sequence[Sequence]) -> None:
        """
        Check PRAGMA table_info rows against FILTER_COLUMNS.

        Rows are (cid, name, type, notnull, dflt_value, pk).

        Raises:
            SchemaMismatchError: columns differ in name, order, type,
                nullability or primary key membership
        """
        if len(table_info) != len(FILTER_COLUMNS):
            raise SchemaMismatchError(
                self.name,
                f"expected {len(FILTER_COLUMNS)} columns, found {len(table_info)}"
            )

        for row, column in zip(table_info, FILTER_COLUMNS):
            _, name, sql_type, notnull, _, pk = tuple(row)
            if name != column.name:
                raise SchemaMismatchError(self.name, f"column {name!r} where {column.name!r} expected")
            if sql_type.upper() != column.sql_type:
                raise SchemaMismatchError(self.name, f"column {name} has type {sql_type}")
            if bool(notnull) != column.not_null:
                raise SchemaMismatchError(self.name, f"column {name} nullability differs")
            if pk != column.pk_position:
                raise SchemaMismatchError(self.name, f"column {name} primary key position {pk}")


_TABLES: Dict[FilterType, FilterTable] = {}


def table_for(filter_type: Union[FilterType, int]) -> FilterTable:
    """
    Table for a filter variant.

    Raises:
        UnknownFilterTypeError: variant has no allow-listed name
    """
    name = filter_type_name(filter_type)
    if not name or not _NAME_RE.match(name):
        raise UnknownFilterTypeError(filter_type)

    key = FilterType(int(filter_type))
    table = _TABLES.get(key)
    if table is None:
        table = _TABLES[key] = FilterTable(name)
    return table


def known_tables() -> List[FilterTable]:
    return [table_for(ft) for ft in FilterType]
