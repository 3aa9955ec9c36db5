"""
Block Filter Store

SQLite persistence for one filter variant. The store keeps a write
transaction open from open() until close(); callers end it with commit(),
which immediately begins the next one.
"""

from __future__ import annotations
import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from blockfilter.constants import (
    MEMORY_DB_PATH,
    DEFAULT_CACHE_SIZE_BYTES,
    DEFAULT_SYNCHRONOUS,
    SYNCHRONOUS_MODES,
)
from blockfilter.core.types import Hash, FilterType
from blockfilter.core.record import FilterRecord
from blockfilter.errors import (
    InvalidParameterError,
    StorageFailureError,
    StoreClosedError,
)
from blockfilter.index.schema import FilterTable, FILTER_COLUMNS, table_for, known_tables

logger = logging.getLogger(__name__)


class FilterStore:
    """
    Transactional filter table for one variant.

    Rows on the active chain carry their height; rows for displaced
    blocks carry height NULL and are found by block identity.
    """

    def __init__(
        self,
        filter_type: Union[FilterType, int],
        path: Union[str, Path] = MEMORY_DB_PATH,
        cache_size: int = DEFAULT_CACHE_SIZE_BYTES,
        wipe: bool = False,
        synchronous: str = DEFAULT_SYNCHRONOUS,
    ):
        # Resolve the table first: an unknown variant must fail before
        # anything touches the disk.
        self.table: FilterTable = table_for(filter_type)
        self.filter_type = FilterType(int(filter_type))

        if cache_size < 0:
            raise InvalidParameterError("cache_size", "must be non-negative")
        if synchronous.upper() not in SYNCHRONOUS_MODES:
            raise InvalidParameterError("synchronous", f"must be one of {SYNCHRONOUS_MODES}")

        self.path = str(path)
        self.cache_size = cache_size
        self.wipe = wipe
        self.synchronous = synchronous.upper()
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def name(self) -> str:
        return self.table.name

    @property
    def in_memory(self) -> bool:
        return self.path == MEMORY_DB_PATH

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def open(self) -> None:
        """Open the database, prepare the table and begin a transaction."""
        if self._conn is not None:
            return

        if not self.in_memory:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        try:
            self._conn = sqlite3.connect(
                self.path,
                isolation_level=None,  # Transactions are managed explicitly
                check_same_thread=False,
            )
            self._conn.row_factory = sqlite3.Row

            self._conn.execute(f"PRAGMA cache_size=-{self.cache_size >> 10}")  # in -KiB
            self._conn.execute(f"PRAGMA synchronous={self.synchronous}")
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA temp_store=MEMORY")
            self._conn.execute("PRAGMA case_sensitive_like=true")

            self._conn.execute(self.table.create_sql)
            self.table.verify(self._conn.execute(self.table.table_info_sql).fetchall())

            if self.wipe:
                deleted = self._conn.execute(self.table.wipe_sql).rowcount
                logger.info(f"Wiped {deleted} rows from filter table {self.name}")

            self._conn.execute("BEGIN")
        except sqlite3.Error as e:
            self._abandon()
            raise StorageFailureError("open", e) from e
        except Exception:
            self._abandon()
            raise

        logger.info(f"Opened filter store {self.name}: {self.path}")

    def commit(self) -> None:
        """Commit the open transaction and begin the next one."""
        conn = self._require_open()
        try:
            conn.execute("COMMIT")
            conn.execute("BEGIN")
        except sqlite3.Error as e:
            raise StorageFailureError("commit", e) from e
        logger.debug(f"Committed filter store {self.name}")

    def close(self) -> None:
        """Commit outstanding writes and close the connection."""
        if self._conn is None:
            return
        try:
            if self._conn.in_transaction:
                self._conn.execute("COMMIT")
        except sqlite3.Error as e:
            raise StorageFailureError("close", e) from e
        finally:
            self._conn.close()
            self._conn = None
        logger.info(f"Closed filter store {self.name}")

    def _abandon(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _require_open(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreClosedError(self.name)
        return self._conn

    def _execute(self, operation: str, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        conn = self._require_open()
        try:
            return conn.execute(sql, params)
        except sqlite3.Error as e:
            raise StorageFailureError(operation, e) from e

    def __enter__(self) -> "FilterStore":
        self.open()
        return self

    def __exit__(self, *args) -> None:
        self.close()

    # =========================================================================
    # Reads
    # =========================================================================

    def fetch_active_range(self, low: int, high: int) -> List[FilterRecord]:
        """Height-keyed rows with low <= height <= high, highest first."""
        cursor = self._execute("fetch_active_range", self.table.select_active_range_sql, (low, high))
        return [FilterRecord.from_row(row) for row in cursor.fetchall()]

    def fetch_displaced(self, block_identity: Hash) -> Optional[FilterRecord]:
        """Identity-keyed (height NULL) row for a block, if any."""
        cursor = self._execute(
            "fetch_displaced", self.table.select_displaced_sql, (block_identity.data,)
        )
        row = cursor.fetchone()
        return FilterRecord.from_row(row) if row is not None else None

    def fetch_header(self, height: int, block_identity: Hash) -> Optional[Hash]:
        """Filter header of a block, whether active at height or displaced."""
        cursor = self._execute(
            "fetch_header", self.table.select_header_sql, (height, block_identity.data)
        )
        row = cursor.fetchone()
        return Hash(bytes(row["filter_header_hash"])) if row is not None else None

    def fetch_occupants(self, height: int) -> List[Hash]:
        """Identities of active rows at a height."""
        cursor = self._execute("fetch_occupants", self.table.select_occupants_sql, (height,))
        return [Hash(bytes(row["block_identity"])) for row in cursor.fetchall()]

    def count(self) -> Dict[str, Any]:
        row = self._execute("count", self.table.count_sql).fetchone()
        return {
            "total": row["total"],
            "active": row["active"],
            "displaced": row["total"] - row["active"],
            "best_height": row["best_height"],
        }

    # =========================================================================
    # Writes
    # =========================================================================

    def write_record(self, record: FilterRecord) -> None:
        """
        Store an active-chain record.

        A displaced row for the same block is reactivated in place so the
        block keeps exactly one record.
        """
        if record.height is None:
            raise InvalidParameterError("record", "active-chain records need a height")

        cursor = self._execute(
            "write_record",
            self.table.reactivate_sql,
            (
                record.height,
                record.filter_header_hash.data,
                record.filter_bytes,
                record.block_identity.data,
            ),
        )
        if cursor.rowcount > 0:
            logger.debug(
                f"Reactivated {record.block_identity.hex()[:16]} at height {record.height}"
            )
            return

        self._execute(
            "write_record",
            self.table.insert_sql,
            (
                record.height,
                record.block_identity.data,
                record.filter_header_hash.data,
                record.filter_bytes,
            ),
        )

    def displace_range(self, low: int, high: int) -> int:
        """
        Move active rows with low <= height <= high to the identity index.

        An active row whose block already has a displaced row is dropped
        instead, keeping one record per block.

        Returns:
            Number of active rows removed from the height index
        """
        dropped = self._execute("displace_range", self.table.drop_redundant_sql, (low, high)).rowcount
        if dropped:
            logger.warning(f"Dropped {dropped} redundant rows from {self.name} while displacing")
        moved = self._execute("displace_range", self.table.displace_sql, (low, high)).rowcount
        return dropped + moved

    def statistics(self) -> Dict[str, Any]:
        stats = {
            "name": self.name,
            "path": self.path,
            "file_size_bytes": self.get_database_size(),
        }
        stats.update(self.count())
        return stats

    def get_database_size(self) -> int:
        """Database file size in bytes (0 for in-memory stores)."""
        if self.in_memory:
            return 0
        path = Path(self.path)
        if path.exists():
            return path.stat().st_size
        return 0


def get_storage_info() -> dict:
    """Get information about filter storage."""
    return {
        "backend": "SQLite",
        "tables": [table.name for table in known_tables()],
        "columns": [column.ddl() for column in FILTER_COLUMNS],
        "features": [
            "WAL mode",
            "height index for the active chain",
            "identity index for displaced blocks",
            "long-lived write transaction",
        ],
    }
