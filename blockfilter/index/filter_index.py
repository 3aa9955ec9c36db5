"""
Block Filter Index

Filters for blocks on the active chain are indexed by height; filters for
blocks that a reorganization has displaced are indexed by block identity.
Filter data for any block that was ever part of the active chain therefore
stays retrievable, while lookups along the current chain use the height
index.
"""

from __future__ import annotations
import dataclasses
import logging
import threading
from pathlib import Path
from typing import Callable, Dict, List, Tuple, TypeVar, Union

from blockfilter.constants import (
    DB_FILENAME_TEMPLATE,
    DEFAULT_CACHE_SIZE_BYTES,
    DEFAULT_COMMIT_INTERVAL,
    DEFAULT_DATA_DIR,
    DEFAULT_SYNCHRONOUS,
    MEMORY_DB_PATH,
)
from blockfilter.core.types import Hash, FilterType, parse_filter_type
from blockfilter.core.record import FilterRecord
from blockfilter.core.chain import ChainNode, iter_ancestors, is_ancestor
from blockfilter.errors import (
    RangeError,
    IncompleteCoverageError,
    NotAncestorError,
    HeightConflictError,
    InvalidParameterError,
)
from blockfilter.index.result import LookupResult
from blockfilter.index.schema import table_for
from blockfilter.index.store import FilterStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def filter_db_path(data_dir: Union[str, Path], filter_type: Union[FilterType, int, str]) -> Path:
    """Database file for a filter variant inside a data directory."""
    name = table_for(parse_filter_type(filter_type)).name
    return Path(data_dir) / DB_FILENAME_TEMPLATE.format(name=name)


class BlockFilterIndex:
    """
    Filter index for one filter variant.

    All access to the underlying store is serialized by an instance lock,
    so lookups may be issued from any thread while one thread writes.
    """

    def __init__(
        self,
        filter_type: Union[FilterType, int, str],
        cache_size: int = DEFAULT_CACHE_SIZE_BYTES,
        in_memory: bool = False,
        wipe: bool = False,
        data_dir: Union[str, Path] = DEFAULT_DATA_DIR,
        commit_interval: int = DEFAULT_COMMIT_INTERVAL,
        synchronous: str = DEFAULT_SYNCHRONOUS,
    ):
        self.filter_type = parse_filter_type(filter_type)

        if commit_interval < 0:
            raise InvalidParameterError("commit_interval", "must be non-negative")
        self.commit_interval = commit_interval

        path = MEMORY_DB_PATH if in_memory else filter_db_path(data_dir, self.filter_type)
        self._store = FilterStore(
            self.filter_type,
            path=path,
            cache_size=cache_size,
            wipe=wipe,
            synchronous=synchronous,
        )
        self._lock = threading.RLock()
        self._pending = 0

        self._store.open()

    @property
    def name(self) -> str:
        return self._store.name

    @property
    def store(self) -> FilterStore:
        return self._store

    @property
    def is_open(self) -> bool:
        return self._store.is_open

    @property
    def pending_writes(self) -> int:
        """Writes since the last commit."""
        return self._pending

    def __repr__(self) -> str:
        return f"BlockFilterIndex({self.name}, path={self._store.path})"

    # =========================================================================
    # Point Lookups
    # =========================================================================

    def lookup_filter(self, node: ChainNode) -> LookupResult[FilterRecord]:
        """Filter record for one block."""
        result = self.lookup_filter_range(node.height, node)
        if not result:
            return LookupResult.failure(result.error)
        return LookupResult.success(result.value[0])

    def lookup_filter_header(self, node: ChainNode) -> LookupResult[Hash]:
        """Filter header for one block."""
        result = self.lookup_filter_hash_range(node.height, node)
        if not result:
            return LookupResult.failure(result.error)
        return LookupResult.success(result.value[0])

    # =========================================================================
    # Range Lookups
    # =========================================================================

    def lookup_filter_range(
        self,
        start_height: int,
        stop_node: ChainNode,
    ) -> LookupResult[List[FilterRecord]]:
        """
        Filter records for stop_node and its ancestors down to start_height.

        Returns records highest height first. The lookup either resolves
        every height in [start_height, stop_node.height] or fails as a
        whole; a short list is never returned.
        """
        return self._lookup("lookup_filter_range", self._collect_filter_range, start_height, stop_node)

    def lookup_filter_hash_range(
        self,
        start_height: int,
        stop_node: ChainNode,
    ) -> LookupResult[List[Hash]]:
        """Filter headers for the same span as lookup_filter_range."""
        return self._lookup("lookup_filter_hash_range", self._collect_hash_range, start_height, stop_node)

    def _lookup(
        self,
        operation: str,
        collect: Callable[[int, ChainNode], T],
        start_height: int,
        stop_node: ChainNode,
    ) -> LookupResult[T]:
        try:
            with self._lock:
                return LookupResult.success(collect(start_height, stop_node))
        except RangeError as e:
            logger.error(f"{operation}: {e.message}")
            return LookupResult.failure(e)
        except IncompleteCoverageError as e:
            logger.debug(f"{operation} on {self.name}: {e.message}")
            return LookupResult.failure(e)

    def _collect_filter_range(self, start_height: int, stop_node: ChainNode) -> List[FilterRecord]:
        # Walk the whole span before touching the store so a malformed
        # chain is always reported as a range error.
        nodes = list(iter_ancestors(stop_node, start_height))

        # Fast path: everything the height index holds for the span.
        active: Dict[Tuple[int, Hash], FilterRecord] = {
            (record.height, record.block_identity): record
            for record in self._store.fetch_active_range(start_height, stop_node.height)
        }

        records: List[FilterRecord] = []
        for node in nodes:
            record = active.get((node.height, node.identity))
            if record is None:
                # Not on the active chain any more; look it up by identity.
                record = self._store.fetch_displaced(node.identity)
                if record is None:
                    raise IncompleteCoverageError(start_height, stop_node.height, node.height)
                record = dataclasses.replace(record, height=node.height)
            records.append(record)

        return records

    def _collect_hash_range(self, start_height: int, stop_node: ChainNode) -> List[Hash]:
        nodes = list(iter_ancestors(stop_node, start_height))

        headers: List[Hash] = []
        for node in nodes:
            header = self._store.fetch_header(node.height, node.identity)
            if header is None:
                raise IncompleteCoverageError(start_height, stop_node.height, node.height)
            headers.append(header)

        return headers

    # =========================================================================
    # Insertion Path
    # =========================================================================

    def write_filter(
        self,
        node: ChainNode,
        filter_bytes: bytes,
        filter_header_hash: Hash,
    ) -> FilterRecord:
        """
        Record the filter of a block connected to the active chain.

        Raises:
            HeightConflictError: another block holds node.height on the
                active chain; rewind() it first
        """
        record = FilterRecord(
            height=node.height,
            block_identity=node.identity,
            filter_header_hash=filter_header_hash,
            filter_bytes=bytes(filter_bytes),
        )

        with self._lock:
            for occupant in self._store.fetch_occupants(node.height):
                if occupant != node.identity:
                    raise HeightConflictError(node.height, occupant.data, node.identity.data)

            self._store.write_record(record)
            self._pending += 1

            if self.commit_interval and self._pending >= self.commit_interval:
                self._commit_locked()

        return record

    def rewind(self, current_tip: ChainNode, new_tip: ChainNode) -> int:
        """
        Move filters of blocks above new_tip out of the height index.

        Called when the active chain is reorganized from current_tip back to
        new_tip; the displaced filters stay retrievable by block identity.

        Returns:
            Number of records displaced
        """
        with self._lock:
            if not is_ancestor(new_tip, current_tip):
                raise NotAncestorError(new_tip.height, current_tip.height)
            if new_tip.height == current_tip.height:
                return 0

            displaced = self._store.displace_range(new_tip.height + 1, current_tip.height)

        logger.info(
            f"Rewound {self.name} from height {current_tip.height} to {new_tip.height}: "
            f"{displaced} filters displaced"
        )
        return displaced

    def commit(self) -> None:
        """Commit pending writes and begin a new transaction."""
        with self._lock:
            self._commit_locked()

    def _commit_locked(self) -> None:
        self._store.commit()
        logger.debug(f"Committed {self._pending} filters to {self.name}")
        self._pending = 0

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Commit pending writes and release the store."""
        with self._lock:
            self._store.close()
            self._pending = 0

    def __enter__(self) -> "BlockFilterIndex":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def statistics(self) -> dict:
        with self._lock:
            stats = self._store.statistics()
        stats["filter_type"] = int(self.filter_type)
        stats["pending_writes"] = self._pending
        return stats


def get_index_info() -> dict:
    """Get information about the filter index."""
    return {
        "filter_types": {ft.name.lower(): table_for(ft).name for ft in FilterType},
        "active_chain_key": "height",
        "displaced_key": "block_identity",
        "lookup_order": "highest height first",
        "failure_mode": "whole range fails, never a partial result",
        "default_commit_interval": DEFAULT_COMMIT_INTERVAL,
    }
