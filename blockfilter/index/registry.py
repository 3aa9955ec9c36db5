"""
Block Filter Index Registry

Owns the open BlockFilterIndex instances, at most one per filter variant.
"""

from __future__ import annotations
import logging
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union, TYPE_CHECKING

from blockfilter.constants import (
    DEFAULT_COMMIT_INTERVAL,
    DEFAULT_DATA_DIR,
    DEFAULT_SYNCHRONOUS,
)
from blockfilter.core.types import FilterType, parse_filter_type
from blockfilter.errors import InvalidConfigError, UnknownFilterTypeError
from blockfilter.index.filter_index import BlockFilterIndex

if TYPE_CHECKING:
    from blockfilter.config import IndexConfig

logger = logging.getLogger(__name__)


class FilterIndexRegistry:
    """
    Keyed collection of filter indexes.

    Construction settings shared by every index (data directory, commit
    interval, synchronous mode) are fixed per registry; cache size and
    the memory/wipe flags are chosen per init() call.
    """

    def __init__(
        self,
        data_dir: Union[str, Path] = DEFAULT_DATA_DIR,
        commit_interval: int = DEFAULT_COMMIT_INTERVAL,
        synchronous: str = DEFAULT_SYNCHRONOUS,
    ):
        self.data_dir = Path(data_dir)
        self.commit_interval = commit_interval
        self.synchronous = synchronous
        self._indexes: Dict[FilterType, BlockFilterIndex] = {}
        self._lock = threading.Lock()

    def init(
        self,
        filter_type: Union[FilterType, int, str],
        cache_size: int,
        in_memory: bool = False,
        wipe: bool = False,
    ) -> bool:
        """
        Create and register the index for a filter variant.

        Returns:
            True if created, False if the variant is already registered
            (the existing index is left untouched)

        Raises:
            ConfigurationError: unknown filter variant
        """
        key = parse_filter_type(filter_type)

        with self._lock:
            if key in self._indexes:
                logger.warning(f"Filter index {key.name.lower()} already initialized")
                return False

            self._indexes[key] = BlockFilterIndex(
                key,
                cache_size=cache_size,
                in_memory=in_memory,
                wipe=wipe,
                data_dir=self.data_dir,
                commit_interval=self.commit_interval,
                synchronous=self.synchronous,
            )
            return True

    def get(self, filter_type: Union[FilterType, int, str]) -> Optional[BlockFilterIndex]:
        """Registered index for a variant, or None."""
        try:
            key = parse_filter_type(filter_type)
        except UnknownFilterTypeError:
            return None
        with self._lock:
            return self._indexes.get(key)

    def for_each(self, fn: Callable[[BlockFilterIndex], None]) -> None:
        """Call fn on every registered index. Order is unspecified."""
        with self._lock:
            indexes = list(self._indexes.values())
        for index in indexes:
            fn(index)

    def destroy(self, filter_type: Union[FilterType, int, str]) -> bool:
        """
        Close and unregister one index.

        Returns:
            True if removed, False if the variant was not registered
        """
        try:
            key = parse_filter_type(filter_type)
        except UnknownFilterTypeError:
            return False
        with self._lock:
            index = self._indexes.pop(key, None)
            if index is None:
                return False
            index.close()
        return True

    def destroy_all(self) -> None:
        """Close and unregister every index."""
        with self._lock:
            indexes = list(self._indexes.values())
            self._indexes.clear()
            for index in indexes:
                index.close()
        if indexes:
            logger.info(f"Closed {len(indexes)} filter indexes")

    def filter_types(self) -> List[FilterType]:
        with self._lock:
            return list(self._indexes)

    def __contains__(self, filter_type: Union[FilterType, int, str]) -> bool:
        return self.get(filter_type) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._indexes)

    def __enter__(self) -> "FilterIndexRegistry":
        return self

    def __exit__(self, *args) -> None:
        self.destroy_all()

    @classmethod
    def from_config(cls, config: "IndexConfig") -> "FilterIndexRegistry":
        """
        Build a registry and initialize every configured filter variant.

        Raises:
            InvalidConfigError: config.validate() reported errors
        """
        errors = config.validate()
        if errors:
            raise InvalidConfigError(errors)

        registry = cls(
            data_dir=config.store.data_dir,
            commit_interval=config.store.commit_interval,
            synchronous=config.store.synchronous,
        )
        try:
            for name in config.filter_types:
                registry.init(
                    name,
                    cache_size=config.store.cache_size_bytes,
                    in_memory=config.store.in_memory,
                    wipe=config.store.wipe,
                )
        except Exception:
            registry.destroy_all()
            raise
        return registry
