"""
Block Filter Index Async Worker

Runs blocking index lookups on a dedicated worker thread so asyncio
callers never wait on SQLite I/O inside the event loop.
"""

from __future__ import annotations
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, List, Optional

from blockfilter.core.types import Hash
from blockfilter.core.record import FilterRecord
from blockfilter.core.chain import ChainNode
from blockfilter.index.filter_index import BlockFilterIndex
from blockfilter.index.result import LookupResult

logger = logging.getLogger(__name__)


class AsyncFilterIndex:
    """
    Async facade over a BlockFilterIndex.

    Calls are queued on a single worker thread and run in submission
    order. The facade does not own the index; close() only stops the
    worker.
    """

    def __init__(self, index: BlockFilterIndex, executor: Optional[ThreadPoolExecutor] = None):
        self.index = index
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix=f"filter-{index.name}",
        )

    async def _run(self, fn: Callable[..., Any], *args) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, partial(fn, *args))

    async def lookup_filter(self, node: ChainNode) -> LookupResult[FilterRecord]:
        return await self._run(self.index.lookup_filter, node)

    async def lookup_filter_header(self, node: ChainNode) -> LookupResult[Hash]:
        return await self._run(self.index.lookup_filter_header, node)

    async def lookup_filter_range(
        self, start_height: int, stop_node: ChainNode
    ) -> LookupResult[List[FilterRecord]]:
        return await self._run(self.index.lookup_filter_range, start_height, stop_node)

    async def lookup_filter_hash_range(
        self, start_height: int, stop_node: ChainNode
    ) -> LookupResult[List[Hash]]:
        return await self._run(self.index.lookup_filter_hash_range, start_height, stop_node)

    async def write_filter(
        self, node: ChainNode, filter_bytes: bytes, filter_header_hash: Hash
    ) -> FilterRecord:
        return await self._run(self.index.write_filter, node, filter_bytes, filter_header_hash)

    async def commit(self) -> None:
        await self._run(self.index.commit)

    def close(self) -> None:
        """Stop the worker thread after queued calls finish."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)
            logger.debug(f"Stopped filter worker for {self.index.name}")

    async def __aenter__(self) -> "AsyncFilterIndex":
        return self

    async def __aexit__(self, *args) -> None:
        # Wait for queued calls on another thread, not on the event loop.
        await asyncio.get_running_loop().run_in_executor(None, self.close)
