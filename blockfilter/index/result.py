"""
Block Filter Lookup Results
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from blockfilter.errors import BlockFilterError

T = TypeVar("T")


@dataclass(frozen=True)
class LookupResult(Generic[T]):
    """
    Outcome of a lookup: either a value or the error that prevented it.

    Falsy on failure, so callers can write `if not result: ...`.
    """
    value: Optional[T] = None
    error: Optional[BlockFilterError] = None

    def __post_init__(self):
        if (self.value is None) == (self.error is None):
            raise ValueError("LookupResult needs exactly one of value or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return self.error.message if self.error is not None else ""

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: T) -> "LookupResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BlockFilterError) -> "LookupResult[T]":
        return cls(error=error)
