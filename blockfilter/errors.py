"""
Block Filter Index Error Handling

All error codes and exception classes.
"""

from enum import IntEnum
from typing import Optional, Any


class ErrorCode(IntEnum):
    """Index error codes."""

    # 1xxx - General errors
    UNKNOWN_ERROR = 1000
    INVALID_PARAMETER = 1001

    # 2xxx - Configuration errors
    UNKNOWN_FILTER_TYPE = 2001
    INVALID_CONFIG = 2002

    # 3xxx - Range errors
    NEGATIVE_START_HEIGHT = 3001
    START_ABOVE_STOP = 3002
    BROKEN_ANCESTRY = 3003
    NOT_AN_ANCESTOR = 3004

    # 4xxx - Coverage errors
    INCOMPLETE_COVERAGE = 4001

    # 5xxx - Storage errors
    STORAGE_FAILURE = 5001
    SCHEMA_MISMATCH = 5002
    STORE_CLOSED = 5003

    # 6xxx - Insertion errors
    HEIGHT_CONFLICT = 6001


class BlockFilterError(Exception):
    """Base exception for all block filter index errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Any] = None
    ):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for diagnostics."""
        result = {
            "code": self.code.value,
            "name": self.code.name,
            "message": self.message,
        }
        if self.details is not None:
            result["details"] = self.details
        return result


# ==============================================================================
# General Errors (1xxx)
# ==============================================================================

class InvalidParameterError(BlockFilterError):
    def __init__(self, param: str, message: str = ""):
        msg = f"Invalid parameter: {param}"
        if message:
            msg += f" - {message}"
        super().__init__(ErrorCode.INVALID_PARAMETER, msg, {"parameter": param})


# ==============================================================================
# Configuration Errors (2xxx)
# ==============================================================================

class ConfigurationError(BlockFilterError):
    """Construction-time failure; the instance is never created."""


class UnknownFilterTypeError(ConfigurationError):
    def __init__(self, filter_type: Any):
        super().__init__(
            ErrorCode.UNKNOWN_FILTER_TYPE,
            f"Unknown filter type: {filter_type!r}",
            {"filter_type": repr(filter_type)}
        )


class InvalidConfigError(ConfigurationError):
    def __init__(self, errors: list):
        super().__init__(
            ErrorCode.INVALID_CONFIG,
            f"Invalid configuration: {'; '.join(errors)}",
            {"errors": list(errors)}
        )


# ==============================================================================
# Range Errors (3xxx)
# ==============================================================================

class RangeError(BlockFilterError):
    """Malformed lookup range or ancestor walk."""


class NegativeStartHeightError(RangeError):
    def __init__(self, start_height: int):
        super().__init__(
            ErrorCode.NEGATIVE_START_HEIGHT,
            f"start height ({start_height}) is negative",
            {"start_height": start_height}
        )


class StartAboveStopError(RangeError):
    def __init__(self, start_height: int, stop_height: int):
        super().__init__(
            ErrorCode.START_ABOVE_STOP,
            f"start height ({start_height}) is greater than stop height ({stop_height})",
            {"start_height": start_height, "stop_height": stop_height}
        )


class BrokenAncestryError(RangeError):
    def __init__(self, height: int, reason: str):
        super().__init__(
            ErrorCode.BROKEN_ANCESTRY,
            f"Ancestor walk broken at height {height}: {reason}",
            {"height": height, "reason": reason}
        )


class NotAncestorError(RangeError):
    def __init__(self, ancestor_height: int, tip_height: int):
        super().__init__(
            ErrorCode.NOT_AN_ANCESTOR,
            f"Block at height {ancestor_height} is not an ancestor of tip at height {tip_height}",
            {"ancestor_height": ancestor_height, "tip_height": tip_height}
        )


# ==============================================================================
# Coverage Errors (4xxx)
# ==============================================================================

class IncompleteCoverageError(BlockFilterError):
    def __init__(self, start_height: int, stop_height: int, missing_height: int):
        super().__init__(
            ErrorCode.INCOMPLETE_COVERAGE,
            f"No filter recorded for height {missing_height} "
            f"in range [{start_height}, {stop_height}]",
            {
                "start_height": start_height,
                "stop_height": stop_height,
                "missing_height": missing_height,
            }
        )


# ==============================================================================
# Storage Errors (5xxx)
# ==============================================================================

class StorageError(BlockFilterError):
    """Underlying engine failure. Always propagated."""


class StorageFailureError(StorageError):
    def __init__(self, operation: str, error: Exception):
        super().__init__(
            ErrorCode.STORAGE_FAILURE,
            f"Storage failure during {operation}: {error}",
            {"operation": operation, "error": str(error)}
        )


class SchemaMismatchError(StorageError):
    def __init__(self, table: str, reason: str):
        super().__init__(
            ErrorCode.SCHEMA_MISMATCH,
            f"Table {table} does not match the filter schema: {reason}",
            {"table": table, "reason": reason}
        )


class StoreClosedError(StorageError):
    def __init__(self, name: str):
        super().__init__(
            ErrorCode.STORE_CLOSED,
            f"Filter store {name} is closed",
            {"name": name}
        )


# ==============================================================================
# Insertion Errors (6xxx)
# ==============================================================================

class InsertionError(BlockFilterError):
    """Write rejected by the active-chain contract; the store is unchanged."""


class HeightConflictError(InsertionError):
    def __init__(self, height: int, occupant: bytes, incoming: bytes):
        super().__init__(
            ErrorCode.HEIGHT_CONFLICT,
            f"Height {height} already holds block {occupant.hex()[:16]}... "
            f"on the active chain, cannot write {incoming.hex()[:16]}...",
            {"height": height, "occupant": occupant.hex(), "incoming": incoming.hex()}
        )
