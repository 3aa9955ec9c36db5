"""
Block Filter Index Constants

All index constants defined here for single source of truth.
"""

from typing import Final, Dict, Tuple

# ==============================================================================
# HASHES
# ==============================================================================

HASH_SIZE: Final[int] = 32                      # Block identity / filter header

# ==============================================================================
# FILTER VARIANTS
# ==============================================================================

FILTER_TYPE_BASIC: Final[int] = 0x00
FILTER_TYPE_EXTENDED: Final[int] = 0x01

# Fixed allow-list: variant -> table name. Table names are spliced into SQL
# text, so nothing outside this map may ever become one.
FILTER_TYPE_NAMES: Final[Dict[int, str]] = {
    FILTER_TYPE_BASIC: "basic",
    FILTER_TYPE_EXTENDED: "extended",
}

FILTER_NAME_PATTERN: Final[str] = r"^[a-z][a-z0-9_]*$"

# ==============================================================================
# STORAGE
# ==============================================================================

MEMORY_DB_PATH: Final[str] = ":memory:"
DB_FILENAME_TEMPLATE: Final[str] = "block_filter_{name}.sqlite"
DEFAULT_DATA_DIR: Final[str] = "./data"

DEFAULT_CACHE_SIZE_BYTES: Final[int] = 16 * 1024 * 1024   # 16 MiB
DEFAULT_COMMIT_INTERVAL: Final[int] = 1000                 # blocks per commit

SYNCHRONOUS_MODES: Final[Tuple[str, ...]] = ("OFF", "NORMAL", "FULL")
DEFAULT_SYNCHRONOUS: Final[str] = "OFF"
