"""
Block Filter Index Configuration
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import List, Optional

from blockfilter.constants import (
    DEFAULT_CACHE_SIZE_BYTES,
    DEFAULT_COMMIT_INTERVAL,
    DEFAULT_DATA_DIR,
    DEFAULT_SYNCHRONOUS,
    FILTER_TYPE_NAMES,
    SYNCHRONOUS_MODES,
)
from blockfilter.index.filter_index import filter_db_path

logger = logging.getLogger(__name__)


@dataclass
class StoreConfig:
    """Storage configuration."""
    data_dir: str = DEFAULT_DATA_DIR
    cache_size_bytes: int = DEFAULT_CACHE_SIZE_BYTES
    in_memory: bool = False
    wipe: bool = False
    commit_interval: int = DEFAULT_COMMIT_INTERVAL   # blocks; 0 = commit only on request
    synchronous: str = DEFAULT_SYNCHRONOUS


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_size_mb: int = 100
    backup_count: int = 5


@dataclass
class IndexConfig:
    """
    Complete filter index configuration.

    One index is opened per entry in filter_types.
    """
    filter_types: List[str] = field(default_factory=lambda: ["basic"])
    store: StoreConfig = field(default_factory=StoreConfig)
    log: LogConfig = field(default_factory=LogConfig)

    def db_path(self, filter_type: str) -> Path:
        """Database file for one variant."""
        return filter_db_path(self.store.data_dir, filter_type)

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        known = set(FILTER_TYPE_NAMES.values())
        for name in self.filter_types:
            if name not in known:
                errors.append(f"Unknown filter type: {name}")
        if len(set(self.filter_types)) != len(self.filter_types):
            errors.append("filter_types contains duplicates")

        if not self.store.in_memory and not self.store.data_dir:
            errors.append("data_dir cannot be empty")

        if self.store.cache_size_bytes < 0:
            errors.append("cache_size_bytes must be non-negative")

        if self.store.commit_interval < 0:
            errors.append("commit_interval must be non-negative")

        if self.store.synchronous.upper() not in SYNCHRONOUS_MODES:
            errors.append(f"Invalid synchronous mode: {self.store.synchronous}")

        if not isinstance(getattr(logging, self.log.level.upper(), None), int):
            errors.append(f"Invalid log level: {self.log.level}")

        return errors

    def save(self, path: str) -> None:
        """Save configuration to file."""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.info(f"Configuration saved to {path}")

    @classmethod
    def load(cls, path: str) -> "IndexConfig":
        """Load configuration from file."""
        with open(path, 'r') as f:
            data = json.load(f)

        config = cls()

        if "filter_types" in data:
            config.filter_types = list(data["filter_types"])

        if "store" in data:
            config.store = StoreConfig(**data["store"])

        if "log" in data:
            config.log = LogConfig(**data["log"])

        logger.info(f"Configuration loaded from {path}")
        return config

    def to_dict(self) -> dict:
        """Export configuration as dictionary."""
        return {
            "filter_types": list(self.filter_types),
            "store": asdict(self.store),
            "log": asdict(self.log),
        }


def setup_logging(config: LogConfig) -> None:
    """Configure logging based on config."""
    level = getattr(logging, config.level.upper(), logging.INFO)

    handlers = [logging.StreamHandler()]

    if config.file:
        from logging.handlers import RotatingFileHandler
        file_handler = RotatingFileHandler(
            config.file,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=handlers,
    )
