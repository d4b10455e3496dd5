"""
Large Object Store Configuration Settings

This module contains the configuration constants for the paging adapter
and the in-memory backend. Every value can be overridden through an
environment variable; constructors fall back to these when an argument
is left as None.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Adapter and backend configuration settings."""

    # Slab limits of the backing store
    MAX_OBJECT_SIZE: int = int(os.environ.get("LARGE_OBJECT_STORE_MAX_OBJECT_SIZE", str(1024 ** 2)))
    ITEM_HEADER_SIZE: int = int(os.environ.get("LARGE_OBJECT_STORE_ITEM_HEADER_SIZE", "100"))
    MAX_PAGES: int = int(os.environ.get("LARGE_OBJECT_STORE_MAX_PAGES", "65536"))

    # Entry codec settings
    COMPRESSION_LEVEL: int = int(os.environ.get("LARGE_OBJECT_STORE_COMPRESSION_LEVEL", "6"))

    # In-memory backend settings
    MAX_KEYS: int = int(os.environ.get("LARGE_OBJECT_STORE_MAX_KEYS", "10000"))
    MAX_BYTES: int = int(os.environ.get("LARGE_OBJECT_STORE_MAX_BYTES", "0"))  # 0 means unbounded
    DEFAULT_TTL: int = 0  # 0 means no expiration

    # Logging settings
    DEBUG: bool = os.environ.get("LARGE_OBJECT_STORE_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("LARGE_OBJECT_STORE_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
