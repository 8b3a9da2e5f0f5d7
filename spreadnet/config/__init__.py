"""Configuration loading and validation."""

from .records import decode_records, encode_records
from .settings import (
    DEFAULT_CONFIG,
    POPULATE_FILE,
    POPULATE_MANUAL,
    POPULATE_RANDOM,
    NetworkConfig,
    load_config,
    resolve_config,
)

__all__ = [
    "DEFAULT_CONFIG",
    "POPULATE_FILE",
    "POPULATE_MANUAL",
    "POPULATE_RANDOM",
    "NetworkConfig",
    "decode_records",
    "encode_records",
    "load_config",
    "resolve_config",
]
