"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, positive_int_env_var
from .errors import ConfigurationError
from .logging import configure_logging
from .merge import DEFAULT_MERGE_ATTEMPTS, MergeConfig, get_merge_config
from .storage import StorageConfig, get_storage_config

__all__ = [
    "DEFAULT_MERGE_ATTEMPTS",
    "ConfigurationError",
    "MergeConfig",
    "StorageConfig",
    "configure_logging",
    "get_merge_config",
    "get_storage_config",
    "optional_env_var",
    "positive_int_env_var",
]
