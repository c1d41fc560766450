"""
Configuration module for lucenesearch.

This module provides configuration management including
loading settings from YAML files and environment variables.

Example:
    >>> from config import Settings, load_config
    >>> 
    >>> settings = load_config()
    >>> print(settings.query.per_page)
    >>> print(settings.index.models)
"""

from .settings import (
    Settings,
    IndexSettings,
    ModelSettings,
    QuerySettings,
    load_config,
    get_default_config_path,
)

__all__ = [
    "Settings",
    "IndexSettings",
    "ModelSettings",
    "QuerySettings",
    "load_config",
    "get_default_config_path",
]
