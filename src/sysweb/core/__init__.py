"""Core infrastructure modules."""

from .global_paths import GlobalPath

__all__ = ["GlobalPath"]

# Config is exported from core.config to avoid circular imports with util.log
# To use: from sysweb.core.config import ConfigManager
