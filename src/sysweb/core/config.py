"""Configuration management.

Loads and merges configuration from multiple sources with proper precedence.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .config_loader import deep_merge, load_json_file, parse_json_text
from .config_schema import ApplicationConfig, Config, LoggingConfig
from .global_paths import GlobalPath
from ..util.log import Log

log = Log.create({"service": "config"})

__all__ = [
    "ApplicationConfig",
    "Config",
    "ConfigError",
    "ConfigManager",
    "LoggingConfig",
]

CONFIG_FILENAMES = ("sysweb.json", "sysweb.jsonc")


class ConfigError(Exception):
    """Configuration error."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Config error in {path}: {message}")


class ConfigManager:
    """Process-wide configuration cache.

    Sources, lowest to highest precedence:
    1. Global config (``sysweb.json`` in the user config directory)
    2. Project config (``sysweb.json`` in the working directory)
    3. File named by ``SYSWEB_CONFIG``
    4. Inline JSON in ``SYSWEB_CONFIG_CONTENT``
    5. ``SYSWEB_LOG_LEVEL`` override
    """

    _cache: Optional[Config] = None
    _sources: List[str] = []

    @classmethod
    def reset(cls) -> None:
        """Drop cached configuration."""
        cls._cache = None
        cls._sources = []

    @classmethod
    def get(cls) -> Config:
        if cls._cache is None:
            return cls.load()
        return cls._cache

    @classmethod
    def sources(cls) -> List[str]:
        """Files and variables that contributed to the cached configuration."""
        return cls._sources.copy()

    @classmethod
    def load(cls, directory: str = ".") -> Config:
        result: Dict[str, Any] = {}
        sources: List[str] = []

        def merge_dir(root: str) -> None:
            nonlocal result
            for filename in CONFIG_FILENAMES:
                filepath = os.path.join(root, filename)
                data = load_json_file(filepath)
                if data:
                    result = deep_merge(result, data)
                    sources.append(filepath)

        merge_dir(GlobalPath.config())
        if Path(directory).resolve() != Path(GlobalPath.config()).resolve():
            merge_dir(directory)

        explicit = os.environ.get("SYSWEB_CONFIG")
        if explicit:
            if not Path(explicit).is_file():
                raise ConfigError(explicit, "file not found")
            data = load_json_file(explicit)
            result = deep_merge(result, data)
            sources.append(explicit)

        content = os.environ.get("SYSWEB_CONFIG_CONTENT")
        if content:
            try:
                result = deep_merge(result, parse_json_text(content))
            except ValueError as e:
                raise ConfigError("SYSWEB_CONFIG_CONTENT", str(e)) from e
            sources.append("SYSWEB_CONFIG_CONTENT")

        level = os.environ.get("SYSWEB_LOG_LEVEL")
        if level:
            result["logLevel"] = level
            sources.append("SYSWEB_LOG_LEVEL")

        try:
            config = Config.model_validate(result)
        except ValidationError as e:
            raise ConfigError(sources[-1] if sources else "<defaults>", str(e)) from e

        for source in sources:
            log.debug("loaded config", {"path": source})

        cls._cache = config
        cls._sources = sources
        return config
