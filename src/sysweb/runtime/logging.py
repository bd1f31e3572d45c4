"""Runtime logging bootstrap helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from ..core.config import ConfigManager
from ..util.log import Log, LogFormat, LogLevel

LogMode = Literal["library", "web"]


@dataclass(frozen=True)
class LogSettings:
    level: LogLevel
    format: LogFormat
    console: bool
    file: bool
    access_log: bool
    dev_file: bool


def _first(*values: Optional[bool], default: bool) -> bool:
    for value in values:
        if value is not None:
            return value
    return default


def resolve_log_settings(
    *,
    mode: LogMode,
    level: Optional[str] = None,
    format: Optional[str] = None,
    access_log: Optional[bool] = None,
    console: Optional[bool] = None,
    file: Optional[bool] = None,
    dev_file: Optional[bool] = None,
) -> LogSettings:
    """Merge explicit arguments, configuration and mode defaults."""
    cfg = ConfigManager.get()
    log = cfg.logging

    web = mode == "web"
    return LogSettings(
        level=LogLevel.parse(level or (log.level if log else None) or cfg.log_level),
        format=LogFormat.parse(format or (log.format if log else None)),
        console=_first(console, log.console if log else None, default=True),
        file=_first(file, log.file if log else None, default=web),
        access_log=_first(access_log, log.access_log if log else None, default=web),
        dev_file=_first(dev_file, log.dev_file if log else None, default=False),
    )


def bootstrap_logging(
    *,
    mode: LogMode,
    level: Optional[str] = None,
    format: Optional[str] = None,
    access_log: Optional[bool] = None,
    console: Optional[bool] = None,
    file: Optional[bool] = None,
    dev_file: Optional[bool] = None,
) -> LogSettings:
    """Resolve config and initialize the process logger."""
    settings = resolve_log_settings(
        mode=mode,
        level=level,
        format=format,
        access_log=access_log,
        console=console,
        file=file,
        dev_file=dev_file,
    )
    Log.configure(
        level=settings.level,
        format=settings.format,
        console=settings.console,
        file=settings.file,
        dev=settings.dev_file,
    )
    return settings
