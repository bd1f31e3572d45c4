"""Pydantic models for sysweb config files."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: Optional[str] = None
    format: Optional[Literal["kv", "json"]] = None
    console: Optional[bool] = None
    file: Optional[bool] = None
    access_log: Optional[bool] = Field(None, alias="accessLog")
    dev_file: Optional[bool] = Field(None, alias="devFile")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class ApplicationConfig(BaseModel):
    """HttpApplication hosting settings."""
    max_retained: int = Field(16, alias="maxRetained", ge=0)

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class Config(BaseModel):
    """Main configuration schema."""
    schema_: Optional[str] = Field(None, alias="$schema")
    log_level: Optional[str] = Field(None, alias="logLevel")
    logging: Optional[LoggingConfig] = None
    application: ApplicationConfig = Field(default_factory=ApplicationConfig)

    model_config = ConfigDict(extra="forbid", populate_by_name=True)
