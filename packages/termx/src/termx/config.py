"""
Runtime settings, read from the environment.

Settings are passed explicitly to sessions, widgets and schedulers; nothing
in termx reads a process-wide settings object.

Environment variables:
  TERMX_WRITE_LOG            append every terminal write to this file
  TERMX_LOG_LEVEL            level for the ``termx`` logger (default WARNING)
  TERMX_LOG_FILE             log destination (default stderr)
  NO_COLOR                   disable theme styling when set to any value
  TERMX_SPINNER_INTERVAL_MS  animation tick interval (default 100)
  TERMX_MAX_VISIBLE          rows shown by list widgets (default 7)
"""
from __future__ import annotations

import os
from typing import Mapping

from pydantic import BaseModel, Field, field_validator

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    write_log: str = ""
    log_level: str = "WARNING"
    log_file: str = ""
    no_color: bool = False
    spinner_interval_ms: int = Field(100, gt=0)
    max_visible: int = Field(7, ge=1)

    model_config = {"frozen": True}

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @property
    def spinner_interval(self) -> float:
        """Tick interval in seconds."""
        return self.spinner_interval_ms / 1000.0

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if "TERMX_WRITE_LOG" in env:
            values["write_log"] = env["TERMX_WRITE_LOG"]
        if "TERMX_LOG_LEVEL" in env:
            values["log_level"] = env["TERMX_LOG_LEVEL"]
        if "TERMX_LOG_FILE" in env:
            values["log_file"] = env["TERMX_LOG_FILE"]
        # https://no-color.org: any value, even empty, disables colour
        if "NO_COLOR" in env:
            values["no_color"] = True
        if "TERMX_SPINNER_INTERVAL_MS" in env:
            values["spinner_interval_ms"] = env["TERMX_SPINNER_INTERVAL_MS"]
        if "TERMX_MAX_VISIBLE" in env:
            values["max_visible"] = env["TERMX_MAX_VISIBLE"]
        return cls.model_validate(values)
