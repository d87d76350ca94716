"""
Settings for todoline, read from ``TODOLINE_*`` environment variables.
"""
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "TODOLINE"
DEFAULT_TASK_FILE = Path("tasks.yml")
DEFAULT_LOG_DIR = Path.home() / ".local" / "share" / "todoline" / "logs"

_TRUTHY = ('1', 'true', 'yes', 'on')


def _env(suffix: str) -> Optional[str]:
    value = os.getenv(f"{ENV_PREFIX}_{suffix}")
    if value is None or value.strip() == "":
        return None
    return value.strip()


class Settings(BaseModel):
    task_file: Path = Field(default=DEFAULT_TASK_FILE, description="File the task list is loaded from and saved to")
    log_level: str = Field(default="WARNING", description="Console log level")
    debug: bool = Field(default=False, description="Verbose console logging")
    log_dir: Path = Field(default=DEFAULT_LOG_DIR, description="Directory for the detailed log file")

    @field_validator('task_file', 'log_dir')
    @classmethod
    def expand_user(cls, v):
        return Path(v).expanduser()

    @field_validator('log_level')
    @classmethod
    def normalize_level(cls, v):
        return str(v).strip().upper() or "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        values = {}
        if _env("FILE"):
            values['task_file'] = _env("FILE")
        if _env("LOG_LEVEL"):
            values['log_level'] = _env("LOG_LEVEL")
        if _env("LOG_DIR"):
            values['log_dir'] = _env("LOG_DIR")
        debug = _env("DEBUG")
        values['debug'] = debug is not None and debug.lower() in _TRUTHY
        return cls(**values)


def get_settings() -> Settings:
    return Settings.from_env()
