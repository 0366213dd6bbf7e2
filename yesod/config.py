"""
Configuration Management - settings from environment and .env files
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runner settings, read from YESOD_* variables"""

    model_config = SettingsConfigDict(
        env_prefix="YESOD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Used in log prefixes and the help usage line
    name: str = "yesod"

    # Default host for the CLI, as "module:attribute"
    app: Optional[str] = None

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["text", "json"] = "text"

    # Run every command from this directory
    working_dir: Optional[Path] = None

    # Log per-command timings after each run
    show_timings: bool = True

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        aliases = {"warn": "WARNING", "err": "ERROR"}
        return aliases.get(str(v).lower(), str(v).upper())

    @field_validator("log_format", mode="before")
    @classmethod
    def normalize_log_format(cls, v: str) -> str:
        return str(v).lower()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def default_env_files() -> List[str]:
    """.env chain for the current YESOD_ENV (development when unset)"""
    env = os.getenv("YESOD_ENV", "development")
    return [".env", ".env.local", f".env.{env}"]


class ConfigLoader:
    """Apply a chain of .env files to the process, then rebuild settings"""

    def __init__(self, env_files: Optional[List[str]] = None):
        self.env_files = env_files or default_env_files()
        self.loaded_files: List[str] = []

    def load(self) -> Settings:
        """Later files override earlier ones; missing files are skipped"""
        from dotenv import load_dotenv

        self.loaded_files = [path for path in self.env_files if Path(path).is_file()]
        for path in self.loaded_files:
            load_dotenv(path, override=True)

        get_settings.cache_clear()
        return get_settings()

    def to_dict(self) -> Dict[str, Any]:
        """Current settings, JSON-ready"""
        return get_settings().model_dump(mode="json")
