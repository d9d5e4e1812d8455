"""
Settings for fileman.

Loads and validates an optional YAML settings file. Lookup order:
explicit path, then $FILEMAN_CONFIG, then built-in defaults.

Example fileman.yaml:

    hash_chunk_size: 131072
    hash_workers: 4
    use_trash: true
    organized_folder: sorted
    log_level: INFO
    log_format: json
"""

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from fileman.config.exceptions import ConfigurationError

CONFIG_ENV_VAR = "FILEMAN_CONFIG"


class FilemanSettings(BaseModel):
    """
    Runtime settings.

    Attributes:
        hash_chunk_size: Bytes read per chunk when hashing
        hash_workers: Files hashed concurrently by dedupe (1 = sequential)
        use_trash: Send dedupe deletions to the OS trash instead of unlinking
        organized_folder: Destination folder name used by organize
        log_level: Default log level when no -v flag is given
        log_format: console or json
    """

    hash_chunk_size: int = Field(default=65536, description="Hash read chunk size in bytes")
    hash_workers: int = Field(default=1, description="Concurrent hashing workers")
    use_trash: bool = Field(default=False, description="Trash instead of unlink")
    organized_folder: str = Field(default="organized", description="organize destination folder")
    log_level: str = Field(default="WARNING", description="Default log level")
    log_format: Literal["console", "json"] = Field(default="console")

    @field_validator("hash_chunk_size", "hash_workers")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Chunk size and worker count must be >= 1."""
        if v < 1:
            raise ValueError(f"must be >= 1, got: {v}")
        return v

    @field_validator("organized_folder")
    @classmethod
    def validate_folder_name(cls, v: str) -> str:
        """organized_folder must be a single non-empty path component."""
        if not v or not v.strip():
            raise ValueError("organized_folder cannot be empty")
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError(f"organized_folder must be a plain folder name, got: {v!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level


def load_settings(config_path: str | Path | None = None) -> FilemanSettings:
    """
    Load settings from YAML.

    Args:
        config_path: YAML file (default: $FILEMAN_CONFIG, else built-in defaults)

    Returns:
        Validated FilemanSettings

    Raises:
        ConfigurationError: File missing, YAML invalid, or values invalid
    """
    if config_path is None:
        config_path = os.getenv(CONFIG_ENV_VAR)
        if not config_path:
            return FilemanSettings()

    config_path = Path(config_path)
    if not config_path.is_file():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read config {config_path}: {e}") from e

    if not isinstance(config_data, dict):
        raise ConfigurationError(f"Config {config_path} must contain a mapping")

    try:
        return FilemanSettings(**config_data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config {config_path}: {e}") from e


# Singleton instance (lazy loaded)
_settings: FilemanSettings | None = None


def get_settings() -> FilemanSettings:
    """Return the process-wide settings, loading them on first use."""
    global _settings

    if _settings is None:
        _settings = load_settings()

    return _settings


def set_settings(settings: FilemanSettings) -> None:
    """Install explicitly loaded settings (CLI --config)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Forget cached settings (tests)."""
    global _settings
    _settings = None
