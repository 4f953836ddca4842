"""
DocVault Configuration — Load and validate docvault.yaml at startup.

Usage:
    from docvault.engine.config import load_config, get_config
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from docvault.engine.errors import DocVaultConfigError

CONFIG_FILE_NAME = "docvault.yaml"


# ---------------------------------------------------------------------------
# Pydantic models for docvault.yaml
# ---------------------------------------------------------------------------

class UploadConfig(BaseModel):
    allowed_mime_types: List[str] = Field(
        default_factory=lambda: ["application/pdf", "image/png", "image/jpeg"],
    )
    max_size_mb: int = Field(default=10, ge=1)


class CatalogConfig(BaseModel):
    unknown_user_label: str = "Unknown"
    path_separator: str = " / "


class UserEntry(BaseModel):
    id: str
    name: str


class LoggingConfig(BaseModel):
    level: str = "INFO"
    directory: str = ".docvault/logs"
    activity_log: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"level must be a logging level name, got '{v}'")
        return v


def _default_users() -> List[UserEntry]:
    return [
        UserEntry(id="alice", name="alice"),
        UserEntry(id="boob", name="boob"),
        UserEntry(id="john", name="john"),
    ]


class DocVaultConfig(BaseModel):
    """Root model for docvault.yaml."""
    name: str = "DocVault"
    environment: str = "dev"

    upload: UploadConfig = UploadConfig()
    catalog: CatalogConfig = CatalogConfig()
    logging: LoggingConfig = LoggingConfig()
    users: List[UserEntry] = Field(default_factory=_default_users)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        if v not in ("dev", "staging", "prod"):
            raise ValueError(f"environment must be dev/staging/prod, got '{v}'")
        return v


# ---------------------------------------------------------------------------
# Config Loading Functions
# ---------------------------------------------------------------------------

_config: Optional[DocVaultConfig] = None


def _find_project_root() -> Path:
    """Find the project root by looking for docvault.yaml."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        if (parent / CONFIG_FILE_NAME).exists():
            return parent
    return current


def load_config(config_path: Optional[str] = None) -> DocVaultConfig:
    """
    Load and validate docvault.yaml.

    Args:
        config_path: Explicit path to docvault.yaml. If None, auto-discovers.

    Returns:
        Validated DocVaultConfig instance.

    Raises:
        DocVaultConfigError: If the file is not valid YAML or fails validation.
    """
    global _config

    if config_path is None:
        config_path = str(_find_project_root() / CONFIG_FILE_NAME)

    path = Path(config_path)
    if not path.exists():
        # Return defaults if no config file
        _config = DocVaultConfig()
        return _config

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise DocVaultConfigError(f"Cannot parse {path}: {e}", path=str(path)) from e

    if not isinstance(raw, dict):
        raise DocVaultConfigError(
            f"{path} must contain a mapping at top level", path=str(path)
        )

    # Accept both a flat layout and one wrapped under "docvault:"
    data: Dict[str, Any] = raw.get("docvault", raw)

    try:
        _config = DocVaultConfig(**data)
    except ValidationError as e:
        raise DocVaultConfigError(
            f"Invalid configuration in {path}: {e}",
            path=str(path),
            validation_errors=e.errors(),
        ) from e
    return _config


def get_config() -> DocVaultConfig:
    """Get the currently loaded config, loading if necessary."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_environment() -> str:
    """Get the current environment."""
    return get_config().environment
