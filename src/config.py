"""Unified configuration loaded from .storyfeed.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".storyfeed.toml"
CONFIG_SEARCH_PATHS = [Path(".")]


class AppConfig(BaseModel):
    """[app] section."""

    url: str = "http://localhost:3000"
    site_name: str = "Sigle"


class IdentityConfig(BaseModel):
    """[identity] section: naming system used to resolve handles."""

    api_url: str = "https://core.blockstack.org"
    timeout: int = 15


class StorageConfig(BaseModel):
    """[storage] section: bucket reads."""

    timeout: int = 15


class StoryfeedConfig(BaseModel):
    """Top-level configuration model."""

    app: AppConfig = Field(default_factory=AppConfig)
    identity: IdentityConfig = Field(default_factory=IdentityConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)


def load_config(path: str | Path | None = None) -> StoryfeedConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .storyfeed.toml in CWD
    3. ~/.config/storyfeed/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged StoryfeedConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        global_config = Path.home() / ".config" / "storyfeed" / "config.toml"
        if not data and global_config.exists():
            data = _load_toml(global_config)
            logger.info("Loaded config from %s", global_config)

    config = StoryfeedConfig.model_validate(data) if data else StoryfeedConfig()
    return _apply_env_vars(config)


def merge_cli_overrides(config: StoryfeedConfig, **cli_kwargs: object) -> StoryfeedConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was provided (not None).
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "app_url": ("app", "url"),
        "identity_api_url": ("identity", "api_url"),
        "timeout": ("storage", "timeout"),
    }

    for key, value in cli_kwargs.items():
        if value is None or key not in mapping:
            continue
        section, field = mapping[key]
        data[section][field] = value
        # A single --timeout bounds every outbound call
        if key == "timeout":
            data["identity"]["timeout"] = value

    return StoryfeedConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: StoryfeedConfig) -> StoryfeedConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "STORYFEED_APP_URL": ("app", "url"),
        "STORYFEED_SITE_NAME": ("app", "site_name"),
        "STORYFEED_IDENTITY_API_URL": ("identity", "api_url"),
        "STORYFEED_IDENTITY_TIMEOUT": ("identity", "timeout"),
        "STORYFEED_FETCH_TIMEOUT": ("storage", "timeout"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    try:
        return StoryfeedConfig.model_validate(data)
    except ValueError as exc:
        logger.warning("Ignoring invalid environment overrides: %s", exc)
        return config
