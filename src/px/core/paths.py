"""Path utilities for px config and cache locations."""

import os
from pathlib import Path

APP_DIR_NAME = "px"
CONFIG_FILE_NAME = "config.toml"
CACHE_FILE_NAME = "projects.json"


def get_config_dir() -> Path:
    """Directory holding px's config file.

    Resolution order: PX_CONFIG_DIR, $XDG_CONFIG_HOME/px, ~/.config/px.
    """
    if env_dir := os.environ.get("PX_CONFIG_DIR"):
        return Path(env_dir).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / APP_DIR_NAME


def get_cache_dir() -> Path:
    """Directory holding the project index.

    Resolution order: PX_CACHE_DIR, $XDG_CACHE_HOME/px, ~/.cache/px.
    """
    if env_dir := os.environ.get("PX_CACHE_DIR"):
        return Path(env_dir).expanduser()
    base = os.environ.get("XDG_CACHE_HOME") or Path.home() / ".cache"
    return Path(base) / APP_DIR_NAME


def get_config_path() -> Path:
    """Path to config.toml."""
    return get_config_dir() / CONFIG_FILE_NAME


def get_cache_path() -> Path:
    """Path to the persisted project index."""
    return get_cache_dir() / CACHE_FILE_NAME
