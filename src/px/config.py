"""Configuration management for px."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from px.core.git import DEFAULT_GIT_TIMEOUT
from px.core.paths import CONFIG_FILE_NAME, get_config_dir
from px.errors import ConfigError
from px.managers.index_store import DEFAULT_MAX_DEPTH, DEFAULT_THREADS


def default_scan_dirs() -> List[Path]:
    home = Path.home()
    return [home / "Developer", home / "projects", home / "code"]


class PxConfig(BaseModel):
    """Configuration stored in <config dir>/px/config.toml."""

    model_config = ConfigDict(
        extra="allow"
    )  # Allow additional fields for extensibility

    scan_dirs: List[Path] = Field(
        default_factory=default_scan_dirs,
        description="Directories to scan for repositories",
    )
    default_editor: str = Field(
        default="code", description="Editor command used by 'px open'"
    )
    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH, ge=0, description="Scan depth below each directory"
    )
    threads: int = Field(
        default=DEFAULT_THREADS, ge=1, description="Repositories probed in parallel"
    )
    git_timeout: float = Field(
        default=DEFAULT_GIT_TIMEOUT, gt=0, description="Seconds allowed per git call"
    )


class Config:
    """Manages px configuration."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize config manager.

        Args:
            config_dir: Directory holding config.toml. If None, uses PX_CONFIG_DIR,
                then $XDG_CONFIG_HOME/px, then ~/.config/px.
        """
        self.config_dir = Path(config_dir) if config_dir else get_config_dir()
        self.config_path = self.config_dir / CONFIG_FILE_NAME
        self._config: Optional[PxConfig] = None

    @property
    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()

    def load(self) -> PxConfig:
        """Load configuration from disk, with environment variable overrides.

        A missing config file yields the defaults.

        Raises:
            ConfigError: If the file exists but is not valid TOML or has bad values
        """
        data: Dict[str, Any] = {}
        if self.exists:
            try:
                with open(self.config_path, "r") as f:
                    data = toml.load(f)
            except (toml.TomlDecodeError, OSError) as e:
                raise ConfigError(
                    f"Failed to parse px config {self.config_path}: {e}"
                ) from e

        self._apply_env_overrides(data)

        try:
            self._config = PxConfig(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid px config {self.config_path}: {e}") from e
        return self._config

    def _apply_env_overrides(self, data: Dict[str, Any]) -> None:
        """Apply environment variable overrides to configuration data."""
        if env_editor := os.environ.get("PX_EDITOR"):
            data["default_editor"] = env_editor

        if env_dirs := os.environ.get("PX_SCAN_DIRS"):
            data["scan_dirs"] = [d for d in env_dirs.split(os.pathsep) if d]

    def save(self, config: Optional[PxConfig] = None) -> None:
        """Save configuration to disk.

        Args:
            config: Configuration to save. If None, saves current config.
        """
        if config:
            self._config = config

        if not self._config:
            raise ValueError("No configuration to save")

        self.config_dir.mkdir(parents=True, exist_ok=True)

        config_dict = self._config.model_dump(mode="json")
        with open(self.config_path, "w") as f:
            toml.dump(config_dict, f)

    def init(self) -> PxConfig:
        """Write a default config file.

        Raises:
            FileExistsError: If a config file is already present
        """
        if self.exists:
            raise FileExistsError(f"Config file already exists at {self.config_path}")

        config = PxConfig()
        self.save(config)
        return config

    def expanded_scan_dirs(self) -> List[Path]:
        """Configured scan directories with ~ expanded."""
        config = self._config or self.load()
        return [Path(d).expanduser() for d in config.scan_dirs]
