"""Configuration loading and validation."""

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from pplaces.cache import CACHE_FILE_NAME

APP_DIR_NAME = "pplaces"
CONFIG_FILE_NAME = "config.json"
CONFIG_DIR_ENV = "PPLACES_CONFIG_DIR"


@dataclass
class Config:
    """Application configuration."""

    config_dir: Path
    days_to_show: int = 7
    git_executable: str = "git"

    @property
    def cache_path(self) -> Path:
        return self.config_dir / CACHE_FILE_NAME


def default_config_dir(environ: dict | None = None) -> Path:
    """Resolve the per-user configuration directory for pplaces."""
    env = os.environ if environ is None else environ

    override = env.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()

    if sys.platform == "win32":
        base = Path(env.get("APPDATA") or Path.home() / "AppData" / "Roaming")
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(env.get("XDG_CONFIG_HOME") or Path.home() / ".config")

    return base / APP_DIR_NAME


def load_config(config_dir: Path) -> Config:
    """Load configuration from the optional config.json in config_dir."""
    config_path = config_dir / CONFIG_FILE_NAME
    if not config_path.exists():
        return Config(config_dir=config_dir)

    try:
        with open(config_path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Invalid config file {config_path}: expected a JSON object")

    return Config(
        config_dir=config_dir,
        days_to_show=int(data.get("days_to_show", 7)),
        git_executable=data.get("git", "git"),
    )
