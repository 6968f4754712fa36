"""
Configuration management.

Settings live in a TOML file (``mdlib.toml``) in the config directory.
A default file is written on first use.
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import tomli_w


CONFIG_FILENAME = "mdlib.toml"
CONFIG_VERSION = 1


def get_config_dir() -> Path:
    """
    Directory holding mdlib.toml and the log files.

    Priority:
    1. MDLIB_CONFIG_DIR environment variable
    2. $XDG_CONFIG_HOME/mdlib
    3. ~/.config/mdlib
    """
    explicit = os.environ.get("MDLIB_CONFIG_DIR")
    if explicit:
        return Path(explicit).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser() / "mdlib"
    return Path.home() / ".config" / "mdlib"


def get_root(explicit: Optional[Path] = None) -> Path:
    """Document root: explicit path, else MDLIB_ROOT, else the working directory."""
    if explicit is not None:
        return Path(explicit).expanduser()
    env_root = os.environ.get("MDLIB_ROOT")
    if env_root:
        return Path(env_root).expanduser()
    return Path.cwd()


@dataclass
class AppConfig:
    """Complete application configuration."""
    path: Path
    version: int = CONFIG_VERSION
    port: int = 3000
    bind_address: str = "127.0.0.1"
    # Persisted for compatibility; nothing watches the tree.
    watch_files: bool = True
    max_file_size_mb: int = 10
    default_dark_mode: bool = False

    @property
    def config_path(self) -> Path:
        """Path to the TOML config file."""
        return self.path / CONFIG_FILENAME

    @property
    def server_address(self) -> str:
        return f"{self.bind_address}:{self.port}"

    @property
    def max_file_size(self) -> Optional[int]:
        """Size limit in bytes; None when the limit is disabled (0)."""
        if self.max_file_size_mb <= 0:
            return None
        return self.max_file_size_mb * 1024 * 1024

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()


def _require(value, kind: type, key: str):
    # bool is an int subclass; keep them apart
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"Config value {key!r} must be {kind.__name__}, got {value!r}")
    return value


def load_config(config_dir: Path) -> AppConfig:
    """
    Load configuration from a config directory.

    Raises:
        FileNotFoundError: If config doesn't exist
        ValueError: If config is invalid
    """
    config_path = config_dir / CONFIG_FILENAME

    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    with open(config_path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid config file {config_path}: {e}") from e

    version = data.get("config", {}).get("version", 1)
    if version > CONFIG_VERSION:
        raise ValueError(f"Config version {version} is newer than supported ({CONFIG_VERSION})")

    server = data.get("server", {})
    files = data.get("files", {})
    ui = data.get("ui", {})
    defaults = AppConfig(path=config_dir)

    port = _require(server.get("port", defaults.port), int, "server.port")
    if not 0 < port < 65536:
        raise ValueError(f"Config value 'server.port' out of range: {port}")

    return AppConfig(
        path=config_dir,
        version=version,
        port=port,
        bind_address=_require(server.get("bind_address", defaults.bind_address), str, "server.bind_address"),
        watch_files=_require(files.get("watch", defaults.watch_files), bool, "files.watch"),
        max_file_size_mb=_require(files.get("max_size_mb", defaults.max_file_size_mb), int, "files.max_size_mb"),
        default_dark_mode=_require(ui.get("dark_mode", defaults.default_dark_mode), bool, "ui.dark_mode"),
    )


def save_config(config: AppConfig) -> None:
    """
    Save configuration to the config directory.

    Creates the directory if it doesn't exist.
    """
    config.path.mkdir(parents=True, exist_ok=True)

    data = {
        "config": {"version": config.version},
        "server": {
            "port": config.port,
            "bind_address": config.bind_address,
        },
        "files": {
            "watch": config.watch_files,
            "max_size_mb": config.max_file_size_mb,
        },
        "ui": {"dark_mode": config.default_dark_mode},
    }

    with open(config.config_path, "wb") as f:
        tomli_w.dump(data, f)


def load_or_create_config(config_dir: Optional[Path] = None) -> AppConfig:
    """
    Load existing config or create a new one with defaults.

    This is the main entry point for config management.
    """
    config_dir = config_dir if config_dir is not None else get_config_dir()
    if (config_dir / CONFIG_FILENAME).exists():
        return load_config(config_dir)
    config = AppConfig(path=config_dir)
    save_config(config)
    return config
