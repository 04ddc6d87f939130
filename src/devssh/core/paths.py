"""Application data directory and path utilities."""

import os
import platform
from datetime import datetime, timezone
from pathlib import Path

from devssh.core.constant import (
    APP_NAME,
    BACKUP_SUFFIX,
    CONFIG_FILENAME,
    PRIVATE_KEY_FILENAME,
    WORKSPACE_CACHE_FILENAME,
)

BACKUP_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S%fZ"


def get_app_data_dir() -> Path:
    """Get the application data directory based on OS.

    Returns:
        Path to the application data directory.
        - Linux/macOS: ~/.devssh
        - Windows: %APPDATA%/devssh
    """
    system = platform.system()

    if system == "Windows":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / APP_NAME
        else:
            return Path.home() / "AppData" / "Roaming" / APP_NAME
    else:
        return Path.home() / f".{APP_NAME}"


def get_private_key_path() -> Path:
    """Get the managed private key path.

    Every host entry owned by devssh points its IdentityFile here.
    """
    return get_app_data_dir() / PRIVATE_KEY_FILENAME


def get_config_path() -> Path:
    """Get the devssh settings file path."""
    return get_app_data_dir() / CONFIG_FILENAME


def get_workspace_cache_path() -> Path:
    """Get the default workspace cache file path."""
    return get_app_data_dir() / WORKSPACE_CACHE_FILENAME


def get_user_ssh_config_path() -> Path:
    """Get the user's SSH client config path (~/.ssh/config)."""
    return Path.home() / ".ssh" / "config"


def format_backup_timestamp(moment: datetime | None = None) -> str:
    """Format a timestamp for use in a backup file name.

    Args:
        moment: Time to format. Uses current UTC time if None.

    Returns:
        Compact UTC timestamp string.
    """
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).strftime(BACKUP_TIMESTAMP_FORMAT)


def get_backup_path(
    config_path: Path,
    timestamp: str,
    generation: int = 0,
    backup_dir: Path | None = None,
) -> Path:
    """Get the backup path for an SSH config file.

    Args:
        config_path: SSH config file being backed up.
        timestamp: Backup timestamp (see format_backup_timestamp).
        generation: Disambiguates backups taken within the same timestamp.
        backup_dir: Directory for backups. Uses the config's directory if None.

    Returns:
        Path such as ``~/.ssh/config.bak.20261019T120000000000Z``.
    """
    directory = backup_dir or config_path.parent
    name = f"{config_path.name}.{BACKUP_SUFFIX}.{timestamp}"
    if generation:
        name += f"-{generation}"
    return directory / name
