"""Configuration management for devssh."""

import json
import os
from pathlib import Path
from typing import Any

from devssh.core.paths import get_config_path
from devssh.core.types import ReconcileSettings

# Environment variables take precedence over values from the config file
ENV_OVERRIDES = {
    "DEVSSH_SSH_CONFIG_PATH": "ssh.config_path",
    "DEVSSH_PRIVATE_KEY_PATH": "ssh.private_key_path",
    "DEVSSH_BACKUP_DIR": "ssh.backup_dir",
    "DEVSSH_BASE_PORT": "ssh.base_port",
}


class Config:
    """Configuration manager for devssh."""

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize configuration manager.

        Args:
            config_path: Path to configuration file. If None, uses default.
        """
        self._config_path = config_path
        self._config_data: dict[str, Any] = {}

    @classmethod
    def from_file(cls, config_path: Path) -> "Config":
        """Load configuration from file.

        Args:
            config_path: Path to configuration file.

        Returns:
            Config instance with loaded configuration.
        """
        instance = cls(config_path)
        instance.load()
        return instance

    @classmethod
    def default(cls) -> "Config":
        """Load configuration from the default location."""
        return cls.from_file(get_config_path())

    def load(self) -> None:
        """Load configuration from file."""
        if self._config_path is None or not self._config_path.exists():
            return

        with open(self._config_path, encoding="utf-8") as f:
            self._config_data = json.load(f)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value.

        Args:
            key: Configuration key (supports dot notation).
            default: Default value if key not found.

        Returns:
            Configuration value.
        """
        keys = key.split(".")
        value = self._config_data
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value.

        Args:
            key: Configuration key (supports dot notation).
            value: Value to set.
        """
        keys = key.split(".")
        data = self._config_data
        for k in keys[:-1]:
            if k not in data:
                data[k] = {}
            data = data[k]
        data[keys[-1]] = value

    def apply_env_overrides(self, environ: dict[str, str] | None = None) -> None:
        """Override configuration values from environment variables.

        Args:
            environ: Environment mapping. Uses os.environ if None.
        """
        environ = os.environ if environ is None else environ
        for env_name, key in ENV_OVERRIDES.items():
            value = environ.get(env_name)
            if value:
                self.set(key, value)

    def to_reconcile_settings(self) -> ReconcileSettings:
        """Convert configuration to ReconcileSettings.

        Returns:
            ReconcileSettings instance. Missing values use defaults.
        """
        ssh_data = self.get("ssh", {})
        values: dict[str, Any] = {}

        if ssh_data.get("config_path"):
            values["ssh_config_path"] = Path(ssh_data["config_path"]).expanduser()
        if ssh_data.get("private_key_path"):
            values["private_key_path"] = Path(ssh_data["private_key_path"]).expanduser()
        if ssh_data.get("backup_dir"):
            values["backup_dir"] = Path(ssh_data["backup_dir"]).expanduser()
        if ssh_data.get("base_port") is not None:
            values["base_port"] = int(ssh_data["base_port"])
        if ssh_data.get("hostname"):
            values["hostname"] = ssh_data["hostname"]
        if ssh_data.get("user"):
            values["user"] = ssh_data["user"]
        if ssh_data.get("validate_key") is not None:
            values["validate_key"] = bool(ssh_data["validate_key"])

        return ReconcileSettings(**values)
