"""Exception types raised by devssh."""

from pathlib import Path


class DevsshError(Exception):
    """Base class for all devssh errors."""


class DecodeError(DevsshError):
    """SSH config text could not be decoded."""

    def __init__(self, message: str, line_number: int, line: str) -> None:
        """Initialize decode error.

        Args:
            message: Description of the problem.
            line_number: 1-based number of the offending line.
            line: Offending line without its line ending.
        """
        super().__init__(f"line {line_number}: {message}: {line!r}")
        self.line_number = line_number
        self.line = line


class DirectoryFetchError(DevsshError):
    """Active workspaces could not be listed."""


class BackupError(DevsshError):
    """Backup of the SSH config could not be persisted."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class WriteError(DevsshError):
    """A file write failed mid-cycle."""

    def __init__(self, message: str, path: Path, backup_path: Path | None = None) -> None:
        """Initialize write error.

        Args:
            message: Description of the problem.
            path: Path that could not be written.
            backup_path: Last known good backup, if one was taken.
        """
        text = f"{message}: {path}"
        if backup_path is not None:
            text += f" (restore from backup at {backup_path})"
        super().__init__(text)
        self.path = path
        self.backup_path = backup_path


class RenderError(DevsshError):
    """A host entry could not be rendered for a workspace."""

    def __init__(self, message: str, host_name: str) -> None:
        super().__init__(f"{message}: {host_name!r}")
        self.host_name = host_name


class KeyInstallError(DevsshError):
    """Private key material could not be installed."""


class PortAllocationError(DevsshError):
    """No free port is left for a new host entry."""


class ConfigReadError(DevsshError):
    """SSH config file exists but could not be read."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path
