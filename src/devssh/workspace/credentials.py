"""Credential store: where the managed private key comes from."""

from abc import ABC, abstractmethod
from pathlib import Path

from devssh.core.errors import KeyInstallError


class CredentialStore(ABC):
    """Source of the SSH private key material devssh installs."""

    @abstractmethod
    def get_private_key_material(self) -> bytes:
        """Get the private key material.

        Returns:
            Private key bytes.
        """
        pass


class FileCredentialStore(CredentialStore):
    """Credential store that reads key material from a file."""

    def __init__(self, path: Path) -> None:
        """Initialize file credential store.

        Args:
            path: File holding the private key.
        """
        self._path = path

    @property
    def path(self) -> Path:
        """Get key file path."""
        return self._path

    def get_private_key_material(self) -> bytes:
        if not self._path.exists():
            raise KeyInstallError(f"Private key file not found: {self._path}")
        try:
            return self._path.read_bytes()
        except OSError as e:
            raise KeyInstallError(f"Could not read private key file {self._path}: {e}") from e
