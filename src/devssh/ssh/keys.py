"""Installation of the managed SSH private key."""

import logging
import stat
from pathlib import Path

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

from devssh.core.errors import KeyInstallError
from devssh.core.fs import FileAccess, LocalFileAccess

logger = logging.getLogger(__name__)

PRIVATE_KEY_MODE = stat.S_IRUSR | stat.S_IWUSR


def load_private_key(material: bytes) -> PrivateKeyTypes:
    """Load private key material in OpenSSH or PEM format.

    Args:
        material: Unencrypted private key bytes.

    Returns:
        Loaded private key.

    Raises:
        KeyInstallError: If the material is not a supported unencrypted key.
    """
    if not material.strip():
        raise KeyInstallError("Private key material is empty")

    try:
        if b"BEGIN OPENSSH PRIVATE KEY" in material:
            return serialization.load_ssh_private_key(material, password=None)
        return serialization.load_pem_private_key(material, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise KeyInstallError(f"Invalid private key material: {e}") from e


def public_key_line(material: bytes) -> str:
    """Derive the OpenSSH public key line for private key material.

    Args:
        material: Unencrypted private key bytes.

    Returns:
        Public key such as ``ssh-ed25519 AAAA...``.
    """
    private_key = load_private_key(material)
    public_bytes = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.OpenSSH,
        format=serialization.PublicFormat.OpenSSH,
    )
    return public_bytes.decode("utf-8")


class SSHKeyInstaller:
    """Writes the managed private key to its fixed path."""

    def __init__(
        self,
        key_path: Path,
        fs: FileAccess | None = None,
        validate: bool = True,
    ) -> None:
        """Initialize SSH key installer.

        Args:
            key_path: Managed private key path.
            fs: File access. Uses the local filesystem if None.
            validate: Whether to reject material that is not a private key.
        """
        self._key_path = key_path
        self._fs = fs or LocalFileAccess()
        self._validate = validate

    @property
    def key_path(self) -> Path:
        """Get managed private key path."""
        return self._key_path

    def is_installed(self) -> bool:
        """Check whether a key file exists at the managed path."""
        return self._fs.exists(self._key_path)

    def public_key(self) -> str:
        """Get the OpenSSH public key line of the installed key.

        Raises:
            KeyInstallError: If no key is installed or it cannot be read.
        """
        if not self.is_installed():
            raise KeyInstallError(f"No private key installed at {self._key_path}")
        try:
            material = self._fs.read_bytes(self._key_path)
        except OSError as e:
            raise KeyInstallError(f"Could not read private key {self._key_path}: {e}") from e
        return public_key_line(material)

    def install(self, material: bytes) -> Path:
        """Write private key material, replacing any previous key.

        Args:
            material: Private key bytes.

        Returns:
            Path the key was written to.

        Raises:
            KeyInstallError: If the material is invalid or cannot be written.
        """
        if self._validate:
            load_private_key(material)
        elif not material.strip():
            raise KeyInstallError("Private key material is empty")

        # ssh refuses keys that are readable by others
        try:
            self._fs.write_bytes(self._key_path, material, mode=PRIVATE_KEY_MODE)
        except OSError as e:
            raise KeyInstallError(f"Could not write private key to {self._key_path}: {e}") from e

        logger.debug(f"Installed private key at {self._key_path}")
        return self._key_path
