"""File access used by the reconciler.

The reconciler never touches the filesystem directly; it is handed a
FileAccess at construction so callers and tests control where reads and
writes land.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path


class FileAccess(ABC):
    """Path-keyed read/write interface."""

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Check whether a file exists.

        Args:
            path: File path.

        Returns:
            True if the file exists.
        """
        pass

    @abstractmethod
    def read_text(self, path: Path) -> str:
        """Read a text file.

        Args:
            path: File path.

        Returns:
            File content.
        """
        pass

    @abstractmethod
    def read_bytes(self, path: Path) -> bytes:
        """Read a binary file."""
        pass

    @abstractmethod
    def write_text(self, path: Path, content: str, mode: int | None = None) -> None:
        """Write a text file, replacing any existing content.

        Missing parent directories are created.

        Args:
            path: File path.
            content: Text to write.
            mode: Optional permission bits applied after writing.
        """
        pass

    @abstractmethod
    def write_bytes(self, path: Path, data: bytes, mode: int | None = None) -> None:
        """Write a binary file, replacing any existing content.

        Missing parent directories are created.

        Args:
            path: File path.
            data: Bytes to write.
            mode: Optional permission bits applied after writing.
        """
        pass


class LocalFileAccess(FileAccess):
    """FileAccess backed by the local filesystem."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def read_text(self, path: Path) -> str:
        # newline="" keeps CRLF line endings intact
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()

    def read_bytes(self, path: Path) -> bytes:
        return path.read_bytes()

    def write_text(self, path: Path, content: str, mode: int | None = None) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        if mode is not None:
            os.chmod(path, mode)

    def write_bytes(self, path: Path, data: bytes, mode: int | None = None) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        if mode is not None:
            os.chmod(path, mode)
