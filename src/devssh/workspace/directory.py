"""Workspace directory: where the list of active workspaces comes from."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError

from devssh.core.errors import DirectoryFetchError
from devssh.core.fs import FileAccess, LocalFileAccess
from devssh.core.types import Workspace, WorkspaceCache

logger = logging.getLogger(__name__)


class WorkspaceDirectory(ABC):
    """Source of the caller's workspaces.

    Implementations only need to list workspaces; filtering down to active
    identifiers is shared.
    """

    @abstractmethod
    def list_workspaces(self) -> list[Workspace]:
        """List the caller's workspaces.

        Returns:
            Workspaces in directory order.

        Raises:
            DirectoryFetchError: If the workspaces cannot be listed.
        """
        pass

    def list_active_identifiers(self) -> list[str]:
        """List DNS names of active workspaces.

        Returns:
            Unique DNS names in directory order.
        """
        identifiers: list[str] = []
        seen: set[str] = set()
        for workspace in self.list_workspaces():
            if not workspace.is_active or workspace.dns in seen:
                continue
            seen.add(workspace.dns)
            identifiers.append(workspace.dns)
        return identifiers


class StaticWorkspaceDirectory(WorkspaceDirectory):
    """Workspace directory over a fixed list of workspaces."""

    def __init__(self, workspaces: list[Workspace]) -> None:
        self._workspaces = list(workspaces)

    def list_workspaces(self) -> list[Workspace]:
        return list(self._workspaces)


class CachedWorkspaceDirectory(WorkspaceDirectory):
    """Workspace directory backed by a JSON workspace cache file.

    The cache holds one organization's listing::

        {"orgID": "org-1", "workspaces": [{"id": "...", "dns": "...", "status": "RUNNING"}]}
    """

    def __init__(self, cache_path: Path, fs: FileAccess | None = None) -> None:
        """Initialize cached workspace directory.

        Args:
            cache_path: Path to the workspace cache file.
            fs: File access. Uses the local filesystem if None.
        """
        self._cache_path = cache_path
        self._fs = fs or LocalFileAccess()

    @property
    def cache_path(self) -> Path:
        """Get workspace cache path."""
        return self._cache_path

    def load(self) -> WorkspaceCache:
        """Load and validate the workspace cache.

        Raises:
            DirectoryFetchError: If the cache is missing, unreadable or invalid.
        """
        if not self._fs.exists(self._cache_path):
            raise DirectoryFetchError(f"Workspace cache not found: {self._cache_path}")
        try:
            content = self._fs.read_text(self._cache_path)
        except OSError as e:
            raise DirectoryFetchError(f"Could not read workspace cache {self._cache_path}: {e}") from e
        try:
            return WorkspaceCache.model_validate_json(content)
        except ValidationError as e:
            raise DirectoryFetchError(f"Invalid workspace cache {self._cache_path}: {e}") from e

    def list_workspaces(self) -> list[Workspace]:
        cache = self.load()
        logger.debug(f"Loaded {len(cache.workspaces)} workspace(s) for org {cache.org_id or '?'}")
        return cache.workspaces
