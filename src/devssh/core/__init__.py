"""Core layer for devssh."""

from devssh.core.config import Config
from devssh.core.errors import DevsshError
from devssh.core.fs import FileAccess, LocalFileAccess
from devssh.core.types import ReconcileSettings, Workspace, WorkspaceStatus

__all__ = [
    "Config",
    "DevsshError",
    "FileAccess",
    "LocalFileAccess",
    "ReconcileSettings",
    "Workspace",
    "WorkspaceStatus",
]
