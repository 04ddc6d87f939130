"""Workspace and credential sources for devssh."""

from devssh.workspace.credentials import CredentialStore, FileCredentialStore
from devssh.workspace.directory import (
    CachedWorkspaceDirectory,
    StaticWorkspaceDirectory,
    WorkspaceDirectory,
)

__all__ = [
    "CachedWorkspaceDirectory",
    "CredentialStore",
    "FileCredentialStore",
    "StaticWorkspaceDirectory",
    "WorkspaceDirectory",
]
