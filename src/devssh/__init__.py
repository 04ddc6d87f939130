"""devssh - Keep the SSH client config in sync with remote workspaces.

This package maintains one SSH host entry per active remote workspace in the
user's SSH config, removes entries for workspaces that are gone, and leaves
every entry it does not own untouched.
"""

from devssh.core.config import Config
from devssh.core.errors import (
    BackupError,
    ConfigReadError,
    DecodeError,
    DevsshError,
    DirectoryFetchError,
    KeyInstallError,
    PortAllocationError,
    RenderError,
    WriteError,
)
from devssh.core.fs import FileAccess, LocalFileAccess
from devssh.core.types import ReconcileSettings, Workspace, WorkspaceStatus
from devssh.reconciler import (
    ReconcileResult,
    ReconcileState,
    SSHConfigReconciler,
    get_configured_port,
    load_config,
)
from devssh.workspace.credentials import CredentialStore, FileCredentialStore
from devssh.workspace.directory import (
    CachedWorkspaceDirectory,
    StaticWorkspaceDirectory,
    WorkspaceDirectory,
)

__version__ = "0.1.0"

__all__ = [
    # Reconciliation
    "ReconcileResult",
    "ReconcileSettings",
    "ReconcileState",
    "SSHConfigReconciler",
    "get_configured_port",
    "load_config",
    # Collaborators
    "CachedWorkspaceDirectory",
    "CredentialStore",
    "FileCredentialStore",
    "StaticWorkspaceDirectory",
    "Workspace",
    "WorkspaceDirectory",
    "WorkspaceStatus",
    # Files and configuration
    "Config",
    "FileAccess",
    "LocalFileAccess",
    # Errors
    "BackupError",
    "ConfigReadError",
    "DecodeError",
    "DevsshError",
    "DirectoryFetchError",
    "KeyInstallError",
    "PortAllocationError",
    "RenderError",
    "WriteError",
]


def main() -> None:
    """CLI entry point."""
    import sys

    from devssh.cli import main as cli_main

    sys.exit(cli_main())
