"""Pytest fixtures and configuration."""

import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Generator

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from devssh.core.errors import DirectoryFetchError
from devssh.core.types import ReconcileSettings, Workspace, WorkspaceStatus
from devssh.reconciler import SSHConfigReconciler
from devssh.workspace.credentials import CredentialStore
from devssh.workspace.directory import StaticWorkspaceDirectory, WorkspaceDirectory


class FakeCredentialStore(CredentialStore):
    """Credential store returning fixed key material."""

    def __init__(self, material: bytes) -> None:
        self.material = material
        self.calls = 0

    def get_private_key_material(self) -> bytes:
        self.calls += 1
        return self.material


class FailingWorkspaceDirectory(WorkspaceDirectory):
    """Workspace directory whose listing always fails."""

    def list_workspaces(self) -> list[Workspace]:
        raise DirectoryFetchError("workspace service unavailable")


def make_directory(*dns_names: str) -> StaticWorkspaceDirectory:
    """Create a directory with one running workspace per DNS name."""
    return StaticWorkspaceDirectory(
        [
            Workspace(id=f"ws-{i}", dns=dns, status=WorkspaceStatus.RUNNING)
            for i, dns in enumerate(dns_names)
        ]
    )


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def private_key_material() -> bytes:
    """Generate an unencrypted OpenSSH private key."""
    private_key = ed25519.Ed25519PrivateKey.generate()
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.OpenSSH,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture
def settings(temp_dir: Path) -> ReconcileSettings:
    """Reconcile settings rooted in the temporary directory."""
    return ReconcileSettings(
        ssh_config_path=temp_dir / "ssh" / "config",
        private_key_path=temp_dir / "devssh" / "devssh.pem",
    )


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock frozen at a known instant."""
    moment = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
    return lambda: moment


@pytest.fixture
def make_reconciler(
    settings: ReconcileSettings,
    private_key_material: bytes,
    fixed_clock: Callable[[], datetime],
) -> Callable[..., SSHConfigReconciler]:
    """Factory for reconcilers over the test settings."""

    def factory(directory: WorkspaceDirectory, **kwargs) -> SSHConfigReconciler:
        kwargs.setdefault("settings", settings)
        kwargs.setdefault("clock", fixed_clock)
        return SSHConfigReconciler(
            workspace_directory=directory,
            credential_store=FakeCredentialStore(private_key_material),
            **kwargs,
        )

    return factory


@pytest.fixture
def workspaces() -> Callable[..., StaticWorkspaceDirectory]:
    """Factory for directories of running workspaces."""
    return make_directory


@pytest.fixture
def failing_directory() -> FailingWorkspaceDirectory:
    """Workspace directory that cannot be reached."""
    return FailingWorkspaceDirectory()
