"""SSH config reconciliation against the set of active workspaces.

One cycle:

    START -> KEY_INSTALLED -> LOADED -> BACKED_UP -> ENTRIES_ADDED -> WRITTEN
          -> RELOADED -> PRUNED -> FINAL_WRITTEN -> DONE

Any fatal error moves the reconciler to FAILED and is re-raised. Nothing in
the config file changes before BACKED_UP. After that the file holds whatever
the last successful write produced and the backup can be used to restore it.
"""

import logging
import stat
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from devssh.core.errors import (
    BackupError,
    ConfigReadError,
    DevsshError,
    DirectoryFetchError,
    KeyInstallError,
    RenderError,
    WriteError,
)
from devssh.core.fs import FileAccess, LocalFileAccess
from devssh.core.paths import format_backup_timestamp, get_backup_path
from devssh.core.types import ReconcileSettings
from devssh.ssh.classifier import owned_entries
from devssh.ssh.config import HostEntry, ManagedConfig, Verbatim, parse
from devssh.ssh.keys import SSHKeyInstaller
from devssh.ssh.ports import PortAllocator, owned_ports, reassign_conflicting_ports
from devssh.ssh.prune import dedupe, prune, stale_hosts
from devssh.templates.host_entry import HostEntryTemplate, validate_host_name
from devssh.workspace.credentials import CredentialStore
from devssh.workspace.directory import WorkspaceDirectory

logger = logging.getLogger(__name__)

SSH_CONFIG_MODE = stat.S_IRUSR | stat.S_IWUSR


class ReconcileState(Enum):
    """Reconciliation cycle state."""

    START = "start"
    KEY_INSTALLED = "key_installed"
    LOADED = "loaded"
    BACKED_UP = "backed_up"
    ENTRIES_ADDED = "entries_added"
    WRITTEN = "written"
    RELOADED = "reloaded"
    PRUNED = "pruned"
    FINAL_WRITTEN = "final_written"
    DONE = "done"
    FAILED = "failed"


@dataclass
class AddedHost:
    """Host entry created during a cycle."""

    name: str
    port: int


@dataclass
class ReconcileResult:
    """Outcome of a completed reconciliation cycle."""

    state: ReconcileState
    config_path: Path
    backup_path: Path | None = None
    active: list[str] = field(default_factory=list)
    added: list[AddedHost] = field(default_factory=list)
    pruned: list[str] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)
    reassigned: list[AddedHost] = field(default_factory=list)
    render_errors: list[RenderError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Whether every active workspace got an entry."""
        return not self.render_errors


def _line_ending(text: str) -> str:
    """Line ending used by the first line of text. Defaults to LF."""
    end = text.find("\n")
    if end > 0 and text[end - 1] == "\r":
        return "\r\n"
    return "\n"


def _separator(text: str, newline: str = "\n") -> str:
    """Blank line needed before a block appended to text."""
    if not text or text.endswith(newline * 2):
        return ""
    if text.endswith("\n"):
        return newline
    return newline * 2


def _read_config_text(fs: FileAccess, path: Path) -> str:
    try:
        return fs.read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigReadError(f"Could not read SSH config ({e})", path) from e


def load_config(path: Path, fs: FileAccess | None = None) -> ManagedConfig:
    """Parse an SSH config file.

    Args:
        path: SSH config path.
        fs: File access. Uses the local filesystem if None.

    Returns:
        Parsed config, empty if the file does not exist.

    Raises:
        ConfigReadError: If the file cannot be read.
        DecodeError: If the file is malformed.
    """
    fs = fs or LocalFileAccess()
    if not fs.exists(path):
        return ManagedConfig()
    return parse(_read_config_text(fs, path))


def get_configured_port(path: Path, host_name: str, fs: FileAccess | None = None) -> int | None:
    """Get the port an SSH config assigns to a host name.

    Args:
        path: SSH config path.
        host_name: Workspace DNS name.
        fs: File access. Uses the local filesystem if None.

    Returns:
        Port, or None if the config has no entry setting one.
    """
    return load_config(path, fs).get_port(host_name)


class SSHConfigReconciler:
    """Keeps the SSH config in line with the caller's active workspaces."""

    def __init__(
        self,
        workspace_directory: WorkspaceDirectory,
        credential_store: CredentialStore,
        settings: ReconcileSettings | None = None,
        fs: FileAccess | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize SSH config reconciler.

        Args:
            workspace_directory: Source of active workspaces.
            credential_store: Source of the managed private key.
            settings: Paths, port base and entry values. Defaults if None.
            fs: File access for every read and write. Local filesystem if None.
            clock: Returns the current time, used for backup names.
        """
        self._directory = workspace_directory
        self._credentials = credential_store
        self._settings = settings or ReconcileSettings()
        self._fs = fs or LocalFileAccess()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._state = ReconcileState.START
        self._failure: DevsshError | None = None
        self._template = HostEntryTemplate(
            identity_file=self._settings.private_key_path,
            hostname=self._settings.hostname,
            user=self._settings.user,
        )

    @property
    def settings(self) -> ReconcileSettings:
        """Get reconcile settings."""
        return self._settings

    @property
    def state(self) -> ReconcileState:
        """Get the state reached by the current or last cycle."""
        return self._state

    @property
    def failure(self) -> DevsshError | None:
        """Get the error that failed the last cycle, if any."""
        return self._failure

    @property
    def config_path(self) -> Path:
        """Get SSH config path."""
        return self._settings.ssh_config_path

    @property
    def key_path(self) -> Path:
        """Get managed private key path."""
        return self._settings.private_key_path

    def _transition(self, state: ReconcileState) -> None:
        logger.debug(f"SSH config reconcile: {self._state.value} -> {state.value}")
        self._state = state

    def reconcile(self) -> ReconcileResult:
        """Run one reconciliation cycle.

        Returns:
            ReconcileResult describing what changed.

        Raises:
            DevsshError: On any fatal error. The reconciler is left in FAILED.
        """
        self._state = ReconcileState.START
        self._failure = None
        try:
            return self._run()
        except DevsshError as e:
            logger.debug(f"SSH config reconcile failed in state {self._state.value}: {e}")
            self._failure = e
            self._state = ReconcileState.FAILED
            raise

    def _run(self) -> ReconcileResult:
        result = ReconcileResult(state=self._state, config_path=self.config_path)

        self._install_key()
        self._transition(ReconcileState.KEY_INSTALLED)

        result.active = self._fetch_active_identifiers()
        text = self._load_text()
        config = parse(text)
        self._transition(ReconcileState.LOADED)

        result.backup_path = self._backup(text)
        self._transition(ReconcileState.BACKED_UP)

        result.added, result.render_errors = self._add_entries(config, result.active)
        self._transition(ReconcileState.ENTRIES_ADDED)

        self._write(config.text, result.backup_path)
        self._transition(ReconcileState.WRITTEN)

        # Prune works from what is on disk, not from the in-memory config
        config = parse(self._read_text())
        self._transition(ReconcileState.RELOADED)

        result.pruned = stale_hosts(config, result.active, self.key_path)
        config = prune(config, result.active, self.key_path)
        config, result.duplicates = dedupe(config, self.key_path)
        config, moved = reassign_conflicting_ports(config, self.key_path, self._settings.base_port)
        result.reassigned = [AddedHost(name=name, port=port) for name, port in moved]
        self._transition(ReconcileState.PRUNED)

        self._write(config.text, result.backup_path)
        self._transition(ReconcileState.FINAL_WRITTEN)

        self._transition(ReconcileState.DONE)
        result.state = self._state

        for host in result.added:
            logger.info(f"Added SSH host {host.name} on port {host.port}")
        for name in result.pruned:
            logger.info(f"Removed SSH host {name}")
        for name in result.duplicates:
            logger.info(f"Removed duplicate SSH host {name}")
        for host in result.reassigned:
            logger.info(f"Moved SSH host {host.name} to port {host.port}")
        for error in result.render_errors:
            logger.warning(f"Skipped workspace: {error}")

        return result

    def _install_key(self) -> None:
        try:
            material = self._credentials.get_private_key_material()
        except DevsshError:
            raise
        except Exception as e:
            raise KeyInstallError(f"Could not get private key material: {e}") from e
        installer = SSHKeyInstaller(self.key_path, fs=self._fs, validate=self._settings.validate_key)
        installer.install(material)

    def _fetch_active_identifiers(self) -> list[str]:
        try:
            return self._directory.list_active_identifiers()
        except DirectoryFetchError:
            raise
        except Exception as e:
            raise DirectoryFetchError(f"Could not list active workspaces: {e}") from e

    def _read_text(self) -> str:
        return _read_config_text(self._fs, self.config_path)

    def _load_text(self) -> str:
        """Read the SSH config, creating an empty one if it does not exist."""
        if self._fs.exists(self.config_path):
            return self._read_text()

        logger.debug(f"Creating empty SSH config at {self.config_path}")
        try:
            self._fs.write_text(self.config_path, "", mode=SSH_CONFIG_MODE)
        except OSError as e:
            raise WriteError(f"Could not create SSH config ({e})", self.config_path) from e
        return ""

    def _backup(self, text: str) -> Path:
        """Persist the pre-cycle config without overwriting older backups."""
        timestamp = format_backup_timestamp(self._clock())
        generation = 0
        backup_path = get_backup_path(self.config_path, timestamp, backup_dir=self._settings.backup_dir)
        while self._fs.exists(backup_path):
            generation += 1
            backup_path = get_backup_path(
                self.config_path,
                timestamp,
                generation=generation,
                backup_dir=self._settings.backup_dir,
            )

        try:
            self._fs.write_text(backup_path, text, mode=SSH_CONFIG_MODE)
        except OSError as e:
            raise BackupError(f"Could not back up SSH config ({e})", backup_path) from e

        logger.info(f"Editing SSH config, backed up at {backup_path}")
        return backup_path

    def _add_entries(
        self, config: ManagedConfig, active: list[str]
    ) -> tuple[list[AddedHost], list[RenderError]]:
        """Append an owned entry for every active workspace that lacks one."""
        owned = owned_entries(config, self.key_path)
        newline = _line_ending(config.text)
        allocator = PortAllocator(owned_ports(config, self.key_path), self._settings.base_port)
        added: list[AddedHost] = []
        errors: list[RenderError] = []

        for name in active:
            if any(host.matches(name) for host in owned):
                continue
            try:
                validate_host_name(name)
                port = allocator.allocate()
                block = self._template.render(name, port, newline=newline)
            except RenderError as e:
                errors.append(e)
                continue

            separator = _separator(config.text, newline)
            if separator:
                config.append(Verbatim([separator]))
            nodes = parse(block).nodes
            config.nodes.extend(nodes)
            owned.extend(node for node in nodes if isinstance(node, HostEntry))
            added.append(AddedHost(name=name, port=port))

        return added, errors

    def _write(self, text: str, backup_path: Path | None) -> None:
        try:
            self._fs.write_text(self.config_path, text)
        except OSError as e:
            raise WriteError(f"Could not write SSH config ({e})", self.config_path, backup_path) from e

    def get_configured_port(self, host_name: str) -> int | None:
        """Get the port the SSH config assigns to a workspace.

        Args:
            host_name: Workspace DNS name.

        Returns:
            Port, or None if the config has no entry setting one.
        """
        return get_configured_port(self.config_path, host_name, self._fs)
