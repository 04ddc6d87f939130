"""Type definitions for devssh."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from devssh.core.constant import (
    DEFAULT_BASE_PORT,
    DEFAULT_SSH_HOSTNAME,
    DEFAULT_SSH_USER,
    MAX_PORT,
)
from devssh.core.paths import get_private_key_path, get_user_ssh_config_path


class WorkspaceStatus(Enum):
    """Remote workspace status as reported by the workspace directory."""

    RUNNING = "RUNNING"
    STARTING = "STARTING"
    STOPPING = "STOPPING"
    STOPPED = "STOPPED"
    DELETING = "DELETING"
    FAILURE = "FAILURE"


class Workspace(BaseModel):
    """A remote workspace. Read-only to devssh."""

    id: str
    name: str = ""
    dns: str
    status: WorkspaceStatus = WorkspaceStatus.RUNNING

    model_config = {"extra": "ignore"}

    @property
    def is_active(self) -> bool:
        """Whether the workspace should have an SSH host entry."""
        return self.status == WorkspaceStatus.RUNNING


class WorkspaceCache(BaseModel):
    """Cached listing of an organization's workspaces."""

    org_id: str = Field(default="", alias="orgID")
    workspaces: list[Workspace] = Field(default_factory=list)

    model_config = {"extra": "ignore", "populate_by_name": True}


class ReconcileSettings(BaseModel):
    """Settings for a reconciliation cycle."""

    ssh_config_path: Path = Field(default_factory=get_user_ssh_config_path)
    private_key_path: Path = Field(default_factory=get_private_key_path)
    backup_dir: Path | None = None
    base_port: int = Field(default=DEFAULT_BASE_PORT, ge=1, le=MAX_PORT)
    hostname: str = DEFAULT_SSH_HOSTNAME
    user: str = DEFAULT_SSH_USER
    validate_key: bool = True

    model_config = {"extra": "forbid"}
