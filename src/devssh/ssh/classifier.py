"""Decide which host blocks are managed by devssh."""

from enum import Enum
from pathlib import Path

from devssh.ssh.config import HostEntry, ManagedConfig, Node, split_args


class NodeKind(Enum):
    """Kind of a config node from devssh's point of view."""

    OWNED = "owned"
    FOREIGN = "foreign"
    VERBATIM = "verbatim"


def is_owned(entry: HostEntry, managed_key_path: Path | str) -> bool:
    """Check whether a host block belongs to devssh.

    A block is owned when one of its IdentityFile values is exactly the
    managed key path, optionally wrapped in double quotes. This is a plain
    string comparison: a block pointing at the same key through another
    spelling (``~``, a symlink) is foreign.

    Args:
        entry: Host block.
        managed_key_path: Managed private key path.

    Returns:
        True if devssh owns the block.
    """
    if not entry.is_host:
        return False
    key_path = str(managed_key_path)
    for value in entry.get_all("IdentityFile"):
        if value == key_path or split_args(value) == [key_path]:
            return True
    return False


def classify(node: Node, managed_key_path: Path | str) -> NodeKind:
    """Tag a node as owned, foreign or verbatim."""
    if not isinstance(node, HostEntry):
        return NodeKind.VERBATIM
    if is_owned(node, managed_key_path):
        return NodeKind.OWNED
    return NodeKind.FOREIGN


def owned_entries(config: ManagedConfig, managed_key_path: Path | str) -> list[HostEntry]:
    """Get owned host blocks in file order."""
    return [host for host in config.hosts if is_owned(host, managed_key_path)]
