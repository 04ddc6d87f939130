"""Removal of owned host blocks for inactive workspaces."""

from collections.abc import Iterable
from pathlib import Path

from devssh.ssh.classifier import NodeKind, classify
from devssh.ssh.config import HostEntry, ManagedConfig, Node


def _is_stale(node: Node, active_names: list[str], managed_key_path: Path | str) -> bool:
    if not isinstance(node, HostEntry) or classify(node, managed_key_path) != NodeKind.OWNED:
        return False
    return not any(node.matches(name) for name in active_names)


def prune(
    config: ManagedConfig,
    active_names: Iterable[str],
    managed_key_path: Path | str,
) -> ManagedConfig:
    """Drop owned host blocks that no active workspace matches.

    Foreign blocks and verbatim lines are always kept. Surviving nodes keep
    their order. The input config is not modified.

    Args:
        config: Parsed SSH config.
        active_names: DNS names of active workspaces.
        managed_key_path: Managed private key path.

    Returns:
        New ManagedConfig without stale owned blocks.
    """
    names = list(active_names)
    return ManagedConfig(
        [node for node in config.nodes if not _is_stale(node, names, managed_key_path)]
    )


def stale_hosts(
    config: ManagedConfig,
    active_names: Iterable[str],
    managed_key_path: Path | str,
) -> list[str]:
    """Get names of owned host blocks that prune would drop."""
    names = list(active_names)
    return [host.name for host in config.hosts if _is_stale(host, names, managed_key_path)]


def dedupe(config: ManagedConfig, managed_key_path: Path | str) -> tuple[ManagedConfig, list[str]]:
    """Drop owned host blocks that repeat an earlier owned block's name.

    The first owned block for a name wins. Foreign blocks are never touched,
    even when they share a name with an owned one.

    Args:
        config: Parsed SSH config.
        managed_key_path: Managed private key path.

    Returns:
        Tuple of (new ManagedConfig, names of dropped duplicates).
    """
    seen: set[str] = set()
    kept: list[Node] = []
    dropped: list[str] = []
    for node in config.nodes:
        if isinstance(node, HostEntry) and classify(node, managed_key_path) == NodeKind.OWNED:
            if node.name in seen:
                dropped.append(node.name)
                continue
            seen.add(node.name)
        kept.append(node)
    return ManagedConfig(kept), dropped
