"""Local port allocation for owned host entries."""

import logging
from collections.abc import Iterable
from pathlib import Path

from devssh.core.constant import DEFAULT_BASE_PORT, MAX_PORT
from devssh.core.errors import PortAllocationError
from devssh.ssh.classifier import is_owned, owned_entries
from devssh.ssh.config import HostEntry, ManagedConfig, Node

logger = logging.getLogger(__name__)


def allocate(existing_ports: Iterable[int], base_port: int = DEFAULT_BASE_PORT) -> int:
    """Get the smallest port at or above base_port not in existing_ports.

    Args:
        existing_ports: Ports already claimed.
        base_port: First port to consider.

    Returns:
        Free port.

    Raises:
        PortAllocationError: If every port up to 65535 is taken.
    """
    taken = set(existing_ports)
    port = base_port
    while port in taken:
        port += 1
    if port > MAX_PORT:
        raise PortAllocationError(f"No free port between {base_port} and {MAX_PORT}")
    return port


def owned_ports(config: ManagedConfig, managed_key_path: Path | str) -> set[int]:
    """Get the ports claimed by owned host blocks.

    Ports of foreign blocks are ignored. Owned blocks whose Port is missing or
    not a number claim nothing.
    """
    ports: set[int] = set()
    for host in owned_entries(config, managed_key_path):
        port = host.port
        if port is None:
            logger.warning(f"Managed host {host.name} has no usable Port")
            continue
        ports.add(port)
    return ports


class PortAllocator:
    """Hands out unique ports within one reconciliation cycle."""

    def __init__(self, existing_ports: Iterable[int], base_port: int = DEFAULT_BASE_PORT) -> None:
        """Initialize port allocator.

        Args:
            existing_ports: Ports already claimed by owned entries.
            base_port: First port to consider.
        """
        self._ports = set(existing_ports)
        self._base_port = base_port

    @property
    def ports(self) -> set[int]:
        """Get a copy of the claimed ports."""
        return set(self._ports)

    def allocate(self) -> int:
        """Allocate the next free port and claim it."""
        port = allocate(self._ports, self._base_port)
        self._ports.add(port)
        return port


def reassign_conflicting_ports(
    config: ManagedConfig,
    managed_key_path: Path | str,
    base_port: int = DEFAULT_BASE_PORT,
) -> tuple[ManagedConfig, list[tuple[str, int]]]:
    """Give owned host blocks that share a Port a port of their own.

    The first owned block using a port keeps it. Later owned blocks with the
    same port get the next free port and their Port line is rewritten in
    place. Foreign blocks are never touched. The input config is not
    modified.

    Args:
        config: Parsed SSH config.
        managed_key_path: Managed private key path.
        base_port: First port to consider for reassignment.

    Returns:
        Tuple of (new ManagedConfig, (host name, new port) per moved block).

    Raises:
        PortAllocationError: If no free port is left.
    """
    allocator = PortAllocator(owned_ports(config, managed_key_path), base_port)
    seen: set[int] = set()
    nodes: list[Node] = []
    moved: list[tuple[str, int]] = []

    for node in config.nodes:
        if isinstance(node, HostEntry) and is_owned(node, managed_key_path) and node.port is not None:
            if node.port in seen:
                port = allocator.allocate()
                logger.debug(f"Managed host {node.name} shares port {node.port}, moving to {port}")
                node = node.with_port(port)
                moved.append((node.name, port))
            seen.add(node.port)
        nodes.append(node)

    return ManagedConfig(nodes), moved
