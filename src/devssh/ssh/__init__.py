"""SSH client config handling for devssh."""

from devssh.ssh.classifier import NodeKind, classify, is_owned
from devssh.ssh.config import HostEntry, ManagedConfig, Verbatim, parse, serialize
from devssh.ssh.keys import SSHKeyInstaller
from devssh.ssh.ports import PortAllocator, allocate, reassign_conflicting_ports
from devssh.ssh.prune import prune

__all__ = [
    "HostEntry",
    "ManagedConfig",
    "NodeKind",
    "PortAllocator",
    "SSHKeyInstaller",
    "Verbatim",
    "allocate",
    "classify",
    "is_owned",
    "parse",
    "prune",
    "reassign_conflicting_ports",
    "serialize",
]
