"""Template rendering for devssh."""

from devssh.templates.host_entry import HostEntryTemplate

__all__ = [
    "HostEntryTemplate",
]
