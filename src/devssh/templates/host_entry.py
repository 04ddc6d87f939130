"""SSH host entry template rendering."""

import re
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateError

from devssh.core.constant import DEFAULT_SSH_HOSTNAME, DEFAULT_SSH_USER, MAX_PORT
from devssh.core.errors import RenderError

# DNS-style names only; anything else could inject directives or patterns
_HOST_NAME_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9._-]*[A-Za-z0-9])?$")
_MAX_HOST_NAME_LENGTH = 253


def validate_host_name(host_name: str) -> None:
    """Check that a workspace name can be used as a Host value.

    Args:
        host_name: Workspace DNS name.

    Raises:
        RenderError: If the name is empty, too long, or not DNS-style.
    """
    if not host_name:
        raise RenderError("Host name is empty", host_name)
    if len(host_name) > _MAX_HOST_NAME_LENGTH:
        raise RenderError("Host name is too long", host_name)
    if not _HOST_NAME_RE.match(host_name):
        raise RenderError("Host name contains invalid characters", host_name)


def format_path_value(path: Path | str) -> str:
    """Format a path as a directive value, quoting it if it has spaces."""
    value = str(path)
    if any(c.isspace() for c in value):
        return f'"{value}"'
    return value


class HostEntryTemplate:
    """Renders host blocks for workspaces managed by devssh."""

    _TEMPLATE_DIR = Path(__file__).parent / "files"
    _TEMPLATE_NAME = "host_entry.j2"

    def __init__(
        self,
        identity_file: Path | str,
        hostname: str = DEFAULT_SSH_HOSTNAME,
        user: str = DEFAULT_SSH_USER,
    ) -> None:
        """Initialize host entry template.

        Args:
            identity_file: Managed private key path.
            hostname: Address ssh connects to.
            user: Remote user.
        """
        self._identity_file = identity_file
        self._hostname = hostname
        self._user = user

        self._env = Environment(
            loader=FileSystemLoader(self._TEMPLATE_DIR),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )

    def _load_template(self) -> Template:
        return self._env.get_template(self._TEMPLATE_NAME)

    def render(self, host_name: str, port: int, newline: str = "\n") -> str:
        """Render a host block.

        Args:
            host_name: Workspace DNS name used as the Host value.
            port: Local port allocated for the workspace.
            newline: Line ending, matching the file the block goes into.

        Returns:
            Host block text ending with a newline.

        Raises:
            RenderError: If the host name or port is invalid, or the
                template fails to render.
        """
        validate_host_name(host_name)
        if not 1 <= port <= MAX_PORT:
            raise RenderError(f"Port {port} is out of range", host_name)

        try:
            text = self._load_template().render(
                host=host_name,
                hostname=self._hostname,
                identity_file=format_path_value(self._identity_file),
                user=self._user,
                port=port,
            )
        except TemplateError as e:
            raise RenderError(f"Template failed to render: {e}", host_name) from e

        if newline != "\n":
            text = text.replace("\n", newline)
        return text
