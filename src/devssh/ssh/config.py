"""SSH client config parsing and serialization.

The parser is lossless: every node keeps the raw lines it was decoded from,
including comments, blank lines, indentation and line endings, so
``serialize(parse(text)) == text`` for any well-formed input.

Lines before the first ``Host``/``Match`` keyword become a Verbatim node.
Every line after a ``Host``/``Match`` keyword, up to the next one, belongs to
that HostEntry, except for a run of comment lines directly above the next
``Host``/``Match`` line: those head the next block.
"""

import re
from dataclasses import dataclass, field

from devssh.core.errors import DecodeError

BLOCK_KEYWORDS = ("host", "match")

_DIRECTIVE_RE = re.compile(r"^([^\s=]+)(?:\s*=\s*|\s+)(.*)$")
_KEYWORD_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")
_ARG_RE = re.compile(r'"([^"]*)"|(\S+)')
_VALUE_RE = re.compile(r"^(\s*[^\s=]+(?:\s*=\s*|\s+))(.*?)(\s*)$")


@dataclass
class Directive:
    """A single ``Key value`` line."""

    key: str
    value: str
    line_number: int

    @property
    def args(self) -> list[str]:
        """Whitespace separated arguments with double quotes removed."""
        return split_args(self.value)


@dataclass
class HostEntry:
    """A Host (or Match) block and the lines that follow it."""

    keyword: str
    patterns: list[str]
    lines: list[str]
    directives: list[Directive] = field(default_factory=list)

    @property
    def is_host(self) -> bool:
        """Whether this is a Host block rather than a Match block."""
        return self.keyword.lower() == "host"

    @property
    def name(self) -> str:
        """First host pattern of the block."""
        return self.patterns[0]

    @property
    def text(self) -> str:
        """Raw text of the block."""
        return "".join(self.lines)

    def get(self, key: str) -> str | None:
        """Get the first value of a directive.

        Args:
            key: Directive keyword (case-insensitive).

        Returns:
            Raw directive value, or None if the block does not set it.
        """
        key = key.lower()
        for directive in self.directives:
            if directive.key.lower() == key:
                return directive.value
        return None

    def get_all(self, key: str) -> list[str]:
        """Get every value of a repeatable directive such as IdentityFile."""
        key = key.lower()
        return [d.value for d in self.directives if d.key.lower() == key]

    @property
    def port(self) -> int | None:
        """Port directive as an int, or None if missing or not a number."""
        value = self.get("Port")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    def matches(self, host_name: str) -> bool:
        """Check whether a host name selects this block.

        Match blocks never match; their criteria are not host patterns.
        """
        if not self.is_host:
            return False
        return match_host(self.patterns, host_name)

    def with_port(self, port: int) -> "HostEntry":
        """Copy of the block with its first Port value replaced.

        Indentation, the key/value separator and the line ending of the Port
        line are kept.

        Args:
            port: New port.

        Returns:
            New HostEntry. This entry is not modified.

        Raises:
            ValueError: If the block has no Port line.
        """
        lines = list(self.lines)
        for index, line in enumerate(lines):
            directive = _parse_line(line, index + 1)
            if directive is None or directive.key.lower() != "port":
                continue
            body = line.rstrip("\r\n")
            prefix, _, suffix = _VALUE_RE.match(body).groups()
            lines[index] = f"{prefix}{port}{suffix}{line[len(body):]}"
            break
        else:
            raise ValueError(f"Host {self.name} has no Port line")

        directives = list(self.directives)
        for index, directive in enumerate(directives):
            if directive.key.lower() == "port":
                directives[index] = Directive(directive.key, str(port), directive.line_number)
                break
        return HostEntry(keyword=self.keyword, patterns=list(self.patterns), lines=lines, directives=directives)


@dataclass
class Verbatim:
    """Lines outside any host block, kept as-is."""

    lines: list[str]

    @property
    def text(self) -> str:
        """Raw text of the node."""
        return "".join(self.lines)


Node = HostEntry | Verbatim


@dataclass
class ManagedConfig:
    """A whole SSH config file as an ordered sequence of nodes."""

    nodes: list[Node] = field(default_factory=list)

    @property
    def hosts(self) -> list[HostEntry]:
        """All host blocks in file order."""
        return [node for node in self.nodes if isinstance(node, HostEntry)]

    @property
    def text(self) -> str:
        """Serialized config."""
        return "".join(node.text for node in self.nodes)

    def append(self, node: Node) -> None:
        """Append a node at the end of the file."""
        self.nodes.append(node)

    def find(self, host_name: str) -> HostEntry | None:
        """Find the first Host block matching a host name."""
        for host in self.hosts:
            if host.matches(host_name):
                return host
        return None

    def get_port(self, host_name: str) -> int | None:
        """Get the port ssh would use for a host name.

        Follows ssh's first-obtained-value rule: the first matching block
        that sets Port wins.

        Args:
            host_name: Host name to look up.

        Returns:
            Configured port, or None if no matching block sets one.
        """
        for host in self.hosts:
            if host.matches(host_name) and host.get("Port") is not None:
                return host.port
        return None


def split_args(value: str) -> list[str]:
    """Split a directive value into arguments, honoring double quotes."""
    return [quoted or bare for quoted, bare in _ARG_RE.findall(value)]


def _pattern_to_regex(pattern: str) -> re.Pattern[str]:
    parts = [".*" if c == "*" else "." if c == "?" else re.escape(c) for c in pattern]
    return re.compile("".join(parts), re.DOTALL)


def match_host(patterns: list[str], host_name: str) -> bool:
    """Match a host name against Host patterns the way ssh does.

    ``*`` and ``?`` are wildcards and a leading ``!`` negates a pattern. A
    matching negated pattern rejects the host regardless of the others.
    Matching is case-sensitive; ssh lowercases the host name it looks up but
    not the patterns.

    Args:
        patterns: Patterns from a Host line.
        host_name: Host name to test.

    Returns:
        True if the host name is selected.
    """
    matched = False
    for pattern in patterns:
        negated = pattern.startswith("!")
        if negated:
            pattern = pattern[1:]
        if _pattern_to_regex(pattern).fullmatch(host_name):
            if negated:
                return False
            matched = True
    return matched


def _parse_line(line: str, line_number: int) -> Directive | None:
    """Decode one line. Returns None for blank lines and comments."""
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None

    if stripped.count('"') % 2:
        raise DecodeError("unterminated quote", line_number, line.rstrip("\r\n"))

    match = _DIRECTIVE_RE.match(stripped)
    if match is None or not match.group(2).strip():
        raise DecodeError("missing value", line_number, line.rstrip("\r\n"))

    key, value = match.group(1), match.group(2).strip()
    if not _KEYWORD_RE.match(key):
        raise DecodeError("invalid keyword", line_number, line.rstrip("\r\n"))

    return Directive(key=key, value=value, line_number=line_number)


def _take_trailing_comments(lines: list[str]) -> list[str]:
    """Remove and return the run of comment lines at the end of a block."""
    start = len(lines)
    while start > 0 and lines[start - 1].strip().startswith("#"):
        start -= 1
    taken = lines[start:]
    del lines[start:]
    return taken


def parse(text: str) -> ManagedConfig:
    """Decode SSH client config text.

    Args:
        text: Config file content.

    Returns:
        ManagedConfig whose serialization equals ``text``.

    Raises:
        DecodeError: If a line is malformed.
    """
    config = ManagedConfig()
    prefix: list[str] = []
    current: HostEntry | None = None

    for line_number, line in enumerate(text.splitlines(keepends=True), start=1):
        directive = _parse_line(line, line_number)

        if directive is not None and directive.key.lower() in BLOCK_KEYWORDS:
            leading: list[str] = []
            if current is not None:
                leading = _take_trailing_comments(current.lines)
                config.append(current)
            elif prefix:
                config.append(Verbatim(prefix))
            current = HostEntry(
                keyword=directive.key,
                patterns=directive.args,
                lines=[*leading, line],
            )
            continue

        if current is None:
            prefix.append(line)
        else:
            current.lines.append(line)
            if directive is not None:
                current.directives.append(directive)

    if current is not None:
        config.append(current)
    elif prefix:
        config.append(Verbatim(prefix))

    return config


def serialize(config: ManagedConfig) -> str:
    """Encode a ManagedConfig back to text."""
    return config.text
