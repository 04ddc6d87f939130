"""Tests for devssh.ssh.config module."""

import pytest

from devssh.core.errors import DecodeError
from devssh.ssh.config import (
    HostEntry,
    ManagedConfig,
    Verbatim,
    match_host,
    parse,
    serialize,
    split_args,
)

SAMPLE_CONFIG = """\
# Global settings
ServerAliveInterval 60

Host github.com
    HostName github.com
    User git
    IdentityFile ~/.ssh/id_github

# Work machines
Host work-*  !work-legacy
\tUser alice
\tPort=2200

Match host *.internal exec "test -f /tmp/x"
    ForwardAgent yes
"""


class TestRoundTrip:
    """Tests for lossless parse/serialize."""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "\n",
            "# only a comment\n",
            SAMPLE_CONFIG,
            "Host a\n    Port 22",  # no trailing newline
            "Host a\r\n    Port 22\r\n\r\nHost b\r\n    Port 23\r\n",
            "  Host indented\n      User x\n\n\n",
            "Host a\n\tHostname 0.0.0.0\n\t IdentityFile /k\n\n# trailing\n\n",
        ],
    )
    def test_serialize_parse_is_identity(self, text: str) -> None:
        """Test that unmodified configs serialize to the input text."""
        assert serialize(parse(text)) == text

    def test_text_property_matches_serialize(self) -> None:
        """Test that ManagedConfig.text equals serialize()."""
        config = parse(SAMPLE_CONFIG)
        assert config.text == serialize(config)


class TestParseStructure:
    """Tests for the node structure produced by parse."""

    def test_empty_text_has_no_nodes(self) -> None:
        """Test parsing an empty file."""
        assert parse("").nodes == []

    def test_prefix_is_verbatim(self) -> None:
        """Test that lines before the first Host become a Verbatim node."""
        config = parse(SAMPLE_CONFIG)
        first = config.nodes[0]
        assert isinstance(first, Verbatim)
        assert first.text == "# Global settings\nServerAliveInterval 60\n\n"

    def test_hosts_in_order(self) -> None:
        """Test that host blocks keep file order."""
        config = parse(SAMPLE_CONFIG)
        assert [h.name for h in config.hosts] == ["github.com", "work-*", "host"]
        assert [h.keyword for h in config.hosts] == ["Host", "Host", "Match"]

    def test_comment_above_host_heads_that_block(self) -> None:
        """Test that comments directly above a Host line belong to that Host."""
        config = parse(SAMPLE_CONFIG)
        github, work = config.hosts[0], config.hosts[1]
        assert github.lines[-1] == "\n"
        assert len(github.directives) == 3
        assert work.lines[:2] == ["# Work machines\n", "Host work-*  !work-legacy\n"]
        assert work.name == "work-*"

    def test_comment_before_blank_line_stays(self) -> None:
        """Test that a comment followed by a blank line stays with the block above."""
        config = parse("Host a\n  User x\n# end of a\n\nHost b\n")
        assert config.hosts[0].lines[-2:] == ["# end of a\n", "\n"]
        assert config.hosts[1].lines == ["Host b\n"]

    def test_comment_run_above_first_host_stays_in_prefix(self) -> None:
        """Test that comments before the first Host stay file-level."""
        config = parse("# header\nHost a\n")
        assert isinstance(config.nodes[0], Verbatim)
        assert config.hosts[0].lines == ["Host a\n"]

    def test_patterns_split(self) -> None:
        """Test that Host patterns are split on whitespace."""
        config = parse(SAMPLE_CONFIG)
        assert config.hosts[1].patterns == ["work-*", "!work-legacy"]

    def test_quoted_patterns(self) -> None:
        """Test that double quoted patterns keep their spaces."""
        config = parse('Host "my host" other\n')
        assert config.hosts[0].patterns == ["my host", "other"]

    def test_key_equals_value(self) -> None:
        """Test Key=value directive syntax."""
        config = parse(SAMPLE_CONFIG)
        assert config.hosts[1].get("Port") == "2200"
        assert config.hosts[1].port == 2200

    def test_host_keyword_case_insensitive(self) -> None:
        """Test that lowercase host starts a block."""
        config = parse("host a\n  port 22\nHOST b\n")
        assert [h.name for h in config.hosts] == ["a", "b"]


class TestHostEntry:
    """Tests for HostEntry accessors."""

    def test_get_is_case_insensitive(self) -> None:
        """Test directive lookup ignores case."""
        entry = parse("Host a\n    HostName example.com\n").hosts[0]
        assert entry.get("hostname") == "example.com"
        assert entry.get("HOSTNAME") == "example.com"

    def test_get_missing(self) -> None:
        """Test lookup of an unset directive."""
        entry = parse("Host a\n").hosts[0]
        assert entry.get("Port") is None
        assert entry.port is None

    def test_get_returns_first(self) -> None:
        """Test that the first value wins."""
        entry = parse("Host a\n  Port 1\n  Port 2\n").hosts[0]
        assert entry.get("Port") == "1"

    def test_get_all(self) -> None:
        """Test collecting repeated IdentityFile values."""
        entry = parse("Host a\n  IdentityFile /k1\n  IdentityFile /k2\n").hosts[0]
        assert entry.get_all("identityfile") == ["/k1", "/k2"]

    def test_non_numeric_port(self) -> None:
        """Test that a non-numeric Port yields None."""
        entry = parse("Host a\n  Port ssh\n").hosts[0]
        assert entry.port is None

    def test_match_block_never_matches(self) -> None:
        """Test that Match blocks do not match host names."""
        entry = parse("Match all\n  User x\n").hosts[0]
        assert entry.is_host is False
        assert entry.matches("all") is False

    def test_with_port(self) -> None:
        """Test rewriting the Port line in place."""
        entry = parse("Host a\n\tPort = 2222  \r\n    User x\n").hosts[0]
        moved = entry.with_port(2300)
        assert moved.text == "Host a\n\tPort = 2300  \r\n    User x\n"
        assert moved.port == 2300
        assert entry.port == 2222

    def test_with_port_first_line_only(self) -> None:
        """Test that only the first Port line changes."""
        entry = parse("Host a\n  Port 1\n  Port 2\n").hosts[0]
        assert entry.with_port(9).text == "Host a\n  Port 9\n  Port 2\n"

    def test_with_port_without_port_line(self) -> None:
        """Test rewriting a block that sets no Port."""
        entry = parse("Host a\n  User x\n").hosts[0]
        with pytest.raises(ValueError):
            entry.with_port(2222)

    def test_text(self) -> None:
        """Test raw block text."""
        entry = HostEntry(keyword="Host", patterns=["a"], lines=["Host a\n", "  Port 1\n"])
        assert entry.text == "Host a\n  Port 1\n"


class TestMatchHost:
    """Tests for ssh host pattern matching."""

    def test_exact(self) -> None:
        """Test exact match."""
        assert match_host(["ws-abc"], "ws-abc") is True
        assert match_host(["ws-abc"], "ws-abcd") is False

    def test_star(self) -> None:
        """Test * wildcard."""
        assert match_host(["*.example.com"], "a.example.com") is True
        assert match_host(["*.example.com"], "example.com") is False

    def test_question_mark(self) -> None:
        """Test ? wildcard."""
        assert match_host(["ws-?"], "ws-1") is True
        assert match_host(["ws-?"], "ws-12") is False

    def test_negation_wins(self) -> None:
        """Test that a matching negated pattern rejects the host."""
        patterns = ["work-*", "!work-legacy"]
        assert match_host(patterns, "work-new") is True
        assert match_host(patterns, "work-legacy") is False

    def test_only_negation_never_matches(self) -> None:
        """Test that negated patterns alone select nothing."""
        assert match_host(["!a"], "b") is False

    def test_regex_characters_are_literal(self) -> None:
        """Test that regex metacharacters are not special."""
        assert match_host(["a.b"], "a.b") is True
        assert match_host(["a.b"], "axb") is False
        assert match_host(["[ab]"], "a") is False

    def test_case_sensitive(self) -> None:
        """Test that patterns are matched with their case."""
        assert match_host(["WS-ABC"], "ws-abc") is False
        assert match_host(["ws-*"], "WS-ABC") is False


class TestManagedConfig:
    """Tests for ManagedConfig lookups."""

    def test_find(self) -> None:
        """Test finding the first matching host."""
        config = parse("Host a\n  Port 1\nHost *\n  Port 2\n")
        assert config.find("a") is config.hosts[0]
        assert config.find("zzz") is config.hosts[1]

    def test_find_none(self) -> None:
        """Test find with no match."""
        assert parse("Host a\n").find("b") is None

    def test_get_port_first_obtained_value(self) -> None:
        """Test that the first matching block setting Port wins."""
        config = parse("Host a\n  User x\nHost a b\n  Port 2300\nHost *\n  Port 22\n")
        assert config.get_port("a") == 2300
        assert config.get_port("c") == 22

    def test_get_port_missing(self) -> None:
        """Test get_port when nothing sets a port."""
        assert parse("Host a\n  User x\n").get_port("a") is None

    def test_append(self) -> None:
        """Test appending nodes."""
        config = ManagedConfig()
        config.append(Verbatim(["# hi\n"]))
        assert config.text == "# hi\n"


class TestDecodeErrors:
    """Tests for malformed input."""

    def test_keyword_without_value(self) -> None:
        """Test a directive missing its value."""
        with pytest.raises(DecodeError, match="missing value") as exc_info:
            parse("Host a\n    Port\n")
        assert exc_info.value.line_number == 2
        assert exc_info.value.line == "    Port"

    def test_host_without_pattern(self) -> None:
        """Test a Host line without patterns."""
        with pytest.raises(DecodeError, match="missing value") as exc_info:
            parse("Host a\nHost\n")
        assert exc_info.value.line_number == 2

    def test_empty_equals_value(self) -> None:
        """Test Key= with nothing after it."""
        with pytest.raises(DecodeError):
            parse("Host a\n  Port=\n")

    def test_invalid_keyword(self) -> None:
        """Test a keyword with invalid characters."""
        with pytest.raises(DecodeError, match="invalid keyword"):
            parse("Host a\n  Po-rt 22\n")

    def test_unterminated_quote(self) -> None:
        """Test an unbalanced double quote."""
        with pytest.raises(DecodeError, match="unterminated quote"):
            parse('Host "a\n')


class TestSplitArgs:
    """Tests for split_args function."""

    def test_plain(self) -> None:
        """Test whitespace splitting."""
        assert split_args("a  b\tc") == ["a", "b", "c"]

    def test_quoted(self) -> None:
        """Test quoted arguments."""
        assert split_args('"/path with space/key"') == ["/path with space/key"]
