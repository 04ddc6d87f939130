"""Tests for devssh.ssh.classifier module."""

from pathlib import Path

from devssh.ssh.classifier import NodeKind, classify, is_owned, owned_entries
from devssh.ssh.config import Verbatim, parse

KEY_PATH = "/home/dev/.devssh/devssh.pem"

CONFIG = f"""\
# header
Host ws-abc
    Hostname 0.0.0.0
    IdentityFile {KEY_PATH}
    User devssh
    Port 2222

Host github.com
    IdentityFile ~/.ssh/id_ed25519

Host bastion
    User ops
"""


class TestIsOwned:
    """Tests for is_owned function."""

    def test_managed_key_is_owned(self) -> None:
        """Test that an entry using the managed key is owned."""
        entry = parse(CONFIG).hosts[0]
        assert is_owned(entry, KEY_PATH) is True

    def test_accepts_path_object(self) -> None:
        """Test that the key path may be a Path."""
        entry = parse(CONFIG).hosts[0]
        assert is_owned(entry, Path(KEY_PATH)) is True

    def test_other_key_is_foreign(self) -> None:
        """Test that a different IdentityFile is foreign."""
        entry = parse(CONFIG).hosts[1]
        assert is_owned(entry, KEY_PATH) is False

    def test_no_identity_file_is_foreign(self) -> None:
        """Test that an entry without IdentityFile is foreign."""
        entry = parse(CONFIG).hosts[2]
        assert is_owned(entry, KEY_PATH) is False

    def test_equivalent_spelling_is_foreign(self) -> None:
        """Test that ownership is plain string equality."""
        entry = parse("Host a\n  IdentityFile ~/.devssh/devssh.pem\n").hosts[0]
        assert is_owned(entry, KEY_PATH) is False

    def test_quoted_key_path(self) -> None:
        """Test that a quoted managed key path is owned."""
        key_path = "/Users/Jo Dev/.devssh/devssh.pem"
        entry = parse(f'Host a\n  IdentityFile "{key_path}"\n').hosts[0]
        assert is_owned(entry, key_path) is True

    def test_any_identity_file_counts(self) -> None:
        """Test that a second IdentityFile can carry ownership."""
        entry = parse(f"Host a\n  IdentityFile /other\n  IdentityFile {KEY_PATH}\n").hosts[0]
        assert is_owned(entry, KEY_PATH) is True

    def test_match_block_never_owned(self) -> None:
        """Test that Match blocks are never owned."""
        entry = parse(f"Match all\n  IdentityFile {KEY_PATH}\n").hosts[0]
        assert is_owned(entry, KEY_PATH) is False


class TestClassify:
    """Tests for classify function."""

    def test_node_kinds(self) -> None:
        """Test tagging every node of a config."""
        config = parse(CONFIG)
        kinds = [classify(node, KEY_PATH) for node in config.nodes]
        assert kinds == [
            NodeKind.VERBATIM,
            NodeKind.OWNED,
            NodeKind.FOREIGN,
            NodeKind.FOREIGN,
        ]

    def test_verbatim(self) -> None:
        """Test that Verbatim nodes classify as VERBATIM."""
        assert classify(Verbatim(["\n"]), KEY_PATH) == NodeKind.VERBATIM


class TestOwnedEntries:
    """Tests for owned_entries function."""

    def test_owned_entries(self) -> None:
        """Test selecting owned entries."""
        names = [h.name for h in owned_entries(parse(CONFIG), KEY_PATH)]
        assert names == ["ws-abc"]
