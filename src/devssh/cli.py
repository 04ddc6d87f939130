"""CLI for syncing the SSH config with remote workspaces.

This module provides command-line interface for:
- Reconciling ~/.ssh/config with the cached list of active workspaces
- Looking up the local port assigned to a workspace
- Showing the public key to authorize on workspaces
"""

import argparse
import logging
import sys
from pathlib import Path

from devssh.core.config import Config
from devssh.core.errors import DevsshError
from devssh.core.paths import get_workspace_cache_path
from devssh.core.types import ReconcileSettings
from devssh.reconciler import ReconcileResult, SSHConfigReconciler, get_configured_port
from devssh.ssh.keys import SSHKeyInstaller
from devssh.workspace.credentials import FileCredentialStore
from devssh.workspace.directory import CachedWorkspaceDirectory


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for CLI use.

    Args:
        verbose: Enable debug output.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )


def load_settings(args: argparse.Namespace) -> ReconcileSettings:
    """Build reconcile settings from config file, environment and flags.

    Flags override environment variables, which override the config file.

    Args:
        args: Parsed arguments.

    Returns:
        ReconcileSettings.
    """
    config = Config.from_file(Path(args.config).expanduser()) if args.config else Config.default()
    config.apply_env_overrides()

    if args.ssh_config:
        config.set("ssh.config_path", args.ssh_config)
    if getattr(args, "base_port", None) is not None:
        config.set("ssh.base_port", args.base_port)

    return config.to_reconcile_settings()


def print_result(result: ReconcileResult) -> None:
    """Print a summary of a reconciliation cycle.

    Args:
        result: Completed cycle.
    """
    print(f"SSH config: {result.config_path}")
    if result.backup_path:
        print(f"Backup: {result.backup_path}")

    if not (result.added or result.pruned or result.duplicates or result.reassigned):
        print(f"Up to date ({len(result.active)} active workspace(s)).")

    for host in result.added:
        print(f"  + {host.name} (port {host.port})")
    for name in result.pruned:
        print(f"  - {name}")
    for name in result.duplicates:
        print(f"  - {name} (duplicate)")
    for host in result.reassigned:
        print(f"  ~ {host.name} (moved to port {host.port})")

    if not result.ok:
        print(f"Skipped {len(result.render_errors)} workspace(s):", file=sys.stderr)
        for error in result.render_errors:
            print(f"  ! {error}", file=sys.stderr)


def cmd_sync(args: argparse.Namespace) -> int:
    """Sync command handler.

    Args:
        args: Parsed arguments.

    Returns:
        Exit code.
    """
    try:
        settings = load_settings(args)
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    cache_path = Path(args.workspaces).expanduser() if args.workspaces else get_workspace_cache_path()

    reconciler = SSHConfigReconciler(
        workspace_directory=CachedWorkspaceDirectory(cache_path),
        credential_store=FileCredentialStore(Path(args.key).expanduser()),
        settings=settings,
    )

    try:
        result = reconciler.reconcile()
    except DevsshError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_result(result)
    return 0


def cmd_port(args: argparse.Namespace) -> int:
    """Port command handler.

    Args:
        args: Parsed arguments.

    Returns:
        Exit code.
    """
    try:
        settings = load_settings(args)
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        port = get_configured_port(settings.ssh_config_path, args.host)
    except DevsshError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if port is None:
        print(f"No port configured for {args.host}", file=sys.stderr)
        return 1

    print(port)
    return 0


def cmd_key(args: argparse.Namespace) -> int:
    """Key command handler.

    Args:
        args: Parsed arguments.

    Returns:
        Exit code.
    """
    try:
        settings = load_settings(args)
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        print(SSHKeyInstaller(settings.private_key_path).public_key())
    except DevsshError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="devssh",
        description="Keep the SSH config in sync with remote workspaces",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug output",
    )
    parser.add_argument(
        "--config",
        help="devssh settings file (default: ~/.devssh/config.json)",
    )
    parser.add_argument(
        "--ssh-config",
        help="SSH config file to manage (default: ~/.ssh/config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # sync command
    sync_parser = subparsers.add_parser("sync", help="Reconcile SSH config with active workspaces")
    sync_parser.add_argument(
        "--key",
        "-k",
        required=True,
        help="Private key file to install as the managed key",
    )
    sync_parser.add_argument(
        "--workspaces",
        "-w",
        help="Workspace cache file (default: ~/.devssh/workspace_cache.json)",
    )
    sync_parser.add_argument(
        "--base-port",
        type=int,
        help="First local port to assign",
    )
    sync_parser.set_defaults(func=cmd_sync)

    # port command
    port_parser = subparsers.add_parser("port", help="Show the port configured for a workspace")
    port_parser.add_argument("host", help="Workspace DNS name")
    port_parser.set_defaults(func=cmd_port)

    # key command
    key_parser = subparsers.add_parser("key", help="Show the public key of the managed private key")
    key_parser.set_defaults(func=cmd_key)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Args:
        argv: Arguments. Uses sys.argv if None.

    Returns:
        Exit code.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        print()
        print("Quick start:")
        print("  devssh sync --key ~/.devssh/key.pem   # Sync ~/.ssh/config")
        print("  devssh port my-ws-org.example.dev     # Show a workspace's port")
        print("  devssh key                            # Show the public key to authorize")
        return 0

    setup_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
