"""
nodekit CLI argument parser.

This module implements the command-line interface for nodekit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from nodekit.core.exceptions import NodeKitError
from nodekit.core.locking import LockTimeout

# Get version from package
try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("nodekit")
except PackageNotFoundError:
    from nodekit import __version__

logger = logging.getLogger(__name__)


class CLI:
    """nodekit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="nodekit",
            description="nodekit - project-local Node.js and npm provisioning",
            epilog='Use "nodekit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"nodekit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./nodekit.yaml)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_status_command(subparsers)

        return parser

    def _add_request_arguments(self, parser):
        """Add the options that describe what to install."""
        parser.add_argument(
            "--node-version",
            metavar="VERSION",
            help="Node.js version to install (e.g., v0.10.26)",
        )
        parser.add_argument(
            "--npm-version",
            metavar="VERSION",
            help="npm version to install (e.g., 1.4.4)",
        )
        parser.add_argument(
            "--install-directory",
            type=Path,
            metavar="DIR",
            help="Directory that receives the node/ tree",
        )
        parser.add_argument(
            "--download-root",
            metavar="URL",
            help="Distribution server root (default: http://nodejs.org/dist/)",
        )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install Node.js and npm if missing",
            description="Download Node.js and npm unless the requested versions "
            "are already installed",
        )
        self._add_request_arguments(parser)
        parser.add_argument(
            "--force",
            action="store_true",
            help="Reinstall even if the requested versions are present",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail on a corrupt existing installation instead of replacing it",
        )
        parser.add_argument(
            "--lock-timeout",
            type=float,
            default=300,
            metavar="SECONDS",
            help="How long to wait for another install into the same directory "
            "(default: 300)",
        )

    def _add_status_command(self, subparsers):
        """Add 'status' subcommand."""
        parser = subparsers.add_parser(
            "status",
            help="Show installed Node.js and npm versions",
            description="Compare installed versions with the requested ones "
            "without downloading anything",
        )
        self._add_request_arguments(parser)

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except (NodeKitError, LockTimeout) as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "install": "nodekit.cli.commands.install",
            "status": "nodekit.cli.commands.status",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
