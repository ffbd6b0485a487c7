"""
tordownloader CLI argument parser.

This module implements the command-line interface for tordownloader using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tordownloader.torbrowser.dictionary import Branch

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("tordownloader")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

BRANCH_CHOICES = [branch.value for branch in Branch]


class CLI:
    """tordownloader command-line interface."""

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
            prog="tordownloader",
            description="tordownloader - Fetch Tor from Tor Browser releases",
            epilog='Use "tordownloader COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"tordownloader {__version__}"
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
            help="Path to configuration file (default: ./tordownloader.yaml)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_retrieve_command(subparsers)
        self._add_latest_command(subparsers)
        self._add_info_command(subparsers)

        return parser

    @staticmethod
    def _add_release_options(parser: argparse.ArgumentParser):
        """Options shared by commands that resolve a release."""
        parser.add_argument(
            "--branch",
            choices=BRANCH_CHOICES,
            metavar="BRANCH",
            help="Release branch (alpha|stable) [default: from config, else stable]",
        )
        parser.add_argument(
            "--release",
            metavar="VERSION",
            help="Explicit release version (e.g., 10.0.16, 10.5a12)",
        )
        parser.add_argument(
            "--platform",
            metavar="PLATFORM",
            help="Native platform override (darwin|linux|win32)",
        )
        parser.add_argument(
            "--arch",
            metavar="ARCH",
            help="Native architecture override (x64|ia32)",
        )
        parser.add_argument(
            "--repository",
            metavar="URL",
            help="Tor Browser repository or mirror URL",
        )

    def _add_retrieve_command(self, subparsers):
        """Add 'retrieve' subcommand."""
        parser = subparsers.add_parser(
            "retrieve",
            help="Download and extract Tor",
            description="Download a Tor Browser release and extract Tor into a directory",
        )
        parser.add_argument(
            "target",
            type=Path,
            metavar="TARGET",
            help="Directory receiving the tor binary and its data files",
        )
        self._add_release_options(parser)
        parser.add_argument(
            "--no-execution-rights",
            action="store_true",
            help="Do not mark the tor binary as executable",
        )

    def _add_latest_command(self, subparsers):
        """Add 'latest' subcommand."""
        parser = subparsers.add_parser(
            "latest",
            help="Show the latest version of a branch",
            description="Show the latest Tor Browser version of a branch",
        )
        parser.add_argument(
            "--branch",
            choices=BRANCH_CHOICES,
            metavar="BRANCH",
            help="Release branch (alpha|stable)",
        )
        parser.add_argument(
            "--repository",
            metavar="URL",
            help="Tor Browser repository or mirror URL",
        )

    def _add_info_command(self, subparsers):
        """Add 'info' subcommand."""
        parser = subparsers.add_parser(
            "info",
            help="Show release file names and URLs",
            description="Show the bundle and mar tools URLs of a release",
        )
        self._add_release_options(parser)

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

        # Configure logging
        self._configure_logging(parsed_args)

        # Check if command specified
        if not parsed_args.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
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
            "retrieve": "tordownloader.cli.commands.retrieve",
            "latest": "tordownloader.cli.commands.latest",
            "info": "tordownloader.cli.commands.info",
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
