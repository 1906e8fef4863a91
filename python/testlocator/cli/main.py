"""Main CLI entry point with modular command structure."""

import argparse
import sys
from typing import List, Optional

from ..logging import configure_logging
from .commands.imports import ImportsCommand
from .commands.locate import LocateCommand
from .commands.symbols import SymbolsCommand
from .formatters import ImportsFormatter, LocateFormatter, SymbolsFormatter


class TestLocatorCLI:
    """Main CLI application."""

    __test__ = False

    def __init__(self, reader_factory=None):
        """Initialize the CLI with available commands."""
        self.commands = {
            "locate": LocateCommand(reader_factory),
            "symbols": SymbolsCommand(reader_factory),
            "imports": ImportsCommand(),
        }

        # Map commands to their formatters
        self.formatter_map = {
            "locate": LocateFormatter,
            "symbols": SymbolsFormatter,
            "imports": ImportsFormatter,
        }

    def create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog="testlocator",
            description="Locate native tests and their traits from debug symbols",
        )
        parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")

        subparsers = parser.add_subparsers(
            dest="cmd", required=True, help="Available commands"
        )
        for cmd in self.commands.values():
            cmd.setup_parser(subparsers)

        return parser

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the CLI application."""
        parser = self.create_parser()
        args = parser.parse_args(argv)

        command = self.commands.get(args.cmd)
        if not command:
            print(f"Unknown command: {args.cmd}", file=sys.stderr)
            return 1

        if args.verbose:
            level = "DEBUG"
        elif args.debug:
            level = "INFO"
        elif args.quiet:
            level = "ERROR"
        else:
            level = "WARNING"
        configure_logging(level=level)

        formatter = self.formatter_map[args.cmd](command.get_output_format(args))

        try:
            return command.execute(args, formatter)
        except KeyboardInterrupt:
            print("\nInterrupted by user", file=sys.stderr)
            return 130
        except Exception as e:
            if args.verbose:
                import traceback

                traceback.print_exc()
            else:
                print(f"Error: {e}", file=sys.stderr)
            return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    cli = TestLocatorCLI()
    return cli.run(argv)


if __name__ == "__main__":
    sys.exit(main())
