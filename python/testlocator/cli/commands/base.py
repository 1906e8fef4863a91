"""Base command class for all CLI commands."""

import argparse
from abc import ABC, abstractmethod
from dataclasses import replace
from pathlib import Path

from ...config import ResolverConfig, get_config
from ...logging import DiagnosticLogger
from ..formatters.base import OutputFormat, BaseFormatter


class BaseCommand(ABC):
    """Abstract base class for CLI commands."""

    def __init__(self):
        """Initialize the command."""
        self.name = self.get_name()
        self.help = self.get_help()

    @abstractmethod
    def get_name(self) -> str:
        """Return the command name."""
        pass

    @abstractmethod
    def get_help(self) -> str:
        """Return the command help text."""
        pass

    @abstractmethod
    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Add command-specific arguments to the parser."""
        pass

    @abstractmethod
    def execute(self, args: argparse.Namespace, formatter: BaseFormatter) -> int:
        """Execute the command with the given arguments and formatter."""
        pass

    def setup_parser(self, subparsers) -> argparse.ArgumentParser:
        """Set up the command parser."""
        parser = subparsers.add_parser(self.name, help=self.help)
        self.add_common_arguments(parser)
        self.add_arguments(parser)
        return parser

    def add_common_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Add common arguments shared by all commands."""
        parser.add_argument(
            "--format",
            choices=["plain", "rich", "json", "jsonl"],
            default="plain",
            help="Output format (default: plain)",
        )
        # Back-compat alias for JSON
        parser.add_argument(
            "--json", action="store_true", help="Alias for --format json"
        )
        parser.add_argument(
            "--no-color",
            action="store_true",
            help="Disable colored output (forces plain format)",
        )
        parser.add_argument(
            "--quiet", "-q", action="store_true", help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--debug",
            action="store_true",
            help="Emit diagnostics of the symbol search",
        )

    def add_search_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Arguments controlling where debug information is looked up."""
        parser.add_argument(
            "--path-extension",
            help="Extra directories searched for PDB files (os.pathsep separated)",
        )

    def validate_file_path(self, path: str) -> Path:
        """Validate that a file path exists and is readable."""
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if not p.is_file():
            raise ValueError(f"Not a file: {path}")
        return p

    def build_config(self, args: argparse.Namespace) -> ResolverConfig:
        """Global configuration overridden by command line arguments."""
        config = replace(get_config())
        if getattr(args, "path_extension", None) is not None:
            config.path_extension = args.path_extension
        if getattr(args, "additional_pdbs", None):
            config.additional_pdbs = list(args.additional_pdbs)
        if getattr(args, "no_symbols", False):
            config.parse_symbol_information = False
        if args.debug:
            config.debug_mode = True
        return config

    def create_logger(self, config: ResolverConfig) -> DiagnosticLogger:
        return DiagnosticLogger(f"testlocator.cli.{self.name}", debug_mode=config.debug_mode)

    def get_output_format(self, args: argparse.Namespace) -> OutputFormat:
        """Determine the output format from arguments."""
        if getattr(args, "json", False):
            return OutputFormat.JSON
        if args.no_color:
            return OutputFormat.PLAIN
        try:
            return OutputFormat.from_string(args.format)
        except (ValueError, AttributeError):
            return OutputFormat.RICH
