"""Symbols command implementation."""

import argparse

from ...locator import find_pdb_file
from ...pdb import PdbReaderFactory
from ...scanner import BinaryScanner
from ...store import SymbolStore
from ..formatters.symbols import SymbolsFormatter
from .base import BaseCommand


class SymbolsCommand(BaseCommand):
    """Command listing the test method and trait symbols of one binary."""

    def __init__(self, reader_factory=None):
        super().__init__()
        self.reader_factory = reader_factory

    def get_name(self) -> str:
        return "symbols"

    def get_help(self) -> str:
        return "List test method and trait symbols found in a binary's PDB"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("path", help="Path to the binary")
        parser.add_argument("--pdb", help="PDB file to use instead of locating one")
        self.add_search_arguments(parser)
        parser.add_argument(
            "--kind",
            choices=["all", "tests", "traits"],
            default="all",
            help="Which symbols to list",
        )
        parser.add_argument(
            "--search", type=str, help="Only symbols containing this string"
        )
        parser.add_argument(
            "--limit", type=int, help="Limit number of symbols per category"
        )

    def execute(self, args: argparse.Namespace, formatter: SymbolsFormatter) -> int:
        try:
            path = self.validate_file_path(args.path)
            if args.pdb:
                self.validate_file_path(args.pdb)
        except (FileNotFoundError, ValueError) as e:
            formatter.output_error(f"Error: {e}")
            return 2

        config = self.build_config(args)
        logger = self.create_logger(config)
        pdb = args.pdb or find_pdb_file(str(path), config.path_extension, logger)
        if pdb is None:
            formatter.output_error(f"No .pdb file found for '{path}'")
            return 3

        store = SymbolStore()
        scanner = BinaryScanner(
            store,
            self.reader_factory or PdbReaderFactory(),
            logger,
            path_extension=config.path_extension,
        )
        scanner.scan(str(path), pdb)

        data = {}
        if args.kind in ("all", "tests"):
            data["tests"] = list(store.test_method_symbols)
        if args.kind in ("all", "traits"):
            data["traits"] = list(store.trait_symbols)

        if args.search:
            needle = args.search.lower()
            for key in data:
                data[key] = [s for s in data[key] if needle in s.symbol.lower()]

        if args.limit:
            for key in data:
                data[key] = data[key][: args.limit]

        formatter.format_output(data)
        return 0
