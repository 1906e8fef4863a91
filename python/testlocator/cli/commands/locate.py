"""Locate command implementation."""

import argparse

from ...config import create_resolver
from ..formatters.locate import LocateFormatter
from .base import BaseCommand


class LocateCommand(BaseCommand):
    """Command resolving the source location and traits of a test."""

    def __init__(self, reader_factory=None):
        super().__init__()
        self.reader_factory = reader_factory

    def get_name(self) -> str:
        return "locate"

    def get_help(self) -> str:
        return "Find the source location and traits of a test method"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("path", help="Path to the test executable")
        parser.add_argument(
            "signatures",
            nargs="+",
            help="Candidate method signatures, e.g. MyFixture_MyTest_Test::TestBody",
        )
        self.add_search_arguments(parser)
        parser.add_argument(
            "--additional-pdb",
            dest="additional_pdbs",
            action="append",
            metavar="PATTERN",
            help="PDB file pattern searched when the executable's PDB has no match "
            "(repeatable, supports $(ExecutableDir))",
        )
        parser.add_argument(
            "--no-symbols",
            action="store_true",
            help="Do not parse symbol information",
        )

    def execute(self, args: argparse.Namespace, formatter: LocateFormatter) -> int:
        try:
            path = self.validate_file_path(args.path)
        except (FileNotFoundError, ValueError) as e:
            formatter.output_error(f"Error: {e}")
            return 2

        config = self.build_config(args)
        resolver = create_resolver(
            str(path),
            config,
            reader_factory=self.reader_factory,
            logger=self.create_logger(config),
        )
        location = resolver.find_test_case_location(args.signatures)
        formatter.format_output({"signatures": args.signatures, "location": location})
        return 0 if location is not None else 1
