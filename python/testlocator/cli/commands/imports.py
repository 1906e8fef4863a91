"""Imports command implementation."""

import argparse
import os

from ...errors import PeFormatError
from ...pe import PeImage
from ..formatters.imports import ImportsFormatter
from .base import BaseCommand


class ImportsCommand(BaseCommand):
    """Command listing the modules a PE image imports."""

    def get_name(self) -> str:
        return "imports"

    def get_help(self) -> str:
        return "List imported modules and the PDB path recorded in a PE image"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("path", help="Path to the PE image")

    def execute(self, args: argparse.Namespace, formatter: ImportsFormatter) -> int:
        try:
            path = self.validate_file_path(args.path)
        except (FileNotFoundError, ValueError) as e:
            formatter.output_error(f"Error: {e}")
            return 2

        try:
            with open(path, "rb") as fh:
                image = PeImage(fh)
                imports = image.imports()
                pdb = image.pdb_path()
        except (PeFormatError, EOFError) as e:
            formatter.output_error(f"Error parsing PE image: {e}")
            return 3

        directory = os.path.dirname(os.path.abspath(path))
        data = {
            "path": str(path),
            "pdb": pdb,
            "imports": [
                {"name": name, "exists": os.path.isfile(os.path.join(directory, name))}
                for name in imports
            ],
        }
        formatter.format_output(data)
        return 0
