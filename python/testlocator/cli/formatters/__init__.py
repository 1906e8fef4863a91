"""Output formatters for CLI commands."""

from .base import BaseFormatter, OutputFormat
from .imports import ImportsFormatter
from .locate import LocateFormatter
from .symbols import SymbolsFormatter

__all__ = [
    "BaseFormatter",
    "OutputFormat",
    "ImportsFormatter",
    "LocateFormatter",
    "SymbolsFormatter",
]
