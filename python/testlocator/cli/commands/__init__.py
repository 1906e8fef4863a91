"""CLI commands package."""

from .base import BaseCommand
from .imports import ImportsCommand
from .locate import LocateCommand
from .symbols import SymbolsCommand

__all__ = [
    "BaseCommand",
    "ImportsCommand",
    "LocateCommand",
    "SymbolsCommand",
]
