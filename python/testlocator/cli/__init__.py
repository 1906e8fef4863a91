"""Command-line interface for testlocator."""

from .main import TestLocatorCLI, main

__all__ = ["TestLocatorCLI", "main"]
