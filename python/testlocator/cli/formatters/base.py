"""Base output formatter abstraction for consistent CLI output across formats."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional
import json
import sys

from rich.console import Console
from rich.table import Table


class OutputFormat(Enum):
    """Supported output formats."""

    PLAIN = "plain"
    RICH = "rich"
    JSON = "json"
    JSONL = "jsonl"

    @classmethod
    def from_string(cls, value: str) -> "OutputFormat":
        """Create from string value."""
        return cls(value.lower())


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    def __init__(self, format_type: OutputFormat = OutputFormat.PLAIN):
        """Initialize formatter with output type."""
        self.format_type = format_type
        self._console = None

    @property
    def console(self) -> Console:
        """Lazily created rich console."""
        if self._console is None:
            self._console = Console()
        return self._console

    @abstractmethod
    def format_output(self, data: Any) -> None:
        """Format and output data according to the format type."""
        pass

    def output_json(self, data: Any, stream=None) -> None:
        """Output data as JSON."""
        if stream is None:
            stream = sys.stdout
        # One-line JSON to be friendly with tests that read first line only
        json.dump(data, stream, separators=(",", ":"), default=str)
        stream.write("\n")
        stream.flush()

    def output_jsonl(self, data: Any, stream=None) -> None:
        """Output data as JSON Lines."""
        if stream is None:
            stream = sys.stdout
        if isinstance(data, (list, tuple)):
            for item in data:
                json.dump(item, stream, default=str)
                stream.write("\n")
        else:
            json.dump(data, stream, default=str)
            stream.write("\n")
        stream.flush()

    def output_plain(self, text: str, stream=None) -> None:
        """Output plain text."""
        if stream is None:
            stream = sys.stdout
        stream.write(text)
        if not text.endswith("\n"):
            stream.write("\n")
        stream.flush()

    def output_error(self, text: str) -> None:
        self.output_plain(text, stream=sys.stderr)

    def create_table(self, title: Optional[str] = None, **kwargs) -> Table:
        return Table(title=title, **kwargs)
