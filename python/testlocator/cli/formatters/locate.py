"""Formatter for locate command output."""

from typing import Optional

from rich.panel import Panel
from rich.text import Text

from ...models import TestCaseLocation
from .base import BaseFormatter, OutputFormat


class LocateFormatter(BaseFormatter):
    """Formatter for a resolved test case location (or its absence)."""

    def format_output(self, data: dict) -> None:
        location: Optional[TestCaseLocation] = data.get("location")
        payload = {
            "signatures": data.get("signatures", []),
            "found": location is not None,
            "location": location.model_dump() if location is not None else None,
        }

        if self.format_type == OutputFormat.JSON:
            self.output_json(payload)
        elif self.format_type == OutputFormat.JSONL:
            self.output_jsonl({"type": "location", "data": payload["location"]})
            if location is not None:
                for trait in location.traits:
                    self.output_jsonl({"type": "trait", "data": trait.model_dump()})
        elif self.format_type == OutputFormat.RICH:
            self._format_rich(payload["signatures"], location)
        else:
            self._format_plain(payload["signatures"], location)

    def _format_rich(self, signatures, location: Optional[TestCaseLocation]) -> None:
        if location is None:
            self.console.print(
                f"[yellow]No symbol found for[/yellow] {', '.join(signatures)}"
            )
            return

        summary = Text()
        summary.append("Symbol: ", style="bold")
        summary.append(f"{location.symbol}\n", style="cyan")
        summary.append("File:   ", style="bold")
        summary.append(f"{location.source_file or '-'}\n")
        summary.append("Line:   ", style="bold")
        summary.append(f"{location.line}", style="yellow")
        self.console.print(
            Panel(summary, title="[bold blue]Test Location[/bold blue]", border_style="blue")
        )

        if location.traits:
            table = self.create_table(
                title="[bold magenta]Traits[/bold magenta]", header_style="bold magenta"
            )
            table.add_column("Name", style="magenta")
            table.add_column("Value")
            for trait in location.traits:
                table.add_row(trait.name, trait.value)
            self.console.print(table)

    def _format_plain(self, signatures, location: Optional[TestCaseLocation]) -> None:
        if location is None:
            self.output_plain(f"not found: {', '.join(signatures)}")
            return
        lines = [
            f"symbol: {location.symbol}",
            f"file: {location.source_file}",
            f"line: {location.line}",
        ]
        for trait in location.traits:
            lines.append(f"trait: {trait.name}={trait.value}")
        self.output_plain("\n".join(lines))
