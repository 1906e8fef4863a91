"""Formatter for symbols command output."""

from typing import Dict, List

from rich.panel import Panel
from rich.text import Text

from ...models import SourceFileLocation
from .base import BaseFormatter, OutputFormat


class SymbolsFormatter(BaseFormatter):
    """Formatter for test method and trait symbols of a binary."""

    def format_output(self, data: Dict[str, List[SourceFileLocation]]) -> None:
        """Format and output symbols grouped by category."""
        dumped = {
            category: [s.model_dump() for s in symbols]
            for category, symbols in data.items()
        }
        if self.format_type == OutputFormat.JSON:
            self.output_json(dumped)
        elif self.format_type == OutputFormat.JSONL:
            for category, symbols in dumped.items():
                for symbol in symbols:
                    self.output_jsonl({"type": category, "symbol": symbol})
        elif self.format_type == OutputFormat.RICH:
            self._format_rich(data)
        else:
            self._format_plain(data)

    def _format_rich(self, data: Dict[str, List[SourceFileLocation]]) -> None:
        summary = Text()
        summary.append("Total Symbols: ", style="bold")
        summary.append(f"{sum(len(v) for v in data.values())}\n")
        for category, symbols in data.items():
            summary.append(f"  • {category.title()}: ", style="bold")
            summary.append(f"{len(symbols)}\n", style="yellow")
        self.console.print(
            Panel(
                summary,
                title="[bold blue]Symbol Overview[/bold blue]",
                border_style="blue",
            )
        )

        styles = {"tests": "cyan", "traits": "magenta"}
        for category, symbols in data.items():
            if not symbols:
                continue
            style = styles.get(category, "white")
            table = self.create_table(
                title=f"[bold {style}]{category.title()}[/bold {style}]",
                show_header=True,
                header_style=f"bold {style}",
            )
            table.add_column("Symbol", style=style, overflow="ellipsis", max_width=80)
            table.add_column("File", style="dim")
            table.add_column("Line", style="yellow", justify="right")
            for symbol in symbols:
                table.add_row(symbol.symbol, symbol.source_file, str(symbol.line))
            self.console.print(table)
            self.console.print()

    def _format_plain(self, data: Dict[str, List[SourceFileLocation]]) -> None:
        lines = []
        for category, symbols in data.items():
            lines.append(f"{category}: {len(symbols)}")
            for symbol in symbols:
                lines.append(f"  {symbol.symbol}\t{symbol.source_file}:{symbol.line}")
        self.output_plain("\n".join(lines))
