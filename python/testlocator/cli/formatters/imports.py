"""Formatter for imports command output."""

from rich.tree import Tree

from .base import BaseFormatter, OutputFormat


class ImportsFormatter(BaseFormatter):
    def format_output(self, data: dict) -> None:
        if self.format_type == OutputFormat.JSON:
            self.output_json(data)
        elif self.format_type == OutputFormat.JSONL:
            self.output_jsonl({"type": "pdb", "path": data.get("pdb")})
            for entry in data.get("imports", []):
                self.output_jsonl({"type": "import", **entry})
        elif self.format_type == OutputFormat.RICH:
            tree = Tree(f"[bold blue]{data['path']}[/bold blue]")
            tree.add(f"[magenta]pdb:[/magenta] {data.get('pdb') or '-'}")
            for entry in data.get("imports", []):
                marker = "[green]found[/green]" if entry["exists"] else "[dim]missing[/dim]"
                tree.add(f"[cyan]{entry['name']}[/cyan] {marker}")
            self.console.print(tree)
        else:
            lines = [f"path: {data['path']}", f"pdb: {data.get('pdb') or '-'}"]
            for entry in data.get("imports", []):
                suffix = "" if entry["exists"] else " (missing)"
                lines.append(f"  {entry['name']}{suffix}")
            self.output_plain("\n".join(lines))
