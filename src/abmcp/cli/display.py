"""Rich rendering for CLI output.

Accepts an optional :class:`~rich.console.Console` for dependency
injection in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from collections.abc import Sequence

    from abmcp.chain.tokens import TokenInfo
    from abmcp.tools.base import ToolDefinition


class ToolDisplay:
    """Tables for the ``tools`` command."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def tools(self, definitions: Sequence[ToolDefinition]) -> None:
        """Print registered tools with their annotations."""
        table = Table(title="abmcp tools")
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Title")
        table.add_column("Kind")
        table.add_column("Description")
        for d in definitions:
            ann = d.annotations
            if ann is None:
                title, kind = "", ""
            elif ann.read_only:
                title, kind = ann.title, "[green]read-only[/green]"
            elif ann.destructive:
                title, kind = ann.title, "[red]destructive[/red]"
            else:
                title, kind = ann.title, "local"
            table.add_row(d.name, title, kind, d.description)
        self._console.print(table)

    def tokens(self, tokens: Sequence[TokenInfo]) -> None:
        """Print the token registry."""
        table = Table(title="Known tokens")
        table.add_column("Symbol", style="cyan")
        table.add_column("Address")
        table.add_column("Decimals", justify="right")
        for t in tokens:
            table.add_row(t.symbol, t.address, str(t.decimals))
        self._console.print(table)
