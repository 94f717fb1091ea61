"""
Rendering functions for vendorbranch output.

Core functions return data, this module makes it human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from typing import List

from .domain.operation import ImportRecord, ImportSummary, ImportState

console = Console()

STATE_STYLES = {
    ImportState.MERGE_SUCCEEDED: "green",
    ImportState.COMMITTED: "green",
    ImportState.NO_CHANGE: "dim",
    ImportState.MERGE_CONFLICT: "red",
}


def render_import_summary(summary: ImportSummary) -> None:
    """
    Render the cookbooks imported by one run as a table.

    Args:
        summary: ImportSummary from ImportOrchestrator.run
    """
    if not summary.results:
        console.print("[yellow]Nothing was imported.[/yellow]")
        return

    table = Table(
        title="Cookbook Imports",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Cookbook", style="cyan")
    table.add_column("Version")
    table.add_column("Result")
    table.add_column("Files", justify="right")
    table.add_column("Tag", style="dim")
    table.add_column("Required by", style="dim")

    for result in summary.results:
        style = STATE_STYLES.get(result.state, "")
        label = "imported" if result.changed else "no changes"
        table.add_row(
            result.cookbook,
            result.version,
            f"[{style}]{label}[/{style}]" if style else label,
            str(result.files_changed),
            result.tag or "",
            result.dependency_of or "",
        )

    console.print(table)


def render_history_table(records: List[ImportRecord]) -> None:
    """Render past imports as a table."""
    if not records:
        console.print("[yellow]No cookbook imports found.[/yellow]")
        return

    table = Table(
        title="Import History",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Cookbook", style="cyan")
    table.add_column("Version")
    table.add_column("Tag", style="dim")
    table.add_column("Vendor branch")

    for record in records:
        table.add_row(
            record.cookbook,
            record.version,
            record.tag,
            "yes" if record.branch_exists else "[red]missing[/red]",
        )

    console.print(table)
