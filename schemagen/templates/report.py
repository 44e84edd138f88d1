"""
Rich console report of a generation run.
"""

from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .process import errors
from .run import TemplateRun


def print_report(run: TemplateRun, console: Optional[Console] = None) -> int:
    """
    Print the files generated by a run and any per-file errors.

    Args:
        run: Completed run (after write)
        console: Console to print to

    Returns:
        Number of errors reported
    """
    console = console or Console()
    out = Path(run.ctx.out)

    table = Table(title=f"Generated files ({run.ctx.template_type})", box=box.ROUNDED)
    table.add_column("File", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Status")

    for name in sorted(run.files):
        file = run.files[name]
        status = (
            f"[red]✗ {len(file.errors)} error(s)[/red]"
            if file.errors
            else "[green]✓[/green]"
        )
        table.add_row(str(out / name), f"{len(file.buf)} B", status)

    console.print(table)

    errs = errors(run)
    if errs:
        console.print(
            Panel(
                "\n".join(f"• {e}" for e in errs),
                title="[red]Errors[/red]",
                border_style="red",
            )
        )
    return len(errs)
