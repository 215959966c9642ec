from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from landingzone.exporter import FORMATS, export_report
from rich.console import Console

from landingzone_cli.commands.estimate import (
    AdditionalOpt,
    ComputeOpt,
    LiveOpt,
    StorageOpt,
    build_estimate,
)
from landingzone_cli.utils import handle_error

console = Console()


def export(
    ctx: typer.Context,
    tier_id: Annotated[str, typer.Argument(metavar="TIER", help="Tier: very-small, small, medium, large")],
    fmt: Annotated[str, typer.Option("--format", "-f", help=f"Export format: {', '.join(FORMATS)}")] = "markdown",
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
    feature: Annotated[
        list[str] | None, typer.Option("--feature", help="Feature ID to add (repeatable)")
    ] = None,
    compute_units: ComputeOpt = None,
    storage_tb: StorageOpt = None,
    additional: AdditionalOpt = None,
    live_pricing: LiveOpt = False,
) -> None:
    """Export a cost estimate as CSV, Markdown or JSON."""
    if fmt.lower() not in FORMATS and fmt.lower() != "md":
        console.print(f"[red]Error:[/red] Unknown format '{fmt}'. Choose from: {', '.join(FORMATS)}")
        raise typer.Exit(1)

    try:
        report = build_estimate(tier_id, feature, compute_units, storage_tb, additional, live_pricing)
        content = export_report(report, fmt, output=output)
    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
        return

    if output:
        console.print(f"[green]Exported {fmt} to {output}[/green]")
    else:
        print(content)
