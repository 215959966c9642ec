"""Fetch live feature prices from the AWS Price List API and compare them to the static catalog."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from landingzone.catalog import Catalog, LivePricingCache
from rich.console import Console
from rich.table import Table

from landingzone_cli.utils import ctx_obj, handle_error

console = Console()


def refresh(
    ctx: typer.Context,
    region: Annotated[
        str | None,
        typer.Option("--region", "-r", help="Override the default region for pricing lookups"),
    ] = None,
) -> None:
    """Fetch live infrastructure prices for mapped features."""
    try:
        cache = LivePricingCache(region=region)
        with console.status(f"Fetching pricing for {cache.region}..."):
            result = cache.refresh(force=True)
        static = Catalog()
    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
        return

    if ctx_obj(ctx).get("json"):
        data = {
            "region": result.region,
            "updated": result.updated,
            "fetched": result.fetched,
            "errors": result.errors,
            "prices": result.prices,
        }
        print(json.dumps(data, indent=2))
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Feature")
    table.add_column("Static", justify="right")
    table.add_column("Live", justify="right")

    for mapping in cache.mappings:
        pricing = static.get_feature_pricing(mapping.feature_id)
        live = result.prices.get(mapping.feature_id)
        table.add_row(
            mapping.feature_id,
            f"${pricing.infra_cost_impact:,.2f}",
            f"${live:,.2f}" if live is not None else "[dim]-[/dim]",
        )

    console.print(table)

    if result.total_errors == 0 and result.updated:
        console.print(f"[green]Done.[/green] {result.fetched} feature price(s) fetched for {result.region}")
    else:
        console.print(
            f"[yellow]Done with errors.[/yellow] {result.fetched} fetched, {result.total_errors} error(s)"
        )
        for err in result.errors:
            console.print(f"  [red]aws:[/red] {err}")
