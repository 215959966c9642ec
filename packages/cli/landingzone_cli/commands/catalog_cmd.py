from __future__ import annotations

import json
from typing import Annotated

import typer
from landingzone.catalog import Catalog
from rich.console import Console
from rich.table import Table

from landingzone_cli.utils import ctx_obj, handle_error, resolve_tier

console = Console()


def tiers(ctx: typer.Context) -> None:
    """List landing-zone tiers with their base pricing."""
    catalog = Catalog()

    if ctx_obj(ctx).get("json"):
        print(json.dumps({"tiers": [t.model_dump() for t in catalog.tiers]}, default=str))
        return

    table = Table(title="Landing Zone Tiers")
    table.add_column("Tier", style="cyan")
    table.add_column("Name")
    table.add_column("Infra/mo", justify="right")
    table.add_column("Prof. services", justify="right")
    table.add_column("$/unit/mo", justify="right")
    table.add_column("$/TB/mo", justify="right")
    table.add_column("Defaults", style="dim")

    for t in catalog.tiers:
        table.add_row(
            t.size,
            t.name,
            f"${t.base_infra_cost_per_month:,.2f}",
            f"${t.base_professional_services_cost:,.2f}",
            f"${t.managed_services_cost_per_unit:,.2f}",
            f"${t.managed_services_cost_per_tb_storage:,.2f}",
            f"{t.default_compute_units} units, {t.default_storage_tb} TB",
        )

    console.print(table)


def features(
    ctx: typer.Context,
    tier_id: Annotated[str, typer.Argument(metavar="TIER", help="Tier: very-small, small, medium, large")],
) -> None:
    """List the features offered in a tier, grouped by category."""
    try:
        catalog = Catalog()
        tier = resolve_tier(catalog, tier_id)
        grouped = catalog.get_features_by_category(tier.size)
    except Exception as e:
        handle_error(ctx, e)
        return

    if ctx_obj(ctx).get("json"):
        data = {
            "tier": tier.size,
            "mandatory": tier.mandatory_features,
            "categories": {cat: [f.model_dump() for f in feats] for cat, feats in grouped.items()},
        }
        print(json.dumps(data, default=str))
        return

    names = {c.id: c.name for c in catalog.categories}
    table = Table(title=f"Features — {tier.name}")
    table.add_column("Category", style="cyan")
    table.add_column("Feature")
    table.add_column("ID", style="dim")
    table.add_column("Infra/mo", justify="right")
    table.add_column("One-time", justify="right")
    table.add_column("Required", justify="center")

    for category, feats in grouped.items():
        for i, f in enumerate(feats):
            pricing = catalog.get_feature_pricing(f.id)
            table.add_row(
                names.get(category, category) if i == 0 else "",
                f.name,
                f.id,
                f"${pricing.infra_cost_impact:,.2f}",
                f"${pricing.professional_services_cost_impact:,.2f}",
                "[green]yes[/green]" if f.id in tier.mandatory_features else "",
            )
        table.add_section()

    console.print(table)
