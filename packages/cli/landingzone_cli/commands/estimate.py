from __future__ import annotations

import json
from typing import Annotated

import typer
from landingzone.cost import CostEngine
from landingzone.spec import EstimateReport
from rich.console import Console
from rich.table import Table

from landingzone_cli.utils import (
    build_catalog,
    ctx_obj,
    handle_error,
    parse_additional_costs,
    resolve_tier,
    with_mandatory,
)

console = Console()

FeatureOpt = Annotated[
    list[str] | None,
    typer.Option("--feature", "-f", help="Feature ID to add (repeatable). Mandatory features are always included."),
]
ComputeOpt = Annotated[float | None, typer.Option("--compute-units", help="Managed compute units (default: tier default)")]
StorageOpt = Annotated[float | None, typer.Option("--storage-tb", help="Managed storage in TB (default: tier default)")]
AdditionalOpt = Annotated[
    list[str] | None,
    typer.Option("--additional", "-a", help='One-time extra cost as "description=amount" (repeatable)'),
]
LiveOpt = Annotated[bool, typer.Option("--live-pricing", help="Overlay live AWS prices before estimating")]


def build_estimate(
    tier_id: str,
    features: list[str] | None = None,
    compute_units: float | None = None,
    storage_tb: float | None = None,
    additional: list[str] | None = None,
    live_pricing: bool = False,
) -> EstimateReport:
    """Resolve CLI options into a full EstimateReport."""
    catalog = build_catalog(live_pricing)
    tier = resolve_tier(catalog, tier_id)
    return CostEngine(catalog).build_report(
        tier,
        with_mandatory(tier, features),
        tier.default_compute_units if compute_units is None else compute_units,
        tier.default_storage_tb if storage_tb is None else storage_tb,
        parse_additional_costs(additional),
    )


def estimate(
    ctx: typer.Context,
    tier_id: Annotated[str, typer.Argument(metavar="TIER", help="Tier: very-small, small, medium, large")],
    feature: FeatureOpt = None,
    compute_units: ComputeOpt = None,
    storage_tb: StorageOpt = None,
    additional: AdditionalOpt = None,
    live_pricing: LiveOpt = False,
) -> None:
    """Estimate monthly and first-year cost for a landing-zone configuration."""
    try:
        with console.status("Calculating estimate..."):
            report = build_estimate(tier_id, feature, compute_units, storage_tb, additional, live_pricing)
    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
        return

    if ctx_obj(ctx).get("json"):
        print(json.dumps({"estimate": report.breakdown.model_dump(), "features": [f.id for f in report.features]}))
        return

    _print_breakdown(report)


def _print_breakdown(report: EstimateReport) -> None:
    b = report.breakdown
    table = Table(title=f"Cost Estimate — {report.tier.name}", show_footer=True)
    table.add_column("Item", style="cyan", footer="Total first year")
    table.add_column("Monthly", justify="right", footer=f"${b.total_monthly_cost:,.2f}")
    table.add_column("One-time", justify="right", footer=f"${b.total_first_year_cost:,.2f}")

    table.add_row("Base infrastructure", f"${b.base_infrastructure_cost:,.2f}", "")
    table.add_row("Base professional services", "", f"${b.base_professional_services_cost:,.2f}")
    for f in report.features:
        pricing = report.feature_pricing[f.id]
        label = f.name if pricing.source == "static" else f"{f.name} [dim](live)[/dim]"
        table.add_row(
            label,
            f"${pricing.infra_cost_impact:,.2f}",
            f"${pricing.professional_services_cost_impact:,.2f}",
        )
    for extra in report.additional_costs:
        table.add_row(f"Additional: {extra.description}", "", f"${extra.amount:,.2f}")
    table.add_row(
        f"Migration ({b.migration_unit_count:g} units)",
        "",
        f"${b.migration_cost:,.2f}",
    )
    table.add_row(f"Managed compute ({report.compute_units:g} units)", f"${b.managed_services_compute_cost:,.2f}", "")
    table.add_row(f"Managed storage ({report.storage_tb:g} TB)", f"${b.managed_services_storage_cost:,.2f}", "")

    console.print(table)
    console.print(
        f"Infrastructure ${b.total_infrastructure_cost:,.2f}/mo, "
        f"managed services ${b.total_managed_services_cost:,.2f}/mo, "
        f"professional services ${b.total_professional_services_cost:,.2f} one-time"
    )
    version = report.pricing_version
    if version:
        console.print(f"[dim]Pricing v{version.get('version', '?')} (updated {version.get('last_updated', '?')})[/dim]")
