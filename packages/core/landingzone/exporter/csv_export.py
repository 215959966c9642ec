"""CSV exporter: one row per cost line item."""

from __future__ import annotations

import csv
import io
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from landingzone.spec import EstimateReport

HEADER = ("section", "item", "amount", "frequency")


def _rows(report: EstimateReport) -> list[tuple[str, str, float, str]]:
    b = report.breakdown
    rows: list[tuple[str, str, float, str]] = [
        ("infrastructure", "Base infrastructure", b.base_infrastructure_cost, "monthly"),
    ]
    for feature in report.features:
        pricing = report.feature_pricing.get(feature.id)
        amount = pricing.infra_cost_impact if pricing else feature.infra_cost_impact
        rows.append(("infrastructure", f"Feature: {feature.name}", amount, "monthly"))
    rows.append(("infrastructure", "Total infrastructure", b.total_infrastructure_cost, "monthly"))

    rows.append(("professional_services", "Base professional services", b.base_professional_services_cost, "one-time"))
    rows.append(
        ("professional_services", "Features professional services", b.features_professional_services_cost, "one-time")
    )
    for extra in report.additional_costs:
        rows.append(("professional_services", f"Additional: {extra.description}", extra.amount, "one-time"))
    rows.append(
        ("professional_services", "Total professional services", b.total_professional_services_cost, "one-time")
    )

    rows.append(
        (
            "migration",
            f"Migration ({b.migration_unit_count:g} units x ${b.migration_cost_per_unit:,.2f})",
            b.migration_cost,
            "one-time",
        )
    )

    rows.append(
        ("managed_services", f"Compute ({report.compute_units:g} units)", b.managed_services_compute_cost, "monthly")
    )
    rows.append(
        ("managed_services", f"Storage ({report.storage_tb:g} TB)", b.managed_services_storage_cost, "monthly")
    )
    rows.append(("managed_services", "Total managed services", b.total_managed_services_cost, "monthly"))

    rows.append(("totals", "Total monthly", b.total_monthly_cost, "monthly"))
    rows.append(("totals", "Total first year", b.total_first_year_cost, "annual"))
    return rows


def render(report: EstimateReport) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(HEADER)
    for section, item, amount, frequency in _rows(report):
        writer.writerow((section, item, f"{amount:.2f}", frequency))
    return buf.getvalue()
