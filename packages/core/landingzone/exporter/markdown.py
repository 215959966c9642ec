"""Markdown exporter: printable configuration summary."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from landingzone.spec import EstimateReport


def _usd(amount: float) -> str:
    return f"${amount:,.2f}"


def render(report: EstimateReport) -> str:
    tier = report.tier
    b = report.breakdown
    lines = []
    lines.append("# AWS Landing Zone Configuration Summary")
    lines.append("")
    lines.append(f"**Generated:** {datetime.date.today().isoformat()}")
    lines.append("")

    lines.append("## Selected Configuration")
    lines.append("")
    lines.append(f"**{tier.name}**")
    lines.append("")
    if tier.description:
        lines.append(tier.description)
        lines.append("")
    lines.append(f"- **Account Structure:** {tier.account_structure}")
    lines.append(f"- **Organization Structure:** {tier.organizational_structure}")
    lines.append(f"- **Compute Units:** {report.compute_units:g}")
    lines.append(f"- **Storage:** {report.storage_tb:g} TB")
    lines.append("")

    lines.append(f"## Selected Features ({len(report.features)})")
    lines.append("")
    for feature in report.features:
        lines.append(f"- **{feature.name}**: {feature.description}")
    lines.append("")

    lines.append("## Cost Breakdown")
    lines.append("")
    lines.append("| Item | Amount |")
    lines.append("|---|---:|")
    lines.append(f"| Base Infrastructure (monthly) | {_usd(b.base_infrastructure_cost)} |")
    lines.append(f"| Features Add-on (monthly) | {_usd(b.features_infrastructure_cost)} |")
    lines.append(f"| **Total Infrastructure (monthly)** | **{_usd(b.total_infrastructure_cost)}** |")
    lines.append(f"| Base Professional Services | {_usd(b.base_professional_services_cost)} |")
    lines.append(f"| Features Professional Services | {_usd(b.features_professional_services_cost)} |")
    for extra in report.additional_costs:
        lines.append(f"| Additional: {extra.description} | {_usd(extra.amount)} |")
    lines.append(f"| **Total Professional Services (one-time)** | **{_usd(b.total_professional_services_cost)}** |")
    lines.append(
        f"| Migration ({b.migration_unit_count:g} units x {_usd(b.migration_cost_per_unit)}) | {_usd(b.migration_cost)} |"
    )
    lines.append(f"| Managed Compute ({report.compute_units:g} units) | {_usd(b.managed_services_compute_cost)} |")
    lines.append(f"| Managed Storage ({report.storage_tb:g} TB) | {_usd(b.managed_services_storage_cost)} |")
    lines.append(f"| **Total Managed Services (monthly)** | **{_usd(b.total_managed_services_cost)}** |")
    lines.append("")

    lines.append("## Totals")
    lines.append("")
    lines.append(f"- **Total Monthly Cost:** {_usd(b.total_monthly_cost)}")
    lines.append(f"- **First Year Total:** {_usd(b.total_first_year_cost)}")
    lines.append("")

    version = report.pricing_version
    if version:
        lines.append("---")
        lines.append("")
        lines.append(
            f"_Pricing version {version.get('version', '?')} "
            f"(updated {version.get('last_updated', '?')}, {version.get('currency', 'USD')})_"
        )
        lines.append("")

    return "\n".join(lines)
