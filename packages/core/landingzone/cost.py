"""Cost engine: turns a tier, a feature selection and resource counts into a CostBreakdown.

Amounts are neither rounded nor clamped, and inputs are not validated here.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from landingzone.catalog import Catalog, get_default_catalog
from landingzone.spec import AdditionalCost, CostBreakdown, EstimateReport, Feature, Tier

_MONTHS_PER_YEAR = 12


def _amount(cost: AdditionalCost | Mapping[str, Any]) -> float:
    if isinstance(cost, Mapping):
        return cost.get("amount", 0)
    return cost.amount


class CostEngine:
    def __init__(self, catalog: Catalog | None = None):
        self.catalog = catalog or get_default_catalog()

    def effective_features(self, tier: Tier, selected_feature_ids: Iterable[str]) -> list[Feature]:
        """Selected features actually offered in the tier, in catalog order.

        Duplicates collapse and IDs not offered in the tier are dropped silently.
        """
        selected = set(selected_feature_ids)
        return [f for f in self.catalog.features if f.id in selected and f.is_available_in(tier.size)]

    def calculate(
        self,
        tier: Tier,
        selected_feature_ids: Iterable[str],
        compute_unit_count: float,
        storage_volume_count: float,
        additional_costs: Iterable[AdditionalCost | Mapping[str, Any]] = (),
    ) -> CostBreakdown:
        features = self.effective_features(tier, selected_feature_ids)
        pricing = [self.catalog.get_feature_pricing(f.id) for f in features]

        # Infrastructure (monthly)
        base_infra = tier.base_infra_cost_per_month
        features_infra = sum(p.infra_cost_impact for p in pricing)
        total_infra = base_infra + features_infra

        # Professional services (one-time)
        base_ps = tier.base_professional_services_cost
        features_ps = sum(p.professional_services_cost_impact for p in pricing)
        additional_total = sum(_amount(c) for c in additional_costs)
        total_ps = base_ps + features_ps + additional_total

        # Migration (one-time), keyed to the managed compute-unit count
        cost_per_unit = self.catalog.get_migration_pricing().cost_per_unit
        migration = compute_unit_count * cost_per_unit

        # Managed services (monthly)
        managed_compute = compute_unit_count * tier.managed_services_cost_per_unit
        managed_storage = storage_volume_count * tier.managed_services_cost_per_tb_storage
        total_managed = managed_compute + managed_storage

        total_monthly = total_infra + total_managed
        total_first_year = total_monthly * _MONTHS_PER_YEAR + total_ps + migration

        return CostBreakdown(
            tier=tier.size,
            base_infrastructure_cost=base_infra,
            features_infrastructure_cost=features_infra,
            total_infrastructure_cost=total_infra,
            base_professional_services_cost=base_ps,
            features_professional_services_cost=features_ps,
            additional_costs_total=additional_total,
            total_professional_services_cost=total_ps,
            migration_unit_count=compute_unit_count,
            migration_cost_per_unit=cost_per_unit,
            migration_cost=migration,
            managed_services_compute_cost=managed_compute,
            managed_services_storage_cost=managed_storage,
            total_managed_services_cost=total_managed,
            total_monthly_cost=total_monthly,
            total_first_year_cost=total_first_year,
        )

    def build_report(
        self,
        tier: Tier,
        selected_feature_ids: Iterable[str],
        compute_unit_count: float,
        storage_volume_count: float,
        additional_costs: Iterable[AdditionalCost] = (),
    ) -> EstimateReport:
        """Calculate and bundle everything an exporter needs."""
        selected = list(selected_feature_ids)
        extras = list(additional_costs)
        breakdown = self.calculate(tier, selected, compute_unit_count, storage_volume_count, extras)
        features = self.effective_features(tier, selected)
        return EstimateReport(
            tier=tier,
            features=features,
            feature_pricing={f.id: self.catalog.get_feature_pricing(f.id) for f in features},
            compute_units=compute_unit_count,
            storage_tb=storage_volume_count,
            additional_costs=extras,
            breakdown=breakdown,
            pricing_version=self.catalog.pricing_version(),
        )


def calculate_costs(
    tier: Tier,
    selected_feature_ids: Iterable[str],
    compute_unit_count: float,
    storage_volume_count: float,
    additional_costs: Iterable[AdditionalCost | Mapping[str, Any]] = (),
) -> CostBreakdown:
    """Calculate a breakdown against the default static catalog."""
    return CostEngine().calculate(tier, selected_feature_ids, compute_unit_count, storage_volume_count, additional_costs)
