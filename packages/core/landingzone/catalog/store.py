"""Landing-zone catalog: tiers, features and static pricing loaded from YAML.

Data lives in data/tiers.yaml, data/features.yaml and data/pricing.yaml.
Loaded once per Catalog and read-only afterwards; lookups never raise.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from landingzone.spec import (
    TIER_SIZES,
    BasePricing,
    Feature,
    FeatureCategoryInfo,
    FeaturePricing,
    MigrationPricing,
    Tier,
)

if TYPE_CHECKING:
    from landingzone.catalog.live import LivePricingCache

log = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).parent.parent / "data"

_NO_COST = FeaturePricing(infra_cost_impact=0.0, professional_services_cost_impact=0.0)


class CatalogError(ValueError):
    """Bundled catalog data is inconsistent."""


def build_feature(definition: dict[str, Any], pricing: FeaturePricing) -> Feature:
    """Combine a feature definition with its static pricing into an immutable Feature."""
    return Feature(
        id=definition["id"],
        name=definition["name"],
        description=definition.get("description", ""),
        aws_definition=definition.get("aws_definition", ""),
        category=definition["category"],
        mandatory=definition.get("mandatory", False),
        infra_cost_impact=pricing.infra_cost_impact,
        professional_services_cost_impact=pricing.professional_services_cost_impact,
        available_in_sizes=list(definition.get("available_in_sizes", [])),
    )


def build_tier(definition: dict[str, Any], base_pricing: BasePricing) -> Tier:
    """Combine a tier definition with its base pricing into an immutable Tier."""
    return Tier(
        size=definition["size"],
        name=definition["name"],
        description=definition.get("description", ""),
        account_structure=definition.get("account_structure", ""),
        organizational_structure=definition.get("organizational_structure", ""),
        default_compute_units=definition.get("default_compute_units", 0),
        default_storage_tb=definition.get("default_storage_tb", 0),
        base_infra_cost_per_month=base_pricing.base_infra_cost_per_month,
        base_professional_services_cost=base_pricing.base_professional_services_cost,
        managed_services_cost_per_unit=base_pricing.managed_services_cost_per_unit,
        managed_services_cost_per_tb_storage=base_pricing.managed_services_cost_per_tb_storage,
        available_features=list(definition.get("available_features", [])),
        mandatory_features=list(definition.get("mandatory_features", [])),
    )


def _read_yaml(path: Path) -> dict[str, Any]:
    return yaml.safe_load(path.read_text()) or {}


class Catalog:
    """Static landing-zone catalog with an optional live pricing overlay.

    Tier and feature order follows the YAML files; that order is what the
    cost engine sums in and what displays and exports list.
    """

    def __init__(
        self,
        data_dir: str | Path | None = None,
        pricing_cache: LivePricingCache | None = None,
        migration_cost_per_unit: float | None = None,
    ):
        env_dir = os.environ.get("LANDINGZONE_DATA_DIR")
        self._dir = Path(data_dir) if data_dir else Path(env_dir) if env_dir else _DATA_DIR
        self.pricing_cache = pricing_cache

        self._features: dict[str, Feature] = {}
        self._static_pricing: dict[str, FeaturePricing] = {}
        self._tiers: dict[str, Tier] = {}
        self._categories: list[FeatureCategoryInfo] = []
        self._pricing_meta: dict[str, str] = {}
        self._pricing_notes: dict[str, Any] = {}
        self._migration = MigrationPricing()
        self._load()

        if migration_cost_per_unit is None and os.environ.get("LANDINGZONE_MIGRATION_COST_PER_UNIT"):
            migration_cost_per_unit = float(os.environ["LANDINGZONE_MIGRATION_COST_PER_UNIT"])
        if migration_cost_per_unit is not None:
            self._migration = MigrationPricing(
                cost_per_unit=migration_cost_per_unit,
                description=self._migration.description,
            )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load(self) -> None:
        pricing = _read_yaml(self._dir / "pricing.yaml")
        features = _read_yaml(self._dir / "features.yaml")
        tiers = _read_yaml(self._dir / "tiers.yaml")

        self._pricing_meta = {
            "version": str(pricing.get("version", "")),
            "last_updated": str(pricing.get("last_updated", "")),
            "currency": str(pricing.get("currency", "USD")),
        }
        self._pricing_notes = pricing.get("pricing_notes", {})
        if "migration_pricing" in pricing:
            self._migration = MigrationPricing.model_validate(pricing["migration_pricing"])

        feature_pricing = pricing.get("feature_pricing", {})
        for definition in features.get("features", []):
            fid = definition["id"]
            if fid in self._features:
                raise CatalogError(f"Duplicate feature id: {fid}")
            static = FeaturePricing.model_validate(feature_pricing.get(fid, {}))
            self._static_pricing[fid] = static
            self._features[fid] = build_feature(definition, static)

        self._categories = [FeatureCategoryInfo.model_validate(c) for c in features.get("categories", [])]

        base_pricing = pricing.get("base_pricing", {})
        for definition in tiers.get("tiers", []):
            size = definition["size"]
            if size not in base_pricing:
                raise CatalogError(f"No base pricing for tier {size!r}")
            tier = build_tier(definition, BasePricing.model_validate(base_pricing[size]))
            self._check_tier_features(tier)
            self._tiers[size] = tier
        self._check_feature_sizes()

        log.debug("Loaded catalog: %d tiers, %d features from %s", len(self._tiers), len(self._features), self._dir)

    def _check_feature_sizes(self) -> None:
        for feature in self._features.values():
            for size in feature.available_in_sizes:
                tier = self._tiers.get(size)
                if tier is not None and feature.id not in tier.available_features:
                    raise CatalogError(f"Feature {feature.id!r} is offered in tier {size!r} but the tier does not list it")

    def _check_tier_features(self, tier: Tier) -> None:
        for fid in tier.available_features:
            feature = self._features.get(fid)
            if feature is None:
                raise CatalogError(f"Tier {tier.size!r} references unknown feature {fid!r}")
            if not feature.is_available_in(tier.size):
                raise CatalogError(f"Feature {fid!r} is listed for tier {tier.size!r} but not offered in it")

    # ------------------------------------------------------------------
    # Tiers
    # ------------------------------------------------------------------

    @property
    def tiers(self) -> list[Tier]:
        return [self._tiers[s] for s in TIER_SIZES if s in self._tiers]

    def get_tier(self, tier_id: object) -> Tier | None:
        if not isinstance(tier_id, str):
            return None
        return self._tiers.get(tier_id)

    def get_base_pricing(self, tier_id: str) -> BasePricing | None:
        tier = self.get_tier(tier_id)
        if tier is None:
            return None
        return BasePricing(
            base_infra_cost_per_month=tier.base_infra_cost_per_month,
            base_professional_services_cost=tier.base_professional_services_cost,
            managed_services_cost_per_unit=tier.managed_services_cost_per_unit,
            managed_services_cost_per_tb_storage=tier.managed_services_cost_per_tb_storage,
        )

    # ------------------------------------------------------------------
    # Features
    # ------------------------------------------------------------------

    @property
    def features(self) -> list[Feature]:
        return list(self._features.values())

    @property
    def categories(self) -> list[FeatureCategoryInfo]:
        return list(self._categories)

    def get_feature(self, feature_id: str) -> Feature | None:
        return self._features.get(feature_id)

    def get_features_for_tier(self, tier_id: str) -> list[Feature]:
        return [f for f in self._features.values() if f.is_available_in(tier_id)]

    def get_features_by_category(self, tier_id: str) -> dict[str, list[Feature]]:
        """Features offered in a tier, grouped by category in catalog order."""
        tier = self.get_tier(tier_id)
        if tier is None:
            return {}
        grouped: dict[str, list[Feature]] = {}
        for feature in self.get_features_for_tier(tier_id):
            if feature.id in tier.available_features:
                grouped.setdefault(feature.category, []).append(feature)
        return grouped

    def get_mandatory_features(self, tier_id: str) -> list[Feature]:
        tier = self.get_tier(tier_id)
        if tier is None:
            return []
        return [f for f in self.get_features_for_tier(tier_id) if f.id in tier.mandatory_features]

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    def get_feature_pricing(self, feature_id: str) -> FeaturePricing:
        """Monthly and one-time cost impact of a feature.

        Unknown features cost nothing. A fresh live cache entry replaces the
        infrastructure cost (an explicit 0 included); professional services
        always come from the static catalog.
        """
        static = self._static_pricing.get(feature_id, _NO_COST)
        live = self._live_infra_cost(feature_id)
        if live is None:
            return static
        return FeaturePricing(
            infra_cost_impact=live,
            professional_services_cost_impact=static.professional_services_cost_impact,
            source="live",
        )

    def _live_infra_cost(self, feature_id: str) -> float | None:
        cache = self.pricing_cache
        if cache is None:
            return None
        try:
            if not cache.is_valid():
                return None
            return cache.get(feature_id)
        except Exception as exc:
            log.warning("Live pricing lookup failed for %s, using static price: %s", feature_id, exc)
            return None

    def get_migration_pricing(self) -> MigrationPricing:
        return self._migration

    def pricing_version(self) -> dict[str, str]:
        return dict(self._pricing_meta)

    @property
    def pricing_notes(self) -> dict[str, Any]:
        return self._pricing_notes


_default_catalog: Catalog | None = None


def get_default_catalog() -> Catalog:
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = Catalog()
    return _default_catalog
