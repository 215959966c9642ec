"""Catalog package: static tiers/features/pricing plus the live pricing overlay."""

from landingzone.catalog.live import (
    CachedPrice,
    LivePricingCache,
    PricingRefreshResult,
    PricingSnapshot,
    load_service_mappings,
)
from landingzone.catalog.store import (
    Catalog,
    CatalogError,
    build_feature,
    build_tier,
    get_default_catalog,
)

__all__ = [
    "CachedPrice",
    "Catalog",
    "CatalogError",
    "LivePricingCache",
    "PricingRefreshResult",
    "PricingSnapshot",
    "build_feature",
    "build_tier",
    "get_default_catalog",
    "load_service_mappings",
]
