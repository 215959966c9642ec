"""Landing Zone Estimator: tiered AWS landing-zone pricing for presales."""

from landingzone.spec import (
    AdditionalCost,
    CostBreakdown,
    CostSelection,
    EstimateReport,
    Feature,
    FeaturePricing,
    MigrationPricing,
    Submission,
    SubmissionRequest,
    Tier,
)

__version__ = "0.3.1"

__all__ = [
    "AdditionalCost",
    "Catalog",
    "CostBreakdown",
    "CostEngine",
    "CostSelection",
    "EstimateReport",
    "Feature",
    "FeaturePricing",
    "LivePricingCache",
    "MemStorage",
    "MigrationPricing",
    "Submission",
    "SubmissionRequest",
    "Tier",
    "calculate_costs",
]


def __getattr__(name: str):
    # Lazy imports so importing the models does not load catalog data
    if name == "Catalog":
        from landingzone.catalog import Catalog

        return Catalog
    if name == "LivePricingCache":
        from landingzone.catalog import LivePricingCache

        return LivePricingCache
    if name == "CostEngine":
        from landingzone.cost import CostEngine

        return CostEngine
    if name == "calculate_costs":
        from landingzone.cost import calculate_costs

        return calculate_costs
    if name == "MemStorage":
        from landingzone.storage import MemStorage

        return MemStorage
    raise AttributeError(f"module 'landingzone' has no attribute {name!r}")
