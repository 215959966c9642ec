"""Submission handling: resolve the tier, price the selection, store the record."""

from __future__ import annotations

import logging
import time

from landingzone.catalog import Catalog
from landingzone.cost import CostEngine
from landingzone.spec import CostBreakdown, CostSelection, Submission, SubmissionRequest, Tier
from landingzone.storage import MemStorage

log = logging.getLogger(__name__)


class InvalidConfigurationError(ValueError):
    """The selected configuration size is not one of the catalog tiers."""


def resolve_tier(catalog: Catalog, tier_id: str) -> Tier:
    tier = catalog.get_tier(tier_id)
    if tier is None:
        raise InvalidConfigurationError("Invalid configuration size selected")
    return tier


def estimate_selection(selection: CostSelection, engine: CostEngine) -> CostBreakdown:
    tier = resolve_tier(engine.catalog, selection.selected_config)
    return engine.calculate(
        tier,
        selection.selected_features,
        selection.custom_compute_units,
        selection.custom_storage_tb,
        selection.additional_costs,
    )


def process_submission(
    request: SubmissionRequest,
    catalog: Catalog,
    store: MemStorage,
    engine: CostEngine | None = None,
) -> tuple[Submission, CostBreakdown]:
    """Price and persist a submission.

    Raises InvalidConfigurationError before anything is stored when the tier is
    unknown. The stored record keeps the first-year total as computed now.
    """
    start = time.monotonic()
    selection = request.cost_calculation
    log.info(
        "[SUBMISSION] Request received: config=%s features=%d",
        selection.selected_config,
        len(selection.selected_features),
    )

    engine = engine or CostEngine(catalog)
    breakdown = estimate_selection(selection, engine)
    stored = store.create_submission(
        request,
        total_estimated_cost=breakdown.total_first_year_cost,
        configuration_size=breakdown.tier,
    )

    log.info(
        "[SUBMISSION] Stored %s in %.1fms, total=%.2f",
        stored.submission_id,
        (time.monotonic() - start) * 1000,
        breakdown.total_first_year_cost,
    )
    return stored, breakdown
