"""FastAPI backend wrapping the landing-zone catalog, cost engine and submission store."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from datetime import datetime

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from landingzone.catalog import Catalog, LivePricingCache
from landingzone.cost import CostEngine
from landingzone.spec import CostSelection, SubmissionFilters, SubmissionRequest
from landingzone.storage import MemStorage
from landingzone.submission import InvalidConfigurationError, estimate_selection, process_submission

log = logging.getLogger(__name__)

_MAX_LIST_LIMIT = 100

# Lazy singletons
_pricing_cache: LivePricingCache | None = None
_catalog: Catalog | None = None
_engine: CostEngine | None = None
_store: MemStorage | None = None


def get_pricing_cache() -> LivePricingCache:
    global _pricing_cache
    if _pricing_cache is None:
        _pricing_cache = LivePricingCache()
    return _pricing_cache


def get_catalog() -> Catalog:
    global _catalog
    if _catalog is None:
        _catalog = Catalog(pricing_cache=get_pricing_cache())
    return _catalog


def get_engine() -> CostEngine:
    global _engine
    if _engine is None:
        _engine = CostEngine(get_catalog())
    return _engine


def get_store() -> MemStorage:
    global _store
    if _store is None:
        _store = MemStorage()
    return _store


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


async def _periodic_refresh(cache: LivePricingCache, interval_hours: float) -> None:
    while True:
        await asyncio.sleep(interval_hours * 3600)
        result = await cache.refresh_async(force=True)
        log.info("Scheduled pricing refresh: updated=%s fetched=%d", result.updated, result.fetched)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    task: asyncio.Task | None = None
    if _env_flag("LANDINGZONE_LIVE_PRICING"):
        cache = get_pricing_cache()
        get_catalog()
        result = await cache.refresh_async(force=True)
        log.info(
            "Startup pricing refresh: updated=%s fetched=%d errors=%d",
            result.updated,
            result.fetched,
            result.total_errors,
        )
        interval = float(os.environ.get("LANDINGZONE_PRICING_REFRESH_HOURS", "0"))
        if interval > 0:
            task = asyncio.create_task(_periodic_refresh(cache, interval))
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


app = FastAPI(
    title="Landing Zone Estimator",
    version="0.3.1",
    description="Tiered AWS landing-zone cost estimates for presales",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "details": details},
    )


def _bad_configuration(exc: InvalidConfigurationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})


def _parse_limit(raw: str | None) -> int | None:
    """Positive integers only, capped; anything else means no limit."""
    if raw is None or not raw.strip().isdigit():
        return None
    value = int(raw)
    if value <= 0:
        return None
    return min(value, _MAX_LIST_LIMIT)


# --- Catalog ---


@app.get("/api/health")
def health():
    try:
        catalog = get_catalog()
        return {
            "status": "ok",
            "catalog_loaded": True,
            "tiers": len(catalog.tiers),
            "features": len(catalog.features),
            "live_pricing": get_pricing_cache().is_valid(),
        }
    except Exception:
        log.exception("Catalog failed to load")
        return {"status": "degraded", "catalog_loaded": False}


@app.get("/api/tiers")
def list_tiers():
    return {"tiers": [t.model_dump() for t in get_catalog().tiers]}


@app.get("/api/tiers/{tier_id}")
def get_tier(tier_id: str):
    tier = get_catalog().get_tier(tier_id)
    if tier is None:
        raise HTTPException(status_code=404, detail=f"Unknown tier: {tier_id}")
    return tier.model_dump()


@app.get("/api/tiers/{tier_id}/features")
def get_tier_features(tier_id: str):
    catalog = get_catalog()
    tier = catalog.get_tier(tier_id)
    if tier is None:
        raise HTTPException(status_code=404, detail=f"Unknown tier: {tier_id}")
    features = []
    for f in catalog.get_features_for_tier(tier.size):
        pricing = catalog.get_feature_pricing(f.id)
        features.append(
            f.model_dump()
            | {
                "infra_cost_impact": pricing.infra_cost_impact,
                "professional_services_cost_impact": pricing.professional_services_cost_impact,
                "pricing_source": pricing.source,
            }
        )
    return {
        "tier": tier.size,
        "mandatory_features": tier.mandatory_features,
        "features": features,
        "categories": [c.model_dump() for c in catalog.categories],
    }


# --- Estimates ---


@app.post("/api/estimate")
def estimate(selection: CostSelection):
    engine = get_engine()
    try:
        breakdown = estimate_selection(selection, engine)
    except InvalidConfigurationError as e:
        return _bad_configuration(e)
    tier = engine.catalog.get_tier(selection.selected_config)
    return {
        "breakdown": breakdown.model_dump(),
        "effective_features": [f.id for f in engine.effective_features(tier, selection.selected_features)],
        "pricing_version": engine.catalog.pricing_version(),
    }


# --- Submissions ---


@app.post("/api/submissions", status_code=status.HTTP_201_CREATED)
def create_submission(req: SubmissionRequest):
    try:
        stored, breakdown = process_submission(req, get_catalog(), get_store(), get_engine())
    except InvalidConfigurationError as e:
        log.info("[SUBMISSION] Rejected: %s", e)
        return _bad_configuration(e)
    except Exception:
        log.exception("[SUBMISSION] Failed to store submission")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to process submission"},
        )
    return {
        "success": True,
        "submission_id": stored.submission_id,
        "estimated_cost": breakdown.total_first_year_cost,
    }


@app.get("/api/submissions")
def list_submissions(
    configuration_size: str | None = None,
    partner_name: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    limit: str | None = None,
):
    filters = SubmissionFilters(
        configuration_size=configuration_size,
        partner_name=partner_name,
        date_from=date_from,
        date_to=date_to,
        limit=_parse_limit(limit),
    )
    submissions = get_store().get_submissions(filters)
    return {
        "success": True,
        "count": len(submissions),
        "submissions": jsonable_encoder([s.model_dump() for s in submissions]),
    }


@app.get("/api/submissions/stats")
def submission_stats():
    return {"success": True, "stats": get_store().get_submission_stats().model_dump()}


@app.get("/api/submissions/{submission_id}")
def get_submission(submission_id: str):
    submission = get_store().get_submission_by_id(submission_id)
    if submission is None:
        return JSONResponse(status_code=404, content={"success": False, "error": "Submission not found"})
    return {"success": True, "submission": jsonable_encoder(submission.model_dump())}


# --- Pricing ---


@app.get("/api/pricing")
def pricing():
    catalog = get_catalog()
    return {
        "pricing_version": catalog.pricing_version(),
        "migration_pricing": catalog.get_migration_pricing().model_dump(),
        "pricing_notes": catalog.pricing_notes,
        "live_pricing": get_pricing_cache().status(),
    }


@app.post("/api/pricing/refresh")
async def refresh_pricing():
    cache = get_pricing_cache()
    get_catalog()
    result = await cache.refresh_async(force=True)
    return {
        "region": result.region,
        "updated": result.updated,
        "skipped": result.skipped,
        "fetched": result.fetched,
        "errors": result.errors,
        "prices": result.prices,
        "status": cache.status(),
    }


def serve(host: str = "127.0.0.1", port: int = 8000):
    """Start the estimator web server.

    Runs a single worker: the submission store and pricing cache live in process memory.
    """
    import uvicorn

    uvicorn.run("landingzone_web.app:app", host=host, port=port, workers=1)
