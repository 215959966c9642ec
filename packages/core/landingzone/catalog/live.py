"""Live pricing cache: time-bounded overlay of provider prices on the static catalog.

The cache holds one immutable PricingSnapshot. A refresh builds a complete new
snapshot and swaps the reference, so readers see either the old snapshot or the
new one, never a half-built one. Failures never escape: a refresh that cannot
produce any price leaves the previous snapshot in place.
"""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Callable

import yaml

from landingzone.adapters import ServiceMapping

if TYPE_CHECKING:
    from landingzone.adapters import PricingAdapter

logger = logging.getLogger(__name__)

_MAPPING_FILE = Path(__file__).parent.parent / "data" / "aws_service_mapping.yaml"

DEFAULT_TTL_HOURS = 24.0
DEFAULT_REGION = "us-east-2"


@dataclass(frozen=True)
class CachedPrice:
    feature_id: str
    infra_cost_impact: float
    region: str
    updated_at: datetime
    source: str = "aws-pricing-api"


@dataclass(frozen=True)
class PricingSnapshot:
    built_at: datetime
    region: str
    prices: dict[str, CachedPrice] = field(default_factory=dict)


@dataclass
class PricingRefreshResult:
    region: str
    fetched: int = 0
    errors: list[str] = field(default_factory=list)
    skipped: bool = False
    updated: bool = False
    prices: dict[str, float] = field(default_factory=dict)

    @property
    def total_errors(self) -> int:
        return len(self.errors)


def load_service_mappings(path: str | Path | None = None) -> list[ServiceMapping]:
    """Read the feature -> price-list offer mapping file."""
    p = Path(path) if path else _MAPPING_FILE
    data = yaml.safe_load(p.read_text()) or {}
    return [
        ServiceMapping(
            feature_id=m["feature_id"],
            offer_code=m["offer_code"],
            service_name=m.get("service_name", ""),
            notes=m.get("notes", ""),
        )
        for m in data.get("mappings", [])
    ]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _default_ttl() -> timedelta:
    hours = float(os.environ.get("LANDINGZONE_PRICING_TTL_HOURS", DEFAULT_TTL_HOURS))
    return timedelta(hours=hours)


def _load_adapter() -> PricingAdapter:
    from landingzone.adapters.aws import AWSPricingAdapter

    return AWSPricingAdapter()


class LivePricingCache:
    """In-memory overlay of live infrastructure prices keyed by feature ID.

    Inject one into Catalog to have get_feature_pricing prefer live prices
    while the snapshot is fresh.
    """

    def __init__(
        self,
        adapter: PricingAdapter | None = None,
        ttl: timedelta | None = None,
        region: str | None = None,
        mappings: list[ServiceMapping] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._adapter = adapter
        self.ttl = ttl if ttl is not None else _default_ttl()
        self.region = region or os.environ.get("LANDINGZONE_PRICING_REGION", DEFAULT_REGION)
        self._mappings = mappings
        self._clock = clock or _utcnow
        self._snapshot: PricingSnapshot | None = None
        self._refresh_lock = threading.Lock()

    @property
    def adapter(self) -> PricingAdapter:
        if self._adapter is None:
            self._adapter = _load_adapter()
        return self._adapter

    @property
    def mappings(self) -> list[ServiceMapping]:
        if self._mappings is None:
            self._mappings = load_service_mappings()
        return self._mappings

    @property
    def snapshot(self) -> PricingSnapshot | None:
        return self._snapshot

    @property
    def refreshing(self) -> bool:
        return self._refresh_lock.locked()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def is_valid(self) -> bool:
        snap = self._snapshot
        if snap is None:
            return False
        return self._clock() - snap.built_at < self.ttl

    def get(self, feature_id: str) -> float | None:
        """Cached monthly price for a feature, or None if the snapshot has no entry."""
        snap = self._snapshot
        if snap is None:
            return None
        entry = snap.prices.get(feature_id)
        return entry.infra_cost_impact if entry is not None else None

    def status(self) -> dict:
        snap = self._snapshot
        return {
            "valid": self.is_valid(),
            "refreshing": self.refreshing,
            "region": snap.region if snap else self.region,
            "built_at": snap.built_at.isoformat() if snap else None,
            "ttl_hours": self.ttl.total_seconds() / 3600,
            "entries": len(snap.prices) if snap else 0,
        }

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def load(self, snapshot: PricingSnapshot) -> None:
        self._snapshot = snapshot

    def clear(self) -> None:
        self._snapshot = None

    def refresh(self, force: bool = False) -> PricingRefreshResult:
        """Rebuild the snapshot from the adapter.

        No-op while the current snapshot is still valid unless ``force``.
        A refresh requested while another is running returns immediately
        with ``skipped=True``.
        """
        result = PricingRefreshResult(region=self.region)

        if not force and self.is_valid():
            result.skipped = True
            return result

        if not self._refresh_lock.acquire(blocking=False):
            logger.info("Pricing refresh already in progress; skipping")
            result.skipped = True
            return result

        try:
            snapshot = self._build_snapshot(result)
            if snapshot is None:
                logger.warning(
                    "Pricing refresh for %s produced no prices; keeping previous cache (%d error(s))",
                    self.region,
                    result.total_errors,
                )
                return result
            self._snapshot = snapshot
            result.updated = True
            logger.info("Pricing cache refreshed: %d feature price(s) for %s", result.fetched, self.region)
            return result
        finally:
            self._refresh_lock.release()

    async def refresh_async(self, force: bool = False) -> PricingRefreshResult:
        return await asyncio.to_thread(self.refresh, force)

    def _build_snapshot(self, result: PricingRefreshResult) -> PricingSnapshot | None:
        try:
            mappings = self.mappings
        except Exception as exc:
            msg = f"service mappings: {exc!r}"
            logger.warning(msg)
            result.errors.append(msg)
            return None

        try:
            index = self.adapter.fetch_price_index()
        except Exception as exc:
            msg = f"price index: {exc}"
            logger.warning(msg)
            result.errors.append(msg)
            return None

        prices: dict[str, CachedPrice] = {}
        for mapping in mappings:
            try:
                value = self.adapter.fetch_feature_price(mapping, index, self.region)
            except Exception as exc:
                msg = f"{mapping.feature_id}: {exc}"
                logger.warning(msg)
                result.errors.append(msg)
                continue
            if value is None:
                continue
            prices[mapping.feature_id] = CachedPrice(
                feature_id=mapping.feature_id,
                infra_cost_impact=value,
                region=self.region,
                updated_at=self._clock(),
            )

        if not prices:
            return None

        result.fetched = len(prices)
        result.prices = {fid: p.infra_cost_impact for fid, p in prices.items()}
        return PricingSnapshot(built_at=self._clock(), region=self.region, prices=prices)
