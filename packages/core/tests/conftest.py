"""Shared fixtures for core tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from landingzone.adapters import PricingAdapter, ServiceMapping
from landingzone.catalog import Catalog, LivePricingCache
from landingzone.cost import CostEngine

T0 = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class StubAdapter(PricingAdapter):
    """Returns canned prices; a value that is an Exception is raised instead."""

    provider = "aws"

    def __init__(self, prices: dict[str, object], index_error: Exception | None = None):
        self.prices = prices
        self.index_error = index_error
        self.index_calls = 0

    def fetch_price_index(self):
        self.index_calls += 1
        if self.index_error is not None:
            raise self.index_error
        return {"offers": {}}

    def fetch_feature_price(self, mapping, index, region):
        value = self.prices.get(mapping.feature_id)
        if isinstance(value, Exception):
            raise value
        return value


MAPPINGS = [
    ServiceMapping(feature_id="guardduty", offer_code="AmazonGuardDuty"),
    ServiceMapping(feature_id="transit-gateway", offer_code="AmazonVPC"),
    ServiceMapping(feature_id="aws-organizations", offer_code="AWSOrganizations"),
]


@pytest.fixture
def catalog() -> Catalog:
    return Catalog()


@pytest.fixture
def engine(catalog: Catalog) -> CostEngine:
    return CostEngine(catalog)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_cache(clock: FakeClock):
    """Factory for a LivePricingCache wired to a stub adapter and the fake clock."""

    def _make(prices: dict[str, object], **kwargs) -> LivePricingCache:
        adapter = kwargs.pop("adapter", None) or StubAdapter(prices)
        return LivePricingCache(
            adapter=adapter,
            ttl=kwargs.pop("ttl", timedelta(hours=24)),
            region=kwargs.pop("region", "us-east-2"),
            mappings=kwargs.pop("mappings", MAPPINGS),
            clock=clock,
        )

    return _make


@pytest.fixture
def make_adapter():
    def _make(prices: dict[str, object], index_error: Exception | None = None) -> StubAdapter:
        return StubAdapter(prices, index_error=index_error)

    return _make
