"""Live pricing adapters: fetch feature prices from provider price lists."""

from __future__ import annotations

import ssl
import urllib.request
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import certifi


def _ssl_context() -> ssl.SSLContext:
    """SSL context backed by the certifi CA bundle (macOS Python ships without one)."""
    return ssl.create_default_context(cafile=certifi.where())


def urlopen_safe(req: urllib.request.Request, timeout: int = 30) -> bytes:
    """urlopen with certifi SSL. Use this instead of raw urllib.request.urlopen."""
    ctx = _ssl_context()
    with urllib.request.urlopen(req, timeout=timeout, context=ctx) as resp:
        return resp.read()


@dataclass(frozen=True)
class ServiceMapping:
    """Links a catalog feature to the price-list offer that bills it."""

    feature_id: str
    offer_code: str
    service_name: str = ""
    notes: str = ""


class PricingAdapter(ABC):
    """Abstract base for live pricing sources.

    A refresh fetches the provider's price index once, then asks for one
    monthly figure per mapped feature. Returning None means "no live price"
    and the catalog keeps its static value for that feature.
    """

    provider: str

    @abstractmethod
    def fetch_price_index(self) -> dict[str, Any]:
        """Return the provider's top-level offer index."""

    @abstractmethod
    def fetch_feature_price(self, mapping: ServiceMapping, index: dict[str, Any], region: str) -> float | None:
        """Return the monthly infrastructure cost for one feature, or None."""


__all__ = ["PricingAdapter", "ServiceMapping", "urlopen_safe"]
