"""AWS Price List API adapter.

Confirms that a feature's offer is published for the target region using the
bulk pricing index, then turns the public list prices into a monthly estimate
for a typical small-to-medium landing zone. Usage volumes are fixed
assumptions; the per-unit rates match the published us-east list prices.
"""

from __future__ import annotations

import json
import logging
import urllib.request
from typing import Any, Callable

from landingzone.adapters import PricingAdapter, ServiceMapping, urlopen_safe

log = logging.getLogger(__name__)

_PRICING_BASE = "https://pricing.us-east-1.amazonaws.com"
_INDEX_PATH = "/offers/v1.0/aws/index.json"
_TIMEOUT = 30  # seconds

_HOURS_PER_MONTH = 730


def guardduty_monthly(usage_gb: float = 100) -> int:
    """Tiered log-ingestion pricing: $1.00/GB to 500 GB, $0.50/GB to 2.5 TB, $0.25/GB after."""
    if usage_gb <= 500:
        cost = usage_gb * 1.00
    elif usage_gb <= 2500:
        cost = 500 * 1.00 + (usage_gb - 500) * 0.50
    else:
        cost = 500 * 1.00 + 2000 * 0.50 + (usage_gb - 2500) * 0.25
    return round(cost)


def transit_gateway_monthly(attachments: int = 1, processed_gb: float = 500) -> int:
    """$36/month per attachment plus $0.02/GB processed."""
    return round(attachments * 36 + processed_gb * 0.02)


def network_firewall_monthly(endpoints: int = 1, processed_gb: float = 1000) -> int:
    """$0.50/endpoint-hour plus $0.065/GB processed."""
    endpoint_cost = endpoints * 0.50 * _HOURS_PER_MONTH
    return round(endpoint_cost + processed_gb * 0.065)


def _free(*_args: Any) -> int:
    return 0


_ESTIMATORS: dict[str, Callable[[], int]] = {
    "guardduty": guardduty_monthly,
    "transit-gateway": transit_gateway_monthly,
    "network-firewall": network_firewall_monthly,
    # No direct charge
    "aws-organizations": _free,
    "control-tower": _free,
    "iam-basic": _free,
}


class AWSPricingAdapter(PricingAdapter):
    """Fetches AWS offer metadata from the public bulk pricing API."""

    provider = "aws"

    def __init__(self, timeout: int = _TIMEOUT, base_url: str = _PRICING_BASE):
        self._timeout = timeout
        self._base_url = base_url.rstrip("/")

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def fetch_price_index(self) -> dict[str, Any]:
        return self._get_json(_INDEX_PATH)

    def fetch_feature_price(self, mapping: ServiceMapping, index: dict[str, Any], region: str) -> float | None:
        estimator = _ESTIMATORS.get(mapping.feature_id)
        if estimator is None:
            log.warning("No pricing logic for feature %s", mapping.feature_id)
            return None

        offer = index.get("offers", {}).get(mapping.offer_code)
        if not offer:
            log.warning("Offer code %s not found in AWS price list index", mapping.offer_code)
            return None

        region_index_url = offer.get("currentRegionIndexUrl")
        if not region_index_url:
            log.warning("Offer %s has no region index", mapping.offer_code)
            return None

        region_index = self._get_json(region_index_url)
        if region not in region_index.get("regions", {}):
            log.warning("Region %s not found for %s", region, mapping.offer_code)
            return None

        return float(estimator())

    def supported_features(self) -> list[str]:
        return list(_ESTIMATORS)

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def _get_json(self, path: str) -> dict[str, Any]:
        url = path if path.startswith("http") else f"{self._base_url}{path}"
        req = urllib.request.Request(url, headers={"Accept": "application/json"})
        return json.loads(urlopen_safe(req, timeout=self._timeout))
