"""Tests for the AWS pricing adapter.

All HTTP calls are mocked; no network access required.
"""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from landingzone.adapters import PricingAdapter, ServiceMapping
from landingzone.adapters.aws import (
    AWSPricingAdapter,
    guardduty_monthly,
    network_firewall_monthly,
    transit_gateway_monthly,
)

_INDEX = {
    "offers": {
        "AmazonGuardDuty": {
            "offerCode": "AmazonGuardDuty",
            "currentRegionIndexUrl": "/offers/v1.0/aws/AmazonGuardDuty/current/region_index.json",
        },
        "AmazonVPC": {
            "offerCode": "AmazonVPC",
            "currentRegionIndexUrl": "/offers/v1.0/aws/AmazonVPC/current/region_index.json",
        },
        "AWSNoRegions": {"offerCode": "AWSNoRegions"},
    }
}

_REGION_INDEX = {
    "regions": {
        "us-east-1": {"regionCode": "us-east-1"},
        "us-east-2": {"regionCode": "us-east-2"},
    }
}

_GUARDDUTY = ServiceMapping(feature_id="guardduty", offer_code="AmazonGuardDuty")


def _urlopen_returning(payload: dict):
    return patch("landingzone.adapters.aws.urlopen_safe", return_value=json.dumps(payload).encode())


class TestEstimators:
    def test_guardduty_tiers(self):
        assert guardduty_monthly() == 100
        assert guardduty_monthly(500) == 500
        assert guardduty_monthly(1500) == 1000
        assert guardduty_monthly(3500) == 1750

    def test_transit_gateway(self):
        assert transit_gateway_monthly() == 46
        assert transit_gateway_monthly(attachments=3, processed_gb=0) == 108

    def test_network_firewall(self):
        assert network_firewall_monthly() == 430
        assert network_firewall_monthly(endpoints=2, processed_gb=0) == 730


class TestAWSPricingAdapter:
    def test_is_pricing_adapter(self):
        adapter = AWSPricingAdapter()
        assert isinstance(adapter, PricingAdapter)
        assert adapter.provider == "aws"

    def test_supported_features(self):
        supported = AWSPricingAdapter().supported_features()
        assert {"guardduty", "transit-gateway", "network-firewall", "aws-organizations"} <= set(supported)

    def test_fetch_price_index(self):
        with _urlopen_returning(_INDEX) as mock_open:
            index = AWSPricingAdapter().fetch_price_index()
        assert "AmazonGuardDuty" in index["offers"]
        req = mock_open.call_args[0][0]
        assert req.full_url == "https://pricing.us-east-1.amazonaws.com/offers/v1.0/aws/index.json"

    def test_fetch_feature_price(self):
        with _urlopen_returning(_REGION_INDEX) as mock_open:
            price = AWSPricingAdapter().fetch_feature_price(_GUARDDUTY, _INDEX, "us-east-2")
        assert price == 100.0
        req = mock_open.call_args[0][0]
        assert req.full_url.endswith("/AmazonGuardDuty/current/region_index.json")

    def test_free_service_is_explicit_zero(self):
        mapping = ServiceMapping(feature_id="aws-organizations", offer_code="AmazonVPC")
        with _urlopen_returning(_REGION_INDEX):
            price = AWSPricingAdapter().fetch_feature_price(mapping, _INDEX, "us-east-1")
        assert price == 0.0

    def test_region_not_offered(self):
        with _urlopen_returning(_REGION_INDEX):
            assert AWSPricingAdapter().fetch_feature_price(_GUARDDUTY, _INDEX, "ap-south-2") is None

    def test_offer_missing_from_index(self):
        mapping = ServiceMapping(feature_id="guardduty", offer_code="AmazonNothing")
        with _urlopen_returning(_REGION_INDEX) as mock_open:
            assert AWSPricingAdapter().fetch_feature_price(mapping, _INDEX, "us-east-2") is None
        mock_open.assert_not_called()

    def test_offer_without_region_index(self):
        mapping = ServiceMapping(feature_id="guardduty", offer_code="AWSNoRegions")
        assert AWSPricingAdapter().fetch_feature_price(mapping, _INDEX, "us-east-2") is None

    def test_feature_without_estimator(self):
        mapping = ServiceMapping(feature_id="cloudtrail", offer_code="AmazonGuardDuty")
        with _urlopen_returning(_REGION_INDEX) as mock_open:
            assert AWSPricingAdapter().fetch_feature_price(mapping, _INDEX, "us-east-2") is None
        mock_open.assert_not_called()

    def test_network_errors_propagate(self):
        with patch("landingzone.adapters.aws.urlopen_safe", side_effect=OSError("unreachable")):
            with pytest.raises(OSError):
                AWSPricingAdapter().fetch_price_index()

    def test_custom_base_url(self):
        with _urlopen_returning(_INDEX) as mock_open:
            AWSPricingAdapter(base_url="http://localhost:8080/").fetch_price_index()
        assert mock_open.call_args[0][0].full_url == "http://localhost:8080/offers/v1.0/aws/index.json"
        assert mock_open.call_args[1]["timeout"] == 30
