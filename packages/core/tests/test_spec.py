"""Tests for the domain models."""

from __future__ import annotations

import pytest
from landingzone.spec import (
    AdditionalCost,
    CostSelection,
    Feature,
    PresalesInfo,
    SubmissionFilters,
    SubmissionRequest,
    Tier,
)
from pydantic import ValidationError


def _tier(**overrides) -> Tier:
    data = dict(
        size="small",
        name="Small",
        default_compute_units=8,
        default_storage_tb=5,
        base_infra_cost_per_month=1200,
        base_professional_services_cost=25000,
        managed_services_cost_per_unit=140,
        managed_services_cost_per_tb_storage=90,
        available_features=["a", "b"],
        mandatory_features=["a"],
    )
    data.update(overrides)
    return Tier(**data)


class TestTier:
    def test_valid(self):
        assert _tier().size == "small"

    def test_mandatory_must_be_available(self):
        with pytest.raises(ValidationError, match="mandatory"):
            _tier(mandatory_features=["a", "c"])

    def test_unknown_size(self):
        with pytest.raises(ValidationError):
            _tier(size="xl")

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            _tier(base_infra_cost_per_month=-1)

    def test_frozen(self):
        tier = _tier()
        with pytest.raises(ValidationError):
            tier.base_infra_cost_per_month = 0


class TestFeature:
    def test_available_in(self):
        f = Feature(id="x", name="X", category="security", available_in_sizes=["medium", "large"])
        assert f.is_available_in("large")
        assert not f.is_available_in("small")

    def test_negative_cost_rejected(self):
        with pytest.raises(ValidationError):
            Feature(id="x", name="X", category="security", infra_cost_impact=-5)

    def test_unknown_category(self):
        with pytest.raises(ValidationError):
            Feature(id="x", name="X", category="compute")


class TestAdditionalCost:
    def test_description_trimmed(self):
        cost = AdditionalCost(description="  Training  ", amount=100)
        assert cost.description == "Training"
        assert cost.id

    @pytest.mark.parametrize("description", ["", "   "])
    def test_description_required(self, description):
        with pytest.raises(ValidationError, match="Description is required"):
            AdditionalCost(description=description, amount=1)

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            AdditionalCost(description="Refund", amount=-10)

    def test_ids_unique(self):
        assert AdditionalCost(description="a", amount=1).id != AdditionalCost(description="a", amount=1).id


class TestSelectionModels:
    def test_negative_quantities_rejected(self):
        with pytest.raises(ValidationError):
            CostSelection(selected_config="small", custom_compute_units=-1, custom_storage_tb=0)

    def test_presales_info_required_fields(self):
        with pytest.raises(ValidationError):
            PresalesInfo(presales_engineer_email="se@example.com", partner_name="", end_customer_name="X")

    def test_submission_metrics_default(self):
        req = SubmissionRequest(
            presales_info=PresalesInfo(presales_engineer_email="se@x.io", partner_name="P", end_customer_name="C"),
            cost_calculation=CostSelection(selected_config="small", custom_compute_units=1, custom_storage_tb=1),
        )
        assert req.submission_metrics.submission_id is None
        assert req.submission_metrics.validation_errors == []

    def test_filters_limit_positive(self):
        with pytest.raises(ValidationError):
            SubmissionFilters(limit=0)
