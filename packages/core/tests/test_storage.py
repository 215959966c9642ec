"""Tests for the in-memory submission store."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from landingzone.spec import SubmissionFilters, SubmissionRequest
from landingzone.storage import MemStorage, cost_range

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def _request(
    partner: str = "Acme Partners",
    config: str = "small",
    features: list[str] | None = None,
    device: str | None = None,
    **metrics,
) -> SubmissionRequest:
    return SubmissionRequest.model_validate(
        {
            "presales_info": {
                "presales_engineer_email": "se@example.com",
                "partner_name": partner,
                "end_customer_name": "Globex",
            },
            "cost_calculation": {
                "selected_config": config,
                "selected_features": features if features is not None else ["aws-organizations", "iam-basic"],
                "custom_compute_units": 8,
                "custom_storage_tb": 5,
            },
            "submission_metrics": {"device_type": device, **metrics},
        }
    )


@pytest.fixture
def store() -> MemStorage:
    return MemStorage()


class TestCostRange:
    @pytest.mark.parametrize(
        "total, label",
        [
            (0, "under-10k"),
            (9_999.99, "under-10k"),
            (10_000, "10k-50k"),
            (49_999, "10k-50k"),
            (50_000, "50k-100k"),
            (100_000, "100k-500k"),
            (500_000, "over-500k"),
            (2_000_000, "over-500k"),
        ],
    )
    def test_buckets(self, total, label):
        assert cost_range(total) == label


class TestCreate:
    def test_assigns_id_and_server_fields(self, store):
        s = store.create_submission(_request(), total_estimated_cost=42_000, configuration_size="small", submitted_at=NOW)

        assert s.submission_id
        assert s.submitted_at == NOW
        m = s.submission_metrics
        assert m.configuration_size == "small"
        assert m.total_features_selected == 2
        assert m.total_estimated_cost == 42_000
        assert m.cost_range == "10k-50k"
        assert len(store) == 1

    def test_ids_are_unique(self, store):
        ids = {store.create_submission(_request(), 1, "small").submission_id for _ in range(20)}
        assert len(ids) == 20

    def test_client_cost_range_is_kept(self, store):
        s = store.create_submission(_request(cost_range="custom"), 1_000_000, "large")
        assert s.submission_metrics.cost_range == "custom"

    def test_naive_timestamp_treated_as_utc(self, store):
        s = store.create_submission(_request(), 1, "small", submitted_at=datetime(2025, 1, 1, 9, 0))
        assert s.submitted_at.tzinfo is not None

    def test_default_timestamp_is_now(self, store):
        before = datetime.now(timezone.utc)
        s = store.create_submission(_request(), 1, "small")
        assert before <= s.submitted_at <= datetime.now(timezone.utc)

    def test_stored_record_is_a_snapshot(self, store):
        req = _request()
        s = store.create_submission(req, 1, "small")
        req.cost_calculation.selected_features.append("guardduty")
        assert "guardduty" not in store.get_submission_by_id(s.submission_id).cost_calculation.selected_features

    def test_extra_telemetry_passes_through(self, store):
        s = store.create_submission(_request(experiment_bucket="B"), 1, "small")
        assert s.submission_metrics.model_dump()["experiment_bucket"] == "B"


class TestQueries:
    @pytest.fixture
    def populated(self, store):
        store.create_submission(_request("Acme Partners", "small"), 20_000, "small", submitted_at=NOW - timedelta(days=40))
        store.create_submission(_request("Initech", "medium"), 80_000, "medium", submitted_at=NOW - timedelta(days=10))
        store.create_submission(_request("acme cloud", "small"), 30_000, "small", submitted_at=NOW - timedelta(days=2))
        store.create_submission(_request("Umbrella", "large"), 600_000, "large", submitted_at=NOW - timedelta(hours=1))
        return store

    def test_get_by_id(self, store):
        s = store.create_submission(_request(), 1, "small")
        assert store.get_submission_by_id(s.submission_id) == s
        assert store.get_submission_by_id("missing") is None

    def test_most_recent_first(self, populated):
        names = [s.presales_info.partner_name for s in populated.get_submissions()]
        assert names == ["Umbrella", "acme cloud", "Initech", "Acme Partners"]

    def test_filter_configuration_size(self, populated):
        results = populated.get_submissions(SubmissionFilters(configuration_size="small"))
        assert [s.presales_info.partner_name for s in results] == ["acme cloud", "Acme Partners"]

    def test_filter_partner_case_insensitive_substring(self, populated):
        results = populated.get_submissions(SubmissionFilters(partner_name="ACME"))
        assert len(results) == 2

    def test_filter_date_range_inclusive(self, populated):
        results = populated.get_submissions(
            SubmissionFilters(date_from=NOW - timedelta(days=10), date_to=NOW - timedelta(days=2))
        )
        assert [s.presales_info.partner_name for s in results] == ["acme cloud", "Initech"]

    def test_limit_applies_after_sorting(self, populated):
        results = populated.get_submissions(SubmissionFilters(limit=2))
        assert [s.presales_info.partner_name for s in results] == ["Umbrella", "acme cloud"]

    def test_empty_store(self, store):
        assert store.get_submissions() == []


class TestStats:
    def test_empty_store_zeroed(self, store):
        stats = store.get_submission_stats(now=NOW)
        assert stats.total_submissions == 0
        assert stats.average_estimated_value == 0
        assert stats.top_partners == []
        assert stats.submissions_by_config == {}

    def test_aggregates(self, store):
        store.create_submission(
            _request("Acme", "small", ["aws-organizations", "guardduty"], device="desktop"),
            20_000,
            "small",
            submitted_at=NOW - timedelta(days=3),
        )
        store.create_submission(
            _request("Acme", "medium", ["guardduty"], device="mobile"),
            80_000,
            "medium",
            submitted_at=NOW - timedelta(days=20),
        )
        store.create_submission(
            _request("Initech", "small", ["guardduty", "cloudtrail", "vpc-baseline"]),
            50_000,
            "small",
            submitted_at=NOW - timedelta(days=60),
        )

        stats = store.get_submission_stats(now=NOW)
        assert stats.total_submissions == 3
        assert stats.submissions_by_config == {"small": 2, "medium": 1}
        assert stats.total_estimated_value == 150_000
        assert stats.average_estimated_value == 50_000
        assert stats.top_partners[0].name == "Acme"
        assert stats.top_partners[0].count == 2
        assert stats.submissions_last_week == 1
        assert stats.submissions_last_month == 2
        assert stats.average_feature_count == 2
        assert stats.popular_features[0].feature_id == "guardduty"
        assert stats.popular_features[0].count == 3
        assert stats.device_type_distribution == {"desktop": 1, "mobile": 1, "unknown": 1}
        assert stats.cost_range_distribution == {"10k-50k": 1, "50k-100k": 2}

    def test_top_partners_capped_at_five(self, store):
        for i in range(8):
            store.create_submission(_request(f"Partner {i}"), 1, "small")
        assert len(store.get_submission_stats().top_partners) == 5
