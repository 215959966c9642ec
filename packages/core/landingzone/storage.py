"""In-memory submission store with filtered listing and reporting statistics."""

from __future__ import annotations

import threading
import uuid
from collections import Counter
from datetime import datetime, timedelta, timezone

from landingzone.spec import (
    FeatureCount,
    PartnerCount,
    Submission,
    SubmissionFilters,
    SubmissionRequest,
    SubmissionStats,
)

_TOP_PARTNERS = 5

# (upper bound exclusive, label)
_COST_RANGES = (
    (10_000, "under-10k"),
    (50_000, "10k-50k"),
    (100_000, "50k-100k"),
    (500_000, "100k-500k"),
)


def cost_range(total_cost: float) -> str:
    for bound, label in _COST_RANGES:
        if total_cost < bound:
            return label
    return "over-500k"


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class MemStorage:
    """Submission store keyed by submission ID. Process-local, not persistent."""

    def __init__(self):
        self._submissions: dict[str, Submission] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._submissions)

    def create_submission(
        self,
        request: SubmissionRequest,
        total_estimated_cost: float,
        configuration_size: str,
        submitted_at: datetime | None = None,
    ) -> Submission:
        """Store a snapshot of the request plus the cost computed at submission time."""
        submission_id = str(uuid.uuid4())
        metrics = request.submission_metrics.model_copy(
            update={
                "submission_id": submission_id,
                "submitted_at": _as_utc(submitted_at) if submitted_at else datetime.now(timezone.utc),
                "configuration_size": configuration_size,
                "total_features_selected": len(request.cost_calculation.selected_features),
                "total_estimated_cost": total_estimated_cost,
                "cost_range": request.submission_metrics.cost_range or cost_range(total_estimated_cost),
            }
        )
        submission = Submission(
            presales_info=request.presales_info.model_copy(deep=True),
            cost_calculation=request.cost_calculation.model_copy(deep=True),
            submission_metrics=metrics,
        )
        with self._lock:
            self._submissions[submission_id] = submission
        return submission

    def get_submission_by_id(self, submission_id: str) -> Submission | None:
        return self._submissions.get(submission_id)

    def get_submissions(self, filters: SubmissionFilters | None = None) -> list[Submission]:
        """Stored submissions, most recent first."""
        with self._lock:
            submissions = list(self._submissions.values())

        if filters:
            if filters.configuration_size:
                submissions = [
                    s for s in submissions if s.submission_metrics.configuration_size == filters.configuration_size
                ]
            if filters.partner_name:
                needle = filters.partner_name.lower()
                submissions = [s for s in submissions if needle in s.presales_info.partner_name.lower()]
            if filters.date_from:
                date_from = _as_utc(filters.date_from)
                submissions = [s for s in submissions if s.submitted_at >= date_from]
            if filters.date_to:
                date_to = _as_utc(filters.date_to)
                submissions = [s for s in submissions if s.submitted_at <= date_to]

        submissions.sort(key=lambda s: s.submitted_at, reverse=True)

        if filters and filters.limit:
            submissions = submissions[: filters.limit]
        return submissions

    def get_submission_stats(self, now: datetime | None = None) -> SubmissionStats:
        with self._lock:
            submissions = list(self._submissions.values())

        total = len(submissions)
        if total == 0:
            return SubmissionStats()

        now = _as_utc(now) if now else datetime.now(timezone.utc)
        one_week_ago = now - timedelta(days=7)
        one_month_ago = now - timedelta(days=30)

        by_config: Counter[str] = Counter()
        partners: Counter[str] = Counter()
        features: Counter[str] = Counter()
        devices: Counter[str] = Counter()
        ranges: Counter[str] = Counter()
        total_value = 0.0
        total_features = 0

        for s in submissions:
            m = s.submission_metrics
            by_config[m.configuration_size or "unknown"] += 1
            partners[s.presales_info.partner_name] += 1
            features.update(set(s.cost_calculation.selected_features))
            devices[m.device_type or "unknown"] += 1
            ranges[m.cost_range or cost_range(m.total_estimated_cost or 0.0)] += 1
            total_value += m.total_estimated_cost or 0.0
            total_features += m.total_features_selected or 0

        return SubmissionStats(
            total_submissions=total,
            submissions_by_config=dict(by_config),
            total_estimated_value=total_value,
            average_estimated_value=total_value / total,
            top_partners=[PartnerCount(name=n, count=c) for n, c in partners.most_common(_TOP_PARTNERS)],
            submissions_last_week=sum(1 for s in submissions if s.submitted_at >= one_week_ago),
            submissions_last_month=sum(1 for s in submissions if s.submitted_at >= one_month_ago),
            average_feature_count=total_features / total,
            popular_features=[FeatureCount(feature_id=f, count=c) for f, c in features.most_common()],
            device_type_distribution=dict(devices),
            cost_range_distribution=dict(ranges),
        )
