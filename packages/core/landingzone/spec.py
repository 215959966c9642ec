"""Domain models for landing-zone estimates.

Tiers and features are the static catalog; CostBreakdown is what the cost
engine hands back on every call; the Submission* models are what the
submission boundary stores and reports on.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TierSize = Literal["very-small", "small", "medium", "large"]
FeatureCategory = Literal["foundation", "security", "networking", "automation", "monitoring"]

TIER_SIZES: tuple[str, ...] = ("very-small", "small", "medium", "large")


class BasePricing(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_infra_cost_per_month: float = Field(ge=0)
    base_professional_services_cost: float = Field(ge=0)
    managed_services_cost_per_unit: float = Field(ge=0)
    managed_services_cost_per_tb_storage: float = Field(ge=0)


class Tier(BaseModel):
    """A landing-zone size bracket with its own base pricing and feature set."""

    model_config = ConfigDict(frozen=True)

    size: TierSize
    name: str
    description: str = ""
    account_structure: str = ""
    organizational_structure: str = ""
    default_compute_units: int = Field(ge=0)
    default_storage_tb: int = Field(ge=0)
    base_infra_cost_per_month: float = Field(ge=0)
    base_professional_services_cost: float = Field(ge=0)
    managed_services_cost_per_unit: float = Field(ge=0)
    managed_services_cost_per_tb_storage: float = Field(ge=0)
    available_features: list[str] = Field(default_factory=list)
    mandatory_features: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _mandatory_subset_of_available(self) -> Tier:
        missing = [f for f in self.mandatory_features if f not in self.available_features]
        if missing:
            raise ValueError(f"Tier {self.size!r} marks unavailable features as mandatory: {', '.join(missing)}")
        return self


class Feature(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    aws_definition: str = ""
    category: FeatureCategory
    mandatory: bool = False
    infra_cost_impact: float = Field(default=0.0, ge=0)  # monthly
    professional_services_cost_impact: float = Field(default=0.0, ge=0)  # one-time
    available_in_sizes: list[TierSize] = Field(default_factory=list)

    def is_available_in(self, size: str) -> bool:
        return size in self.available_in_sizes


class FeatureCategoryInfo(BaseModel):
    id: FeatureCategory
    name: str
    description: str = ""


class FeaturePricing(BaseModel):
    model_config = ConfigDict(frozen=True)

    infra_cost_impact: float = 0.0
    professional_services_cost_impact: float = 0.0
    source: Literal["static", "live"] = "static"


class MigrationPricing(BaseModel):
    model_config = ConfigDict(frozen=True)

    cost_per_unit: float = Field(default=300.0, ge=0)
    description: str = "One-time migration cost per compute unit"


class AdditionalCost(BaseModel):
    """Ad hoc one-time line item added to professional services."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    description: str
    amount: float = Field(ge=0)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Description is required")
        return v


class CostBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    tier: str
    currency: str = "USD"

    # Infrastructure (monthly)
    base_infrastructure_cost: float
    features_infrastructure_cost: float
    total_infrastructure_cost: float

    # Professional services (one-time)
    base_professional_services_cost: float
    features_professional_services_cost: float
    additional_costs_total: float
    total_professional_services_cost: float

    # Migration (one-time)
    migration_unit_count: float
    migration_cost_per_unit: float
    migration_cost: float

    # Managed services (monthly)
    managed_services_compute_cost: float
    managed_services_storage_cost: float
    total_managed_services_cost: float

    total_monthly_cost: float
    total_first_year_cost: float


class EstimateReport(BaseModel):
    """Everything an exporter needs to render one estimate."""

    tier: Tier
    features: list[Feature] = Field(default_factory=list)
    feature_pricing: dict[str, FeaturePricing] = Field(default_factory=dict)
    compute_units: float
    storage_tb: float
    additional_costs: list[AdditionalCost] = Field(default_factory=list)
    breakdown: CostBreakdown
    pricing_version: dict[str, str] = Field(default_factory=dict)

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(indent=indent)


# --- Submissions ---


class PresalesInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    presales_engineer_email: str = Field(..., min_length=3)
    partner_name: str = Field(..., min_length=1)
    end_customer_name: str = Field(..., min_length=1)
    opportunity_id: str | None = None
    notes: str = ""


class CostSelection(BaseModel):
    selected_config: str
    selected_features: list[str] = Field(default_factory=list)
    custom_compute_units: float = Field(ge=0)
    custom_storage_tb: float = Field(ge=0)
    additional_costs: list[AdditionalCost] = Field(default_factory=list)


class SubmissionMetrics(BaseModel):
    """Client-side behavioral telemetry. Stored as-is, never interpreted."""

    model_config = ConfigDict(extra="allow")

    session_id: str | None = None
    time_spent_on_form: float | None = None
    page_load_time: float | None = None
    configuration_changes: int = 0
    feature_toggle_count: int = 0
    form_field_interactions: int = 0
    cost_calculator_views: int = 0
    user_agent: str | None = None
    timezone: str | None = None
    language: str | None = None
    screen_resolution: str | None = None
    device_type: Literal["desktop", "tablet", "mobile", "unknown"] | None = None
    referral_source: str | None = None
    is_first_time_visitor: bool | None = None
    previous_sessions_count: int | None = None
    form_completion_rate: float | None = None
    abandonment_point: str | None = None
    validation_errors: list[str] = Field(default_factory=list)
    selected_feature_categories: list[str] = Field(default_factory=list)
    mandatory_features_accepted: int = 0
    optional_features_added: int = 0
    cost_range: str | None = None
    cost_per_unit_calculated: float | None = None
    cost_per_tb_calculated: float | None = None

    # Filled in by the server on submission
    submission_id: str | None = None
    submitted_at: datetime | None = None
    configuration_size: str | None = None
    total_features_selected: int | None = None
    total_estimated_cost: float | None = None


class SubmissionRequest(BaseModel):
    presales_info: PresalesInfo
    cost_calculation: CostSelection
    submission_metrics: SubmissionMetrics = Field(default_factory=SubmissionMetrics)


class Submission(BaseModel):
    presales_info: PresalesInfo
    cost_calculation: CostSelection
    submission_metrics: SubmissionMetrics

    @property
    def submission_id(self) -> str:
        return self.submission_metrics.submission_id or ""

    @property
    def submitted_at(self) -> datetime:
        return self.submission_metrics.submitted_at  # type: ignore[return-value]


class SubmissionFilters(BaseModel):
    configuration_size: str | None = None
    partner_name: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    limit: int | None = Field(default=None, ge=1)


class PartnerCount(BaseModel):
    name: str
    count: int


class FeatureCount(BaseModel):
    feature_id: str
    count: int


class SubmissionStats(BaseModel):
    total_submissions: int = 0
    submissions_by_config: dict[str, int] = Field(default_factory=dict)
    total_estimated_value: float = 0.0
    average_estimated_value: float = 0.0
    top_partners: list[PartnerCount] = Field(default_factory=list)
    submissions_last_week: int = 0
    submissions_last_month: int = 0
    average_feature_count: float = 0.0
    popular_features: list[FeatureCount] = Field(default_factory=list)
    device_type_distribution: dict[str, int] = Field(default_factory=dict)
    cost_range_distribution: dict[str, int] = Field(default_factory=dict)
