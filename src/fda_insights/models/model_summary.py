"""Pydantic models for the aggregated views shown on the dashboard."""

from pydantic import BaseModel, Field, computed_field, field_validator

from fda_insights.constants import SERIOUSNESS_FIELDS, UNKNOWN_PHARM_CLASS
from fda_insights.helpers.drug_helpers import serious_percentage
from fda_insights.models.model_openfda import DrugInfo


class SearchFilters(BaseModel):
    """Search criteria for the drug listing.

    Seriousness values outside SERIOUSNESS_FIELDS are rejected.
    """

    drug_name: str = ""
    seriousness: list[str] = []

    @field_validator("seriousness")
    @classmethod
    def known_seriousness(cls, values: list[str]) -> list[str]:
        unknown = [v for v in values if v not in SERIOUSNESS_FIELDS]
        if unknown:
            raise ValueError(
                f"Unknown seriousness filter(s) {unknown}; "
                f"expected any of {sorted(SERIOUSNESS_FIELDS)}"
            )
        return values


class EventCounts(BaseModel):
    total: int = 0
    serious: int = 0


class DrugSummary(BaseModel):
    """One card on the search page: event totals and metadata for a drug name."""

    drug_name: str
    total_events: int
    serious_events: int
    administration_routes: list[str] = []
    pharmacological_class: str = UNKNOWN_PHARM_CLASS
    drug_slug: str

    @computed_field
    @property
    def serious_percentage(self) -> int:
        return serious_percentage(self.serious_events, self.total_events)


class ManufacturerCount(BaseModel):
    manufacturer: str
    count: int


class MonthlyCount(BaseModel):
    month: str  # "YYYY-MM"
    count: int


class DrugDetail(BaseModel):
    """Per-drug analytics: headline stats, manufacturer ranking and monthly trend."""

    drug_name: str
    total_events: int = 0
    serious_events: int = 0
    manufacturers: list[ManufacturerCount] = []
    time_series: list[MonthlyCount] = []
    drug_info: list[DrugInfo] = Field(default_factory=list)

    @computed_field
    @property
    def serious_percentage(self) -> int:
        return serious_percentage(self.serious_events, self.total_events)

    @computed_field
    @property
    def has_data(self) -> bool:
        return self.total_events > 0
