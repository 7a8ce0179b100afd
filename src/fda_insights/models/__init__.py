"""Data models for fda_insights."""

from fda_insights.models.model_openfda import (
    AdverseEventReport,
    AdverseEventsResponse,
    DrugInfo,
    DrugInfoResponse,
)
from fda_insights.models.model_summary import (
    DrugDetail,
    DrugSummary,
    ManufacturerCount,
    MonthlyCount,
    SearchFilters,
)

__all__ = [
    "AdverseEventReport",
    "AdverseEventsResponse",
    "DrugInfo",
    "DrugInfoResponse",
    "DrugDetail",
    "DrugSummary",
    "ManufacturerCount",
    "MonthlyCount",
    "SearchFilters",
]
