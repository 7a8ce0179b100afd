"""
Dashboard queries: fetch from openFDA, then reduce with the aggregation functions.

These are the two views the dashboard offers:
  1. search_drugs    — drug cards for a search
  2. get_drug_detail — per-drug analytics
"""

import asyncio
import logging

from fda_insights.constants import (
    DETAIL_DRUG_INFO_LIMIT,
    DETAIL_EVENT_LIMIT,
    SEARCH_EVENT_LIMIT,
)
from fda_insights.data_sources.openfda import OpenFDAClient
from fda_insights.models.model_summary import DrugDetail, DrugSummary, SearchFilters
from fda_insights.services.aggregation import (
    build_drug_summaries,
    count_serious,
    get_manufacturer_data,
    get_time_series_data,
    merge_manufacturer_counts,
)

logger = logging.getLogger(__name__)


async def search_drugs(client: OpenFDAClient, filters: SearchFilters) -> list[DrugSummary]:
    """Return one summary per drug name found in the matching reports."""
    response = await client.fetch_adverse_events(
        drug_name=filters.drug_name or None,
        seriousness=filters.seriousness or None,
        limit=SEARCH_EVENT_LIMIT,
    )
    summaries = build_drug_summaries(response.results)
    logger.info(
        "search_drugs drug_name=%r reports=%d drugs=%d",
        filters.drug_name,
        len(response.results),
        len(summaries),
    )
    return summaries


async def get_drug_detail(client: OpenFDAClient, drug_name: str) -> DrugDetail:
    """Build the analytics view for one drug.

    The event and Drugs@FDA queries are independent and run concurrently.
    """
    events, drug_info = await asyncio.gather(
        client.fetch_adverse_events(drug_name=drug_name, limit=DETAIL_EVENT_LIMIT),
        client.fetch_drug_info(drug_name=drug_name, limit=DETAIL_DRUG_INFO_LIMIT),
    )
    reports = events.results

    manufacturers = merge_manufacturer_counts(
        get_manufacturer_data(reports), drug_info.results
    )
    detail = DrugDetail(
        drug_name=drug_name,
        total_events=len(reports),
        serious_events=count_serious(reports),
        manufacturers=manufacturers,
        time_series=get_time_series_data(reports),
        drug_info=drug_info.results,
    )
    logger.info(
        "get_drug_detail drug_name=%r reports=%d applications=%d",
        drug_name,
        detail.total_events,
        len(detail.drug_info),
    )
    return detail
