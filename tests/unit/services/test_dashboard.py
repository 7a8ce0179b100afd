"""Unit tests for services/dashboard with a mocked OpenFDAClient."""

from unittest.mock import AsyncMock

import pytest

from fda_insights.data_sources.base_client import DataSourceError
from fda_insights.data_sources.openfda import OpenFDAClient
from fda_insights.models.model_openfda import AdverseEventsResponse, DrugInfoResponse
from fda_insights.models.model_summary import SearchFilters
from fda_insights.services.dashboard import get_drug_detail, search_drugs


@pytest.fixture
def mock_client(sample_events, sample_drug_info) -> OpenFDAClient:
    client = OpenFDAClient(api_key="")
    client.fetch_adverse_events = AsyncMock(return_value=sample_events)
    client.fetch_drug_info = AsyncMock(return_value=sample_drug_info)
    return client


@pytest.mark.asyncio
async def test_search_drugs_builds_summaries(mock_client):
    filters = SearchFilters(drug_name="aspirin", seriousness=["death"])

    summaries = await search_drugs(mock_client, filters)

    assert [s.drug_name for s in summaries] == ["Aspirin", "Metformin"]
    mock_client.fetch_adverse_events.assert_awaited_once_with(
        drug_name="aspirin", seriousness=["death"], limit=100
    )


@pytest.mark.asyncio
async def test_search_drugs_without_filters(mock_client):
    await search_drugs(mock_client, SearchFilters())

    mock_client.fetch_adverse_events.assert_awaited_once_with(
        drug_name=None, seriousness=None, limit=100
    )


@pytest.mark.asyncio
async def test_search_drugs_empty(mock_client):
    mock_client.fetch_adverse_events.return_value = AdverseEventsResponse.empty()

    assert await search_drugs(mock_client, SearchFilters(drug_name="xyzzy")) == []


@pytest.mark.asyncio
async def test_get_drug_detail(mock_client):
    detail = await get_drug_detail(mock_client, "aspirin")

    assert detail.drug_name == "aspirin"
    assert detail.total_events == 3
    assert detail.serious_events == 2
    assert detail.serious_percentage == 67
    assert detail.has_data is True
    assert [(m.manufacturer, m.count) for m in detail.manufacturers] == [
        ("Bayer HealthCare LLC.", 3),
        ("Teva", 1),
        ("PERRIGO", 1),
    ]
    assert [p.month for p in detail.time_series] == ["2023-12", "2024-01", "2024-02"]
    assert len(detail.drug_info) == 2

    mock_client.fetch_adverse_events.assert_awaited_once_with(drug_name="aspirin", limit=1000)
    mock_client.fetch_drug_info.assert_awaited_once_with(drug_name="aspirin", limit=100)


@pytest.mark.asyncio
async def test_get_drug_detail_no_events_keeps_sponsors(mock_client):
    mock_client.fetch_adverse_events.return_value = AdverseEventsResponse.empty()

    detail = await get_drug_detail(mock_client, "aspirin")

    assert detail.has_data is False
    assert detail.serious_percentage == 0
    assert detail.time_series == []
    assert [m.manufacturer for m in detail.manufacturers] == [
        "Bayer HealthCare LLC.",
        "PERRIGO",
    ]


@pytest.mark.asyncio
async def test_get_drug_detail_no_data_at_all(mock_client):
    mock_client.fetch_adverse_events.return_value = AdverseEventsResponse.empty()
    mock_client.fetch_drug_info.return_value = DrugInfoResponse.empty()

    detail = await get_drug_detail(mock_client, "xyzzy")

    assert detail.has_data is False
    assert detail.manufacturers == []
    assert detail.drug_info == []


@pytest.mark.asyncio
async def test_get_drug_detail_propagates_errors(mock_client):
    mock_client.fetch_drug_info.side_effect = DataSourceError(
        "openfda", "HTTP 500: boom", status_code=500
    )

    with pytest.raises(DataSourceError):
        await get_drug_detail(mock_client, "aspirin")
