"""Unit tests for the FastAPI app, with the openFDA client overridden."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from fda_insights import __version__
from fda_insights.api.main import app, get_client
from fda_insights.data_sources.base_client import DataSourceError
from fda_insights.data_sources.openfda import OpenFDAClient
from fda_insights.models.model_openfda import AdverseEventReport, AdverseEventsResponse
from fda_insights.services.aggregation import build_drug_summaries


@pytest.fixture
def fda_client(sample_events, sample_drug_info) -> OpenFDAClient:
    client = OpenFDAClient(api_key="")
    client.fetch_adverse_events = AsyncMock(return_value=sample_events)
    client.fetch_drug_info = AsyncMock(return_value=sample_drug_info)
    return client


@pytest.fixture
def api(fda_client):
    async def override():
        yield fda_client

    app.dependency_overrides[get_client] = override
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_check(api):
    response = api.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": __version__}


def test_list_drugs(api, fda_client):
    response = api.get(
        "/drugs", params={"drug_name": "aspirin", "seriousness": ["death", "hospitalization"]}
    )

    assert response.status_code == 200
    body = response.json()
    assert [d["drug_name"] for d in body] == ["Aspirin", "Metformin"]
    assert body[0]["serious_percentage"] == 67
    assert body[0]["drug_slug"] == "aspirin"
    fda_client.fetch_adverse_events.assert_awaited_once_with(
        drug_name="aspirin", seriousness=["death", "hospitalization"], limit=100
    )


def test_list_drugs_rejects_unknown_seriousness(api):
    response = api.get("/drugs", params={"seriousness": "disability"})

    assert response.status_code == 422


def test_list_drugs_empty(api, fda_client):
    fda_client.fetch_adverse_events.return_value = AdverseEventsResponse.empty()

    response = api.get("/drugs", params={"drug_name": "xyzzy"})

    assert response.status_code == 200
    assert response.json() == []


def test_drug_detail_decodes_slug(api, fda_client):
    response = api.get("/drugs/acetylsalicylic%20acid")

    assert response.status_code == 200
    body = response.json()
    assert body["drug_name"] == "acetylsalicylic acid"
    assert body["total_events"] == 3
    assert body["has_data"] is True
    assert body["manufacturers"][0] == {"manufacturer": "Bayer HealthCare LLC.", "count": 3}
    fda_client.fetch_drug_info.assert_awaited_once_with(
        drug_name="acetylsalicylic acid", limit=100
    )


def test_drug_detail_slug_with_encoded_slash(api, fda_client, report_factory, drug_factory):
    report = AdverseEventReport.model_validate(
        report_factory(drugs=[drug_factory(name="SULFAMETHOXAZOLE/TRIMETHOPRIM")])
    )
    [summary] = build_drug_summaries([report])
    assert summary.drug_slug == "sulfamethoxazole%2Ftrimethoprim"

    response = api.get(f"/drugs/{summary.drug_slug}")

    assert response.status_code == 200
    assert response.json()["drug_name"] == "sulfamethoxazole/trimethoprim"
    fda_client.fetch_drug_info.assert_awaited_once_with(
        drug_name="sulfamethoxazole/trimethoprim", limit=100
    )


def test_upstream_error_maps_to_502(api, fda_client):
    fda_client.fetch_adverse_events.side_effect = DataSourceError(
        "openfda", "HTTP 500: boom", status_code=500
    )

    response = api.get("/drugs/aspirin")

    assert response.status_code == 502
    assert response.json()["source"] == "openfda"
    assert response.json()["upstream_status"] == 500
