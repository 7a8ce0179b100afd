"""Pytest configuration and fixtures."""

import pytest

from fda_insights.models.model_openfda import AdverseEventsResponse, DrugInfoResponse


def make_report(
    report_id: str = "10000001",
    receivedate: str = "20240115",
    serious: str = "2",
    drugs: list[dict] | None = None,
    **flags: str,
) -> dict:
    """Build a raw openFDA event report dict."""
    return {
        "safetyreportid": report_id,
        "receivedate": receivedate,
        "serious": serious,
        **flags,
        "patient": {
            "drug": drugs if drugs is not None else [],
            "reaction": [{"reactionmeddrapt": "Nausea", "reactionoutcome": "1"}],
        },
    }


def make_drug(
    name: str = "ASPIRIN",
    route: str | None = "048",
    manufacturers: list[str] | None = None,
    pharm_class: list[str] | None = None,
) -> dict:
    """Build a raw drug entry of an event report."""
    drug: dict = {"drugcharacterization": "1", "medicinalproduct": name}
    if route is not None:
        drug["drugadministrationroute"] = route
    openfda: dict = {}
    if manufacturers is not None:
        openfda["manufacturer_name"] = manufacturers
    if pharm_class is not None:
        openfda["pharm_class_epc"] = pharm_class
    if openfda:
        drug["openfda"] = openfda
    return drug


@pytest.fixture
def sample_events_payload() -> dict:
    """Event search payload with three reports mixing aspirin and metformin."""
    return {
        "meta": {"results": {"total": 3, "limit": 100, "skip": 0}},
        "results": [
            make_report(
                "1",
                "20240115",
                serious="1",
                drugs=[
                    make_drug(
                        "ASPIRIN",
                        "048",
                        manufacturers=["Bayer HealthCare LLC."],
                        pharm_class=["Platelet Aggregation Inhibitor [EPC]"],
                    ),
                    make_drug("METFORMIN", "048", manufacturers=["Teva"]),
                ],
                seriousnessdeath="1",
            ),
            make_report(
                "2",
                "20240203",
                serious="2",
                drugs=[make_drug("Aspirin", "042", manufacturers=["Bayer HealthCare LLC."])],
            ),
            make_report(
                "3",
                "20231230",
                serious="2",
                drugs=[make_drug("aspirin", "048")],
                seriousnesshospitalization="1",
            ),
        ],
    }


@pytest.fixture
def sample_drug_info_payload() -> dict:
    """Drugs@FDA payload with two application records."""
    return {
        "meta": {"results": {"total": 2, "limit": 100, "skip": 0}},
        "results": [
            {
                "application_number": "NDA020307",
                "sponsor_name": "Bayer HealthCare LLC.",
                "products": [
                    {
                        "product_number": "001",
                        "reference_drug": "Yes",
                        "brand_name": "BAYER ASPIRIN",
                        "active_ingredients": [{"name": "ASPIRIN", "strength": "325MG"}],
                        "reference_standard": "No",
                        "dosage_form": "TABLET",
                        "route": "ORAL",
                        "marketing_status": "Over-the-counter",
                        "te_code": "",
                    }
                ],
                "submissions": [
                    {
                        "submission_type": "ORIG",
                        "submission_number": "1",
                        "submission_status": "AP",
                        "submission_status_date": "19980617",
                        "review_priority": "STANDARD",
                    }
                ],
            },
            {
                "application_number": "ANDA070000",
                "sponsor_name": "PERRIGO",
                "products": [],
                "submissions": [],
            },
        ],
    }


@pytest.fixture
def sample_events(sample_events_payload) -> AdverseEventsResponse:
    return AdverseEventsResponse.model_validate(sample_events_payload)


@pytest.fixture
def sample_drug_info(sample_drug_info_payload) -> DrugInfoResponse:
    return DrugInfoResponse.model_validate(sample_drug_info_payload)


@pytest.fixture
def report_factory():
    """Return the raw event report builder."""
    return make_report


@pytest.fixture
def drug_factory():
    """Return the raw event drug builder."""
    return make_drug
