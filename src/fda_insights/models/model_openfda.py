"""Pydantic models for openFDA drug event and Drugs@FDA responses.

Only the fields the dashboard reads are declared; anything else the API
returns is ignored.
"""

from pydantic import BaseModel, model_validator


class _OpenFDAModel(BaseModel):
    """Base model that maps explicit nulls from the API onto field defaults."""

    @model_validator(mode="before")
    @classmethod
    def coerce_nones(cls, values: dict) -> dict:
        if not isinstance(values, dict):
            return values
        for field_name, field_info in cls.model_fields.items():
            if (
                field_name in values
                and values[field_name] is None
                and field_info.default is not None
            ):
                values[field_name] = field_info.get_default(
                    call_default_factory=True
                )
        return values


# ---------------------------------------------------------------------------
# Drug event endpoint (/drug/event.json)
# ---------------------------------------------------------------------------


class OpenFDAFields(_OpenFDAModel):
    """Harmonized `openfda` block attached to each drug in an event report."""

    manufacturer_name: list[str] = []
    brand_name: list[str] = []
    generic_name: list[str] = []
    route: list[str] = []
    pharm_class_epc: list[str] = []


class EventDrug(_OpenFDAModel):
    drugcharacterization: str = ""
    medicinalproduct: str = ""
    drugadministrationroute: str | None = None
    drugindication: str | None = None
    actiondrug: str | None = None
    openfda: OpenFDAFields | None = None


class Reaction(_OpenFDAModel):
    reactionmeddrapt: str = ""
    reactionoutcome: str | None = None


class Patient(_OpenFDAModel):
    drug: list[EventDrug] = []
    reaction: list[Reaction] = []


class AdverseEventReport(_OpenFDAModel):
    """A single FAERS safety report.

    Seriousness flags are kept as the raw strings the API returns ("1" or "2").
    """

    safetyreportid: str = ""
    receivedate: str = ""
    serious: str = ""
    seriousnessdeath: str | None = None
    seriousnesshospitalization: str | None = None
    seriousnesslifethreatening: str | None = None
    patient: Patient = Patient()


# ---------------------------------------------------------------------------
# Drugs@FDA endpoint (/drug/drugsfda.json)
# ---------------------------------------------------------------------------


class ActiveIngredient(_OpenFDAModel):
    name: str = ""
    strength: str = ""


class Product(_OpenFDAModel):
    product_number: str = ""
    reference_drug: str = ""
    brand_name: str = ""
    active_ingredients: list[ActiveIngredient] = []
    reference_standard: str = ""
    dosage_form: str = ""
    route: str = ""
    marketing_status: str = ""
    te_code: str = ""


class Submission(_OpenFDAModel):
    submission_type: str = ""
    submission_number: str = ""
    submission_status: str = ""
    submission_status_date: str = ""
    submission_class_code: str | None = None
    submission_class_code_description: str | None = None
    review_priority: str | None = None


class DrugInfo(_OpenFDAModel):
    """A Drugs@FDA application record: sponsor, products and submission history."""

    submissions: list[Submission] = []
    application_number: str = ""
    sponsor_name: str = ""
    products: list[Product] = []


# ---------------------------------------------------------------------------
# Response envelopes
# ---------------------------------------------------------------------------


class ResultsMeta(_OpenFDAModel):
    total: int = 0
    limit: int = 0
    skip: int = 0


class Meta(_OpenFDAModel):
    results: ResultsMeta = ResultsMeta()


class AdverseEventsResponse(_OpenFDAModel):
    meta: Meta = Meta()
    results: list[AdverseEventReport] = []

    @classmethod
    def empty(cls) -> "AdverseEventsResponse":
        """Response used when openFDA reports no matching records."""
        return cls(meta=Meta(results=ResultsMeta()), results=[])


class DrugInfoResponse(_OpenFDAModel):
    meta: Meta = Meta()
    results: list[DrugInfo] = []

    @classmethod
    def empty(cls) -> "DrugInfoResponse":
        """Response used when openFDA reports no matching records."""
        return cls(meta=Meta(results=ResultsMeta()), results=[])
