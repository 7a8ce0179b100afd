"""Project-wide constants."""

from pathlib import Path

# -- Base client defaults ---------------------------------------------------
DEFAULT_TIMEOUT: float = 30.0
DEFAULT_MAX_RETRIES: int = 3

# -- Cache ------------------------------------------------------------------
# Anchored to the project root (two levels above this package's src/ dir) so
# that a single _cache/ directory is used regardless of the working directory.
_PROJECT_ROOT: Path = Path(__file__).parent.parent.parent
DEFAULT_CACHE_DIR: Path = _PROJECT_ROOT / "_cache"
CACHE_TTL: int = 3600  # 1 hour in seconds

# -- openFDA ----------------------------------------------------------------
OPENFDA_BASE_URL: str = "https://api.fda.gov"
OPENFDA_EVENT_URL: str = f"{OPENFDA_BASE_URL}/drug/event.json"
OPENFDA_DRUGSFDA_URL: str = f"{OPENFDA_BASE_URL}/drug/drugsfda.json"
OPENFDA_MAX_LIMIT: int = 1000
OPENFDA_DEFAULT_LIMIT: int = 100

# Client errors that mean "no matching data" rather than a failure
EMPTY_RESULT_STATUS_CODES: frozenset[int] = frozenset({400, 404})

# Seriousness filter value -> openFDA event field
SERIOUSNESS_FIELDS: dict[str, str] = {
    "death": "seriousnessdeath",
    "hospitalization": "seriousnesshospitalization",
    "life-threatening": "seriousnesslifethreatening",
}

# Report-level flags; any of them equal to SERIOUS_FLAG marks the report serious
SERIOUS_FLAG_FIELDS: tuple[str, ...] = (
    "serious",
    "seriousnessdeath",
    "seriousnesshospitalization",
    "seriousnesslifethreatening",
)
SERIOUS_FLAG: str = "1"

# -- Dashboard --------------------------------------------------------------
SEARCH_EVENT_LIMIT: int = 100
DETAIL_EVENT_LIMIT: int = 1000
DETAIL_DRUG_INFO_LIMIT: int = 100
UNKNOWN_PHARM_CLASS: str = "Unknown"

# Display limits
CARD_MAX_ROUTES: int = 3
TOP_MANUFACTURERS: int = 10
MAX_APPLICATIONS_SHOWN: int = 5
MAX_SUBMISSION_RECORDS: int = 3
MAX_SUBMISSIONS_PER_RECORD: int = 5
