import math
from urllib.parse import quote, unquote

# Characters encodeURIComponent leaves untouched, so slugs match browser links
SLUG_SAFE_CHARS = "-_.!~*'()"


def drug_key(name: str) -> str:
    return name.lower()


def display_name(key: str) -> str:
    """Upper-case the first character only: "acetylsalicylic acid" -> "Acetylsalicylic acid"."""
    return key[:1].upper() + key[1:]


def drug_slug(name: str) -> str:
    return quote(name, safe=SLUG_SAFE_CHARS)


def drug_name_from_slug(slug: str) -> str:
    return unquote(slug)


def serious_percentage(serious: int, total: int) -> int:
    """Whole-number share of serious events, rounding halves up."""
    if total <= 0:
        return 0
    return math.floor(serious / total * 100 + 0.5)
