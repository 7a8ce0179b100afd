"""
File-based cache for openFDA responses.

Entries are JSON files keyed by a SHA-256 hash of (url, query params), so
repeated views of the same drug reuse the decoded response body.
"""

import hashlib
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def cache_key(url: str, params: dict[str, Any]) -> str:
    """Return a deterministic hex digest for the given url and params."""
    raw = json.dumps({"url": url, **params}, sort_keys=True, default=str)
    return hashlib.sha256(raw.encode()).hexdigest()


def cache_get(url: str, params: dict[str, Any], cache_dir: Path) -> Any | None:
    """Return cached data if present and unexpired, otherwise None."""
    path = cache_dir / f"{cache_key(url, params)}.json"
    if not path.exists():
        return None
    try:
        entry = json.loads(path.read_text())
        age = (
            datetime.now() - datetime.fromisoformat(entry["cached_at"])
        ).total_seconds()
        if age > entry["ttl"]:
            logger.debug("Cache expired for %s (age=%.0fs)", url, age)
            path.unlink(missing_ok=True)
            return None
        logger.debug("Cache hit for %s", url)
        return entry["data"]
    except (json.JSONDecodeError, KeyError, ValueError):
        path.unlink(missing_ok=True)
        return None


def cache_set(
    url: str,
    params: dict[str, Any],
    data: Any,
    cache_dir: Path,
    ttl: int,
) -> None:
    """Write data to the cache under the given url and params."""
    cache_dir.mkdir(parents=True, exist_ok=True)
    entry = {
        "url": url,
        "data": data,
        "cached_at": datetime.now().isoformat(),
        "ttl": ttl,
    }
    (cache_dir / f"{cache_key(url, params)}.json").write_text(
        json.dumps(entry, default=str)
    )
