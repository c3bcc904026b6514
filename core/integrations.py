"""External service integrations."""

from __future__ import annotations

import logging
import re
from typing import Optional

import requests

from core.config import get_settings

logger = logging.getLogger(__name__)

# Used when the lookup service is unreachable or does not know the ZIP.
LOCAL_ZIP_TABLE = {
    "02108": "Boston, MA",
    "10001": "New York, NY",
    "30303": "Atlanta, GA",
    "33101": "Miami, FL",
    "60601": "Chicago, IL",
    "75201": "Dallas, TX",
    "80202": "Denver, CO",
    "90210": "Beverly Hills, CA",
    "94105": "San Francisco, CA",
    "98101": "Seattle, WA",
}

_ZIP = re.compile(r"\d{5}")


def lookup_postal_code(zip_code, session=None) -> Optional[str]:
    """Resolve a US ZIP code to ``"City, ST"``.

    Returns ``None`` for anything that is not a five digit ZIP, or when
    neither the lookup service nor the local table knows it.
    """
    z = str(zip_code or "").strip()
    if not _ZIP.fullmatch(z):
        return None
    settings = get_settings()
    http = session or requests
    try:
        resp = http.get(settings.zip_lookup_url.format(zip=z), timeout=settings.zip_lookup_timeout)
        resp.raise_for_status()
        places = resp.json().get("places") or []
    except (requests.RequestException, ValueError) as exc:
        logger.info("ZIP lookup for %s failed (%s); using local table", z, exc)
        return LOCAL_ZIP_TABLE.get(z)
    if not places:
        return LOCAL_ZIP_TABLE.get(z)
    place = places[0]
    city = place.get("place name")
    state = place.get("state abbreviation")
    if not city or not state:
        return LOCAL_ZIP_TABLE.get(z)
    return f"{city}, {state}"
