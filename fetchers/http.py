# fetchers/http.py
import os
from typing import Any

import requests
from tenacity import retry, stop_after_attempt, wait_exponential_jitter

from core.logger import get_logger

logger = get_logger(__name__)

USER_AGENT = os.getenv("RUNEDATA_USER_AGENT", "RuneData GE Tracker")
FETCH_TIMEOUT = float(os.getenv("FETCH_TIMEOUT", "30"))
FETCH_ATTEMPTS = int(os.getenv("FETCH_ATTEMPTS", "3"))
PROBE_TIMEOUT = float(os.getenv("PROBE_TIMEOUT", "10"))

SESSION = requests.Session()
SESSION.headers.update({"User-Agent": USER_AGENT})


@retry(wait=wait_exponential_jitter(initial=1, max=30), stop=stop_after_attempt(FETCH_ATTEMPTS))
def get_json(url: str) -> Any:
    r = SESSION.get(url, timeout=FETCH_TIMEOUT)
    r.raise_for_status()
    return r.json()


def probe(url: str) -> bool:
    """Cheap reachability check: a HEAD request that must come back ok."""
    try:
        r = SESSION.head(url, timeout=PROBE_TIMEOUT, allow_redirects=True)
    except requests.RequestException as e:
        logger.debug("Probe of %s failed: %s", url, e)
        return False
    return r.ok
