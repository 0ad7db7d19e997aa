# fetchers/prices.py
import os
from typing import Dict

from tenacity import RetryError

from core.errors import SourceUnavailable
from core.logger import get_logger
from core.models import PriceQuote, Source

from . import http

logger = get_logger(__name__)

PRICES_URL = os.getenv("PRICES_URL", "https://prices.runescape.wiki/api/v1/osrs/latest")


def fetch_prices() -> Dict[int, PriceQuote]:
    try:
        payload = http.get_json(PRICES_URL)
    except RetryError as e:
        logger.error("Price fetch failed for %s after retries: %s", PRICES_URL, e)
        raise SourceUnavailable(Source.PRICES.value, "request failed after retries") from e

    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        logger.error("Price response from %s has no 'data' object.", PRICES_URL)
        raise SourceUnavailable(Source.PRICES.value, "unexpected response shape")

    quotes: Dict[int, PriceQuote] = {}
    for key, raw in data.items():
        if not isinstance(raw, dict):
            continue
        try:
            quotes[int(key)] = PriceQuote.from_json(raw)
        except ValueError:
            continue

    logger.info("Prices: loaded %d quotes from %s", len(quotes), PRICES_URL)
    return quotes
