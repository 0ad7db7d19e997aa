# fetchers/catalog.py
import os
from typing import List

from tenacity import RetryError

from core.errors import SourceUnavailable
from core.logger import get_logger
from core.models import CatalogEntry, Source

from . import http

logger = get_logger(__name__)

CATALOG_URL = os.getenv("CATALOG_URL", "https://prices.runescape.wiki/api/v1/osrs/mapping")


def fetch_catalog() -> List[CatalogEntry]:
    """
    Fetch the item mapping, returning CatalogEntry records in provider order.
    Rows without a usable id are skipped; anything else wrong with the
    response raises SourceUnavailable.
    """
    try:
        data = http.get_json(CATALOG_URL)
    except RetryError as e:
        logger.error("Catalog fetch failed for %s after retries: %s", CATALOG_URL, e)
        raise SourceUnavailable(Source.CATALOG.value, "request failed after retries") from e

    if not isinstance(data, list):
        logger.error("Catalog response from %s is not a list: %s", CATALOG_URL, type(data).__name__)
        raise SourceUnavailable(Source.CATALOG.value, "unexpected response shape")

    entries: List[CatalogEntry] = []
    skipped = 0
    for raw in data:
        try:
            entries.append(CatalogEntry.from_json(raw))
        except (KeyError, TypeError, ValueError, AttributeError):
            skipped += 1
    if skipped:
        logger.warning("Catalog: skipped %d malformed rows.", skipped)

    logger.info("Catalog: loaded %d entries from %s", len(entries), CATALOG_URL)
    return entries
