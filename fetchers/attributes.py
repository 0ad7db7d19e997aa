# fetchers/attributes.py
import os
from typing import Dict

from tenacity import RetryError

from core.errors import SourceUnavailable
from core.logger import get_logger
from core.models import AttributeRecord, Source

from . import http

logger = get_logger(__name__)

ATTRIBUTES_URL = os.getenv(
    "ATTRIBUTES_URL",
    "https://raw.githubusercontent.com/osrsbox/osrsbox-db/master/docs/items-complete.json",
)


def fetch_attributes() -> Dict[int, AttributeRecord]:
    try:
        data = http.get_json(ATTRIBUTES_URL)
    except RetryError as e:
        logger.error("Attribute fetch failed for %s after retries: %s", ATTRIBUTES_URL, e)
        raise SourceUnavailable(Source.ATTRIBUTES.value, "request failed after retries") from e

    if not isinstance(data, dict):
        logger.error("Attribute response from %s is not an object.", ATTRIBUTES_URL)
        raise SourceUnavailable(Source.ATTRIBUTES.value, "unexpected response shape")

    records: Dict[int, AttributeRecord] = {}
    for key, raw in data.items():
        if not isinstance(raw, dict):
            continue
        try:
            entry_id = int(key)
            records[entry_id] = AttributeRecord.from_json(raw, entry_id=entry_id)
        except (TypeError, ValueError):
            continue

    logger.info("Attributes: loaded %d records from %s", len(records), ATTRIBUTES_URL)
    return records
