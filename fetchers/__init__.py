from core.models import Source

from . import attributes
from . import catalog
from . import prices
from .http import probe

FETCHERS = {
    Source.CATALOG: catalog.fetch_catalog,
    Source.PRICES: prices.fetch_prices,
    Source.ATTRIBUTES: attributes.fetch_attributes,
}

PROBE_URLS = {
    Source.CATALOG: catalog.CATALOG_URL,
    Source.PRICES: prices.PRICES_URL,
    Source.ATTRIBUTES: attributes.ATTRIBUTES_URL,
}

__all__ = ["FETCHERS", "PROBE_URLS", "probe"]
