import pytest

from core.errors import SourceUnavailable
from core.models import AttributeRecord, CatalogEntry, EquipmentStats, PriceQuote, Source, WeaponStats


def entry(entry_id, name, **kwargs):
    return CatalogEntry(entry_id=entry_id, display_name=name, **kwargs)


@pytest.fixture
def axe_catalog():
    return [entry(1, "Rune axe"), entry(2, "Rune scimitar"), entry(3, "Axe")]


@pytest.fixture
def catalog_entries():
    return [
        entry(1, "Rune axe", flavor_text="A powerful axe.", members_only=False,
              low_alch_value=2560, high_alch_value=3840, purchase_limit=40,
              store_value=6400, icon_key="Rune axe.png"),
        entry(2, "Rune scimitar", store_value=25600, purchase_limit=70),
        entry(3, "Abyssal whip", members_only=True, store_value=120001,
              high_alch_value=72000, low_alch_value=48000, purchase_limit=70),
    ]


@pytest.fixture
def price_rows():
    return {
        1: PriceQuote(instant_buy_price=7300, instant_buy_timestamp=1700000000,
                      instant_sell_price=7100, instant_sell_timestamp=1700000100),
        3: PriceQuote(instant_buy_price=1500000, instant_buy_timestamp=1700000000,
                      instant_sell_price=1450000, instant_sell_timestamp=1700000050),
    }


@pytest.fixture
def attribute_rows():
    return {
        3: AttributeRecord(
            entry_id=3,
            equipment=EquipmentStats(attack_slash=82, melee_strength=82, slot="weapon",
                                     requirements={"attack": 70}),
            weapon=WeaponStats(attack_speed=4, weapon_type="whip"),
            weight=0.453,
        ),
    }


def failing(source):
    def fetch():
        raise SourceUnavailable(source.value, "boom")
    return fetch


@pytest.fixture
def make_fetchers(catalog_entries, price_rows, attribute_rows):
    """Build a fetcher mapping; pass a Source to `fail` to make that one raise."""

    def build(*fail):
        fetchers = {
            Source.CATALOG: lambda: list(catalog_entries),
            Source.PRICES: lambda: dict(price_rows),
            Source.ATTRIBUTES: lambda: dict(attribute_rows),
        }
        for source in fail:
            fetchers[source] = failing(source)
        return fetchers

    return build
