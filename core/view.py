# core/view.py
from dataclasses import dataclass
from typing import Optional

from .models import AttributeRecord, CatalogEntry, PriceQuote


@dataclass(frozen=True)
class ItemView:
    """
    Merged record for one catalog entry. The side tables decorate the entry;
    a missing quote or attribute record is a normal state, not an error.
    """
    entry: CatalogEntry
    quote: Optional[PriceQuote] = None
    attributes: Optional[AttributeRecord] = None

    @property
    def has_market_data(self) -> bool:
        if self.quote is None:
            return False
        return (
            self.quote.instant_buy_price is not None
            or self.quote.instant_sell_price is not None
        )

    @property
    def current_price(self) -> Optional[int]:
        if not self.has_market_data:
            return None
        sides = [
            p for p in (self.quote.instant_buy_price, self.quote.instant_sell_price)
            if p is not None
        ]
        return max(sides)

    @property
    def margin(self) -> Optional[int]:
        if self.quote is None:
            return None
        buy = self.quote.instant_buy_price
        sell = self.quote.instant_sell_price
        if buy is None or sell is None:
            return None
        return buy - sell

    @property
    def roi(self) -> Optional[float]:
        margin = self.margin
        if margin is None:
            return None
        sell = self.quote.instant_sell_price
        # A zero sell price gives no meaningful ratio.
        return margin / sell * 100 if sell > 0 else 0.0

    @property
    def has_combat_stats(self) -> bool:
        return self.attributes is not None and self.attributes.has_combat_stats
