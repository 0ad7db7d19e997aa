# core/aggregator.py
import asyncio
import inspect
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional

from .catalog import CatalogIndex, EntryId, KeyedTable, sort_entries
from .errors import LoadFailed, SourceUnavailable
from .health import SourceHealthTracker
from .logger import get_logger
from .models import AttributeRecord, MarketSnapshot, PriceQuote, Source
from .view import ItemView

logger = get_logger(__name__)

Fetcher = Callable[[], Any]


class DataAggregator:
    """
    Loads the three sources concurrently and owns the resulting state.

    The catalog is required; prices and attributes are enrichments and a
    failure there only empties their table. Every load is tagged with a
    generation number and its results are committed only if no newer load
    has committed already, so a slow superseded load cannot overwrite fresher
    data. Status reports are never discarded.
    """

    def __init__(
        self,
        fetchers: Mapping[Source, Fetcher],
        tracker: Optional[SourceHealthTracker] = None,
        catalog: Optional[CatalogIndex] = None,
        prices: Optional[KeyedTable[PriceQuote]] = None,
        attributes: Optional[KeyedTable[AttributeRecord]] = None,
    ):
        missing = [s.value for s in Source if s not in fetchers]
        if missing:
            raise ValueError(f"No fetcher registered for: {', '.join(missing)}")
        self.fetchers = dict(fetchers)
        self.tracker = tracker or SourceHealthTracker()
        self.catalog = catalog if catalog is not None else CatalogIndex()
        self.prices: KeyedTable[PriceQuote] = prices if prices is not None else KeyedTable()
        self.attributes: KeyedTable[AttributeRecord] = (
            attributes if attributes is not None else KeyedTable()
        )
        self._issued = 0
        self._committed = 0
        self.loaded_at: Optional[datetime] = None

    @property
    def committed_generation(self) -> int:
        return self._committed

    async def _fetch(self, source: Source) -> Any:
        fetcher = self.fetchers[source]
        try:
            if inspect.iscoroutinefunction(fetcher):
                payload = await fetcher()
            else:
                payload = await asyncio.to_thread(fetcher)
        except SourceUnavailable:
            self.tracker.report(source, False)
            raise
        except Exception as e:
            logger.exception("Unexpected error fetching %s: %s", source.value, e)
            self.tracker.report(source, False)
            raise SourceUnavailable(source.value, str(e)) from e
        self.tracker.report(source, True)
        return payload

    async def load(self) -> MarketSnapshot:
        self._issued += 1
        generation = self._issued
        logger.info("Load %d: fetching %s.", generation, ", ".join(s.value for s in Source))

        order = [Source.CATALOG, Source.PRICES, Source.ATTRIBUTES]
        results = await asyncio.gather(*(self._fetch(s) for s in order), return_exceptions=True)
        outcome: Dict[Source, Any] = dict(zip(order, results))

        for source, result in outcome.items():
            if isinstance(result, BaseException) and not isinstance(result, SourceUnavailable):
                raise result

        catalog = outcome[Source.CATALOG]
        if isinstance(catalog, SourceUnavailable):
            logger.error("Load %d failed: %s", generation, catalog)
            raise LoadFailed() from catalog

        enrichments: Dict[Source, Dict[int, Any]] = {}
        for source in (Source.PRICES, Source.ATTRIBUTES):
            result = outcome[source]
            if isinstance(result, SourceUnavailable):
                logger.warning("Load %d continuing without %s: %s", generation, source.value, result)
                enrichments[source] = {}
            else:
                enrichments[source] = dict(result)

        snapshot = MarketSnapshot(
            generation=generation,
            entries=tuple(sort_entries(catalog)),
            prices=enrichments[Source.PRICES],
            attributes=enrichments[Source.ATTRIBUTES],
            loaded_at=datetime.now(tz=timezone.utc),
            committed=generation > self._committed,
        )

        if not snapshot.committed:
            logger.warning(
                "Load %d finished after load %d was committed; discarding its results.",
                generation, self._committed,
            )
            return snapshot

        self.catalog.replace(snapshot.entries)
        self.prices.replace(snapshot.prices)
        self.attributes.replace(snapshot.attributes)
        self._committed = generation
        self.loaded_at = snapshot.loaded_at
        logger.info(
            "Load %d committed: %d entries, %d quotes, %d attribute records.",
            generation, len(snapshot.entries), len(snapshot.prices), len(snapshot.attributes),
        )
        return snapshot

    def item_view(self, entry_id: EntryId) -> Optional[ItemView]:
        entry = self.catalog.get(entry_id)
        if entry is None:
            return None
        return ItemView(
            entry=entry,
            quote=self.prices.get(entry.entry_id),
            attributes=self.attributes.get(entry.entry_id),
        )
