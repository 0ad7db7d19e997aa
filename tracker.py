import asyncio
import locale
import os
import sys
from typing import List, Optional

from core.aggregator import DataAggregator
from core.errors import LoadFailed
from core.health import HealthProber, SourceHealthTracker
from core.logger import get_logger
from core.models import CatalogEntry
from core.report import build_item_text, build_results_text, build_status_text
from fetchers import FETCHERS, PROBE_URLS, probe

logger = get_logger(__name__)

MODE = os.getenv("MODE", "").lower()  # "once" or "interactive"


def render_results(aggregator: DataAggregator, query: str) -> tuple[str, List[CatalogEntry]]:
    results = aggregator.catalog.search(query)
    views = {}
    for entry in results:
        view = aggregator.item_view(entry.entry_id)
        if view is not None:
            views[entry.entry_id] = view
    return build_results_text(query, results, views), results


def render_item(aggregator: DataAggregator, entry: CatalogEntry) -> str:
    view = aggregator.item_view(entry.entry_id)
    if view is None:
        return f"Item #{entry.entry_id} is no longer in the catalog.\n"
    return build_item_text(view)


async def run_once(query: str, aggregator: Optional[DataAggregator] = None) -> int:
    aggregator = aggregator or DataAggregator(FETCHERS, SourceHealthTracker())
    try:
        await aggregator.load()
    except LoadFailed as e:
        logger.error("Load failed: %s", e.__cause__ or e)
        print(e.message)
        return 1
    finally:
        print(build_status_text(aggregator.tracker.statuses()), end="")

    text, results = render_results(aggregator, query)
    print(text, end="")
    if results:
        print()
        print(render_item(aggregator, results[0]), end="")
    return 0


async def _read_line(prompt: str) -> Optional[str]:
    try:
        return await asyncio.to_thread(input, prompt)
    except EOFError:
        return None


async def run_interactive(
    aggregator: Optional[DataAggregator] = None,
    prober: Optional[HealthProber] = None,
) -> int:
    tracker = aggregator.tracker if aggregator else SourceHealthTracker()
    aggregator = aggregator or DataAggregator(FETCHERS, tracker)
    prober = prober or HealthProber(tracker, PROBE_URLS, probe)

    prober.start()
    loaded = False
    last_results: List[CatalogEntry] = []
    try:
        try:
            await aggregator.load()
            loaded = True
        except LoadFailed as e:
            print(f"{e.message} Type :reload to retry.")

        print(build_status_text(tracker.statuses()), end="")
        while True:
            line = await _read_line("> ")
            if line is None:
                break
            line = line.strip()
            if not line:
                continue

            if line in (":quit", ":q"):
                break
            if line == ":status":
                print(build_status_text(tracker.statuses()), end="")
                continue
            if line == ":reload":
                try:
                    await aggregator.load()
                    loaded = True
                    last_results = []
                    print(f"Loaded {len(aggregator.catalog)} items at {aggregator.loaded_at:%H:%M:%S} UTC.")
                except LoadFailed as e:
                    print(f"{e.message} Type :reload to retry.")
                continue

            if not loaded:
                print("Market data is not loaded. Type :reload to retry.")
                continue

            if line.isdigit() and last_results:
                pos = int(line)
                if 1 <= pos <= len(last_results):
                    print(render_item(aggregator, last_results[pos - 1]), end="")
                else:
                    print(f"Pick a number between 1 and {len(last_results)}.")
                continue

            text, last_results = render_results(aggregator, line)
            print(text, end="")
    finally:
        await prober.stop()
    return 0


def configure_collation() -> bool:
    """Sort catalog names with the user's collation rather than the C locale."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning("Could not apply the system collation locale; sorting by code point: %s", e)
        return False
    return True


def main(argv: Optional[List[str]] = None) -> int:
    configure_collation()
    args = sys.argv[1:] if argv is None else argv
    query = " ".join(args).strip()
    mode = MODE or ("once" if query else "interactive")

    if mode == "once":
        if not query:
            logger.error("MODE=once needs a query argument.")
            return 2
        return asyncio.run(run_once(query))
    return asyncio.run(run_interactive())


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except KeyboardInterrupt:
        raise SystemExit(130)
    except Exception as e:
        logger.exception("Fatal tracker error: %s", e)
        raise SystemExit(2)
