# core/health.py
import asyncio
import os
from typing import Callable, Dict, Mapping, Optional

from .logger import get_logger
from .models import Source, SourceStatus

logger = get_logger(__name__)

PROBE_INTERVAL_SECONDS = float(os.getenv("PROBE_INTERVAL_SECONDS", "60"))


class SourceHealthTracker:
    """
    Current status per source. No history and no debouncing: one report
    decides the status until the next one. Each source's cell is written only
    by its own fetch or its own probe, so no locking is needed.
    """

    def __init__(self):
        self._status: Dict[Source, SourceStatus] = {s: SourceStatus.PENDING for s in Source}

    def report(self, source: Source, outcome: bool) -> SourceStatus:
        new = SourceStatus.ONLINE if outcome else SourceStatus.OFFLINE
        old = self._status[source]
        self._status[source] = new
        if old != new:
            logger.info("Source %s: %s -> %s", source.value, old.value, new.value)
        return new

    def current_status(self, source: Source) -> SourceStatus:
        return self._status[source]

    def statuses(self) -> Dict[Source, SourceStatus]:
        return dict(self._status)


class HealthProber:
    """
    Re-checks every source on a fixed interval, independently of loads.
    start() returns the running task; stop() cancels it and waits for it.
    """

    def __init__(
        self,
        tracker: SourceHealthTracker,
        urls: Mapping[Source, str],
        probe: Callable[[str], bool],
        interval: float = PROBE_INTERVAL_SECONDS,
    ):
        if interval <= 0:
            raise ValueError("Probe interval must be positive.")
        self.tracker = tracker
        self.urls = dict(urls)
        self.probe = probe
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self.running:
            return self._task  # type: ignore[return-value]
        logger.info("Starting health prober; every %.0f seconds.", self.interval)
        self._task = asyncio.create_task(self._run(), name="health-prober")
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Health prober stopped.")

    async def probe_once(self) -> Dict[Source, bool]:
        sources = list(self.urls)
        results = await asyncio.gather(
            *(asyncio.to_thread(self.probe, self.urls[s]) for s in sources),
            return_exceptions=True,
        )
        outcomes: Dict[Source, bool] = {}
        for source, result in zip(sources, results):
            if isinstance(result, BaseException):
                logger.warning("Probe for %s raised: %s", source.value, result)
                ok = False
            else:
                ok = bool(result)
            self.tracker.report(source, ok)
            outcomes[source] = ok
        logger.debug("Probe cycle: %s", {s.value: ok for s, ok in outcomes.items()})
        return outcomes

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.probe_once()
