import asyncio

import pytest

from core.health import PROBE_INTERVAL_SECONDS, HealthProber, SourceHealthTracker
from core.models import Source, SourceStatus

URLS = {
    Source.CATALOG: "https://example.test/mapping",
    Source.PRICES: "https://example.test/latest",
    Source.ATTRIBUTES: "https://example.test/items.json",
}


def test_tracker_starts_pending():
    tracker = SourceHealthTracker()
    assert all(status is SourceStatus.PENDING for status in tracker.statuses().values())
    assert set(tracker.statuses()) == set(Source)


def test_single_report_flips_status():
    tracker = SourceHealthTracker()
    tracker.report(Source.PRICES, True)
    assert tracker.current_status(Source.PRICES) is SourceStatus.ONLINE
    tracker.report(Source.PRICES, False)
    assert tracker.current_status(Source.PRICES) is SourceStatus.OFFLINE
    tracker.report(Source.PRICES, True)
    assert tracker.current_status(Source.PRICES) is SourceStatus.ONLINE
    assert tracker.current_status(Source.CATALOG) is SourceStatus.PENDING


def test_prober_rejects_bad_interval():
    with pytest.raises(ValueError):
        HealthProber(SourceHealthTracker(), URLS, lambda url: True, interval=0)


@pytest.mark.asyncio
async def test_probe_once_reports_each_source():
    tracker = SourceHealthTracker()
    for source in Source:
        tracker.report(source, True)

    def probe(url):
        return url != URLS[Source.PRICES]

    outcomes = await HealthProber(tracker, URLS, probe).probe_once()

    assert outcomes[Source.PRICES] is False
    assert tracker.current_status(Source.PRICES) is SourceStatus.OFFLINE
    assert tracker.current_status(Source.CATALOG) is SourceStatus.ONLINE
    assert tracker.current_status(Source.ATTRIBUTES) is SourceStatus.ONLINE


@pytest.mark.asyncio
async def test_probe_exception_counts_as_offline():
    tracker = SourceHealthTracker()

    def probe(url):
        raise RuntimeError("dns")

    await HealthProber(tracker, {Source.CATALOG: URLS[Source.CATALOG]}, probe).probe_once()
    assert tracker.current_status(Source.CATALOG) is SourceStatus.OFFLINE


@pytest.mark.asyncio
async def test_prober_runs_on_interval_and_stops():
    tracker = SourceHealthTracker()
    calls = []

    def probe(url):
        calls.append(url)
        return True

    prober = HealthProber(tracker, URLS, probe, interval=0.01)
    task = prober.start()
    assert prober.start() is task
    await asyncio.sleep(0.1)
    await prober.stop()

    assert task.cancelled()
    assert not prober.running
    assert len(calls) >= 3
    assert tracker.current_status(Source.ATTRIBUTES) is SourceStatus.ONLINE

    await asyncio.sleep(0.02)
    settled = len(calls)
    await asyncio.sleep(0.05)
    assert len(calls) == settled


@pytest.mark.asyncio
async def test_stop_without_start_is_noop():
    prober = HealthProber(SourceHealthTracker(), URLS, lambda url: True)
    await prober.stop()
    assert not prober.running


def test_default_interval_is_one_minute():
    assert PROBE_INTERVAL_SECONDS == 60
    assert HealthProber(SourceHealthTracker(), URLS, lambda url: True).interval == 60
