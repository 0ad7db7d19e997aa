import pytest

import tracker
from core.aggregator import DataAggregator
from core.errors import LOAD_FAILED_MESSAGE
from core.health import HealthProber, SourceHealthTracker
from core.models import Source


@pytest.mark.asyncio
async def test_run_once_prints_results_and_top_item(make_fetchers, capsys):
    agg = DataAggregator(make_fetchers(), SourceHealthTracker())

    code = await tracker.run_once("whip", agg)

    out = capsys.readouterr().out
    assert code == 0
    assert "Wiki Mapping: online" in out
    assert " 1. Abyssal whip [M] - 1.50M" in out
    assert "Abyssal whip (#3) [Members]" in out


@pytest.mark.asyncio
async def test_run_once_load_failure(make_fetchers, capsys):
    agg = DataAggregator(make_fetchers(Source.CATALOG), SourceHealthTracker())

    code = await tracker.run_once("whip", agg)

    out = capsys.readouterr().out
    assert code == 1
    assert LOAD_FAILED_MESSAGE in out
    assert "Wiki Mapping: offline" in out


@pytest.mark.asyncio
async def test_interactive_session(make_fetchers, monkeypatch, capsys):
    lines = iter(["rune", "2", "9", ":status", "", ":quit"])

    async def fake_read(prompt):
        return next(lines)

    monkeypatch.setattr(tracker, "_read_line", fake_read)
    tr = SourceHealthTracker()
    agg = DataAggregator(make_fetchers(), tr)
    prober = HealthProber(tr, {}, lambda url: True, interval=3600)

    code = await tracker.run_interactive(agg, prober)

    out = capsys.readouterr().out
    assert code == 0
    assert " 1. Rune axe - 7.3K" in out
    assert " 2. Rune scimitar - no data" in out
    assert "Rune scimitar (#2)" in out
    assert "No recent market data available" in out
    assert "Pick a number between 1 and 2." in out
    assert not prober.running


@pytest.mark.asyncio
async def test_interactive_reload_after_failure(make_fetchers, monkeypatch, capsys):
    agg = DataAggregator(make_fetchers(Source.CATALOG), SourceHealthTracker())
    lines = iter(["axe", ":reload", "axe", None])

    async def fake_read(prompt):
        line = next(lines)
        if line == ":reload":
            agg.fetchers = make_fetchers()
        return line

    monkeypatch.setattr(tracker, "_read_line", fake_read)
    prober = HealthProber(agg.tracker, {}, lambda url: True, interval=3600)

    await tracker.run_interactive(agg, prober)

    out = capsys.readouterr().out
    assert "Type :reload to retry." in out
    assert "Market data is not loaded." in out
    assert "Loaded 3 items at " in out
    assert " UTC." in out
    assert " 1. Rune axe - 7.3K" in out


def test_main_once_requires_query(monkeypatch):
    monkeypatch.setattr(tracker, "MODE", "once")
    assert tracker.main([]) == 2


def test_configure_collation_uses_system_locale(monkeypatch):
    calls = []
    monkeypatch.setattr(tracker.locale, "setlocale", lambda category, name: calls.append((category, name)))
    assert tracker.configure_collation() is True
    assert calls == [(tracker.locale.LC_COLLATE, "")]


def test_configure_collation_survives_missing_locale(monkeypatch):
    def broken(category, name):
        raise tracker.locale.Error("unsupported locale setting")

    monkeypatch.setattr(tracker.locale, "setlocale", broken)
    assert tracker.configure_collation() is False


def test_main_applies_collation_before_running(monkeypatch):
    calls = []
    monkeypatch.setattr(tracker, "configure_collation", lambda: calls.append("collation") or True)
    monkeypatch.setattr(tracker, "MODE", "once")
    assert tracker.main([]) == 2
    assert calls == ["collation"]
