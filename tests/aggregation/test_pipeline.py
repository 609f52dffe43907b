import asyncio
from datetime import datetime

import pytest

from aggregation.pipeline import MatchAggregator
from core.dates import today_dia
from core.models import BroadcastSourceMatch
from core.persistence import JsonFileCache, MemoryCache, cache_key
from providers.base import BroadcastSource, FixturesSource

DIA = "19-11-2025"


class FakeFixtures(FixturesSource):
    def __init__(self, records=None, error=None):
        self.records = records or []
        self.error = error
        self.calls = []

    def fetch_fixtures(self, date):
        self.calls.append(date)
        if self.error:
            raise self.error
        return self.records


class FakeBroadcast(BroadcastSource):
    def __init__(self, name, matches=None, error=None):
        self.name = name
        self.matches = matches or []
        self.error = error
        self.calls = []

    async def fetch_matches(self, dia):
        self.calls.append(dia)
        if self.error:
            raise self.error
        return self.matches


def _bsm(home, away, hora, *canais):
    return BroadcastSourceMatch(nome_times=(home, away), hora=hora, canais=tuple(canais))


def _run(aggregator, dia=DIA):
    return asyncio.run(aggregator.get_matches(dia))


def test_end_to_end_single_fixture(api_fixture):
    fixtures = FakeFixtures([api_fixture()])
    uol = FakeBroadcast("uol", [_bsm("Santos", "Grêmio", "21h30", "SPORTV", "PREMIERE FC")])
    fntv = FakeBroadcast("futebolnatv")
    agg = MatchAggregator(fixtures, [uol, fntv], MemoryCache())

    out = _run(agg)

    assert len(out) == 1
    assert out[0].canais == ["SporTV", "Premiere"]
    assert out[0].date == datetime(2025, 11, 19, 21, 30)
    assert fixtures.calls == ["2025-11-19"]
    assert uol.calls == [DIA] and fntv.calls == [DIA]


def test_fixture_without_channels_is_dropped(api_fixture):
    fixtures = FakeFixtures(
        [
            api_fixture(),
            api_fixture(home="Flamengo", away="Vasco da Gama", date="2025-11-19T19:00:00-03:00"),
        ]
    )
    uol = FakeBroadcast("uol", [_bsm("Santos", "Grêmio", "21h30", "SPORTV")])
    out = _run(MatchAggregator(fixtures, [uol], MemoryCache()))
    assert [m.nome_times[0] for m in out] == ["Santos"]


def test_sorted_by_kickoff(api_fixture):
    fixtures = FakeFixtures(
        [
            api_fixture(home="A", away="B", date="2025-11-19T15:00:00-03:00"),
            api_fixture(home="C", away="D", date="2025-11-19T21:30:00-03:00"),
            api_fixture(home="E", away="F", date="2025-11-19T19:00:00-03:00"),
        ]
    )
    pool = [
        _bsm("A", "B", "15h00", "ESPN"),
        _bsm("C", "D", "21h30", "ESPN"),
        _bsm("E", "F", "19h00", "ESPN"),
    ]
    out = _run(MatchAggregator(fixtures, [FakeBroadcast("uol", pool)], MemoryCache()))
    assert [m.hora for m in out] == ["15h00", "19h00", "21h30"]


def test_cache_hit_short_circuits(api_fixture):
    cache = MemoryCache()
    uol = FakeBroadcast("uol", [_bsm("Santos", "Grêmio", "21h30", "SPORTV")])
    first = FakeFixtures([api_fixture()])
    out1 = _run(MatchAggregator(first, [uol], cache))

    second = FakeFixtures(error=RuntimeError("non dovrebbe essere chiamato"))
    other_pool = FakeBroadcast("uol")
    out2 = _run(MatchAggregator(second, [other_pool], cache))

    assert out2 == out1
    assert second.calls == []
    assert other_pool.calls == []


def test_cache_disabled_refetches(api_fixture):
    cache = MemoryCache()
    cache.set(cache_key(DIA), [])
    fixtures = FakeFixtures([api_fixture()])
    uol = FakeBroadcast("uol", [_bsm("Santos", "Grêmio", "21h30", "SPORTV")])
    out = _run(MatchAggregator(fixtures, [uol], cache, use_cache=False))
    assert len(out) == 1
    assert fixtures.calls == ["2025-11-19"]
    assert len(cache.get(cache_key(DIA))) == 1


def test_fixtures_failure_returns_empty_without_caching():
    cache = MemoryCache()
    uol = FakeBroadcast("uol")
    out = _run(MatchAggregator(FakeFixtures(error=ConnectionError("down")), [uol], cache))
    assert out == []
    assert cache.get(cache_key(DIA)) is None
    assert uol.calls == []


def test_nothing_in_scope_caches_empty(api_fixture):
    cache = MemoryCache()
    fixtures = FakeFixtures([api_fixture(league_id=94, country="Portugal")])
    uol = FakeBroadcast("uol")
    out = _run(MatchAggregator(fixtures, [uol], cache))
    assert out == []
    assert cache.get(cache_key(DIA)) == []
    assert uol.calls == []


def test_off_date_records_dropped(api_fixture):
    fixtures = FakeFixtures([api_fixture(date="2025-11-20T21:30:00-03:00")])
    uol = FakeBroadcast("uol", [_bsm("Santos", "Grêmio", "21h30", "SPORTV")])
    assert _run(MatchAggregator(fixtures, [uol], MemoryCache())) == []


def test_malformed_records_skipped(api_fixture):
    broken = api_fixture()
    broken["fixture"]["date"] = "sometime"
    fixtures = FakeFixtures([broken, "garbage", api_fixture()])
    uol = FakeBroadcast("uol", [_bsm("Santos", "Grêmio", "21h30", "SPORTV")])
    out = _run(MatchAggregator(fixtures, [uol], MemoryCache()))
    assert len(out) == 1


def test_broadcast_failure_is_isolated(api_fixture):
    fixtures = FakeFixtures([api_fixture()])
    failing = FakeBroadcast("uol", error=RuntimeError("timeout"))
    working = FakeBroadcast("futebolnatv", [_bsm("Santos", "Gremio", "21h00", "PREMIERE 2", "Premiere")])
    out = _run(MatchAggregator(fixtures, [failing, working], MemoryCache()))
    assert len(out) == 1
    assert out[0].canais == ["Premiere 2"]


def test_all_broadcast_sources_failing_yields_empty(api_fixture):
    fixtures = FakeFixtures([api_fixture()])
    sources = [FakeBroadcast("uol", error=RuntimeError("x")), FakeBroadcast("fntv", error=ValueError("y"))]
    assert _run(MatchAggregator(fixtures, sources, MemoryCache())) == []


def test_invalid_date_defaults_to_today(api_fixture):
    fixtures = FakeFixtures([])
    _run(MatchAggregator(fixtures, [], MemoryCache()), dia="2025/11/19")
    d, m, y = today_dia().split("-")
    assert fixtures.calls == [f"{y}-{m}-{d}"]


def test_result_persisted_in_file_cache(api_fixture, tmp_path):
    cache = JsonFileCache(tmp_path / "cache.json")
    fixtures = FakeFixtures([api_fixture()])
    uol = FakeBroadcast("uol", [_bsm("Santos", "Grêmio", "21h30", "GLOBO SP, RS")])
    out = _run(MatchAggregator(fixtures, [uol], cache))
    assert cache.get(cache_key(DIA)) == out
    assert out[0].canais == ["Globo SP", "Globo RS"]


@pytest.mark.parametrize("use_cache", [True, False])
def test_without_cache_store(api_fixture, use_cache):
    fixtures = FakeFixtures([api_fixture()])
    uol = FakeBroadcast("uol", [_bsm("Santos", "Grêmio", "21h30", "SPORTV")])
    out = _run(MatchAggregator(fixtures, [uol], None, use_cache=use_cache))
    assert len(out) == 1


def test_equal_kickoffs_keep_input_order(api_fixture):
    fixtures = FakeFixtures(
        [
            api_fixture(home="Bahia", away="Vitória", date="2025-11-19T19:00:00-03:00"),
            api_fixture(home="Ceará", away="Fortaleza", date="2025-11-19T16:00:00-03:00"),
            api_fixture(home="Avaí", away="Figueirense", date="2025-11-19T19:00:00-03:00"),
            api_fixture(home="Sport", away="Náutico", date="2025-11-19T19:00:00-03:00"),
        ]
    )
    pool = [
        _bsm("Sport", "Náutico", "19h00", "ESPN"),
        _bsm("Avaí", "Figueirense", "19h00", "ESPN"),
        _bsm("Bahia", "Vitória", "19h00", "ESPN"),
        _bsm("Ceará", "Fortaleza", "16h00", "ESPN"),
    ]
    out = _run(MatchAggregator(fixtures, [FakeBroadcast("uol", pool)], MemoryCache()))
    assert [m.nome_times[0] for m in out] == ["Ceará", "Bahia", "Avaí", "Sport"]


def test_unreadable_cache_file_is_ignored(api_fixture, tmp_path):
    path = tmp_path / "cache.json"
    path.write_bytes(b"\xff\xfe\x00garbage")
    fixtures = FakeFixtures([api_fixture()])
    uol = FakeBroadcast("uol", [_bsm("Santos", "Grêmio", "21h30", "SPORTV")])
    out = _run(MatchAggregator(fixtures, [uol], JsonFileCache(path)))
    assert [m.canais for m in out] == [["SporTV"]]
    assert fixtures.calls == ["2025-11-19"]
    assert JsonFileCache(path).get(cache_key(DIA)) == out


class BrokenCache:
    def get(self, key):
        raise RuntimeError("store non raggiungibile")

    def set(self, key, matches):
        raise RuntimeError("store non raggiungibile")


def test_failing_cache_store_does_not_break_run(api_fixture):
    fixtures = FakeFixtures([api_fixture()])
    uol = FakeBroadcast("uol", [_bsm("Santos", "Grêmio", "21h30", "SPORTV")])
    out = _run(MatchAggregator(fixtures, [uol], BrokenCache()))
    assert len(out) == 1
