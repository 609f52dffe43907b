from datetime import datetime

from broadcast.reconcile import reconcile, reconcile_all
from core.models import BroadcastSourceMatch, Match


def _fixture(home="Santos", away="Grêmio", hora="21h30"):
    return Match(
        campeonato="Brasileirão Série A",
        estadio="",
        hora=hora,
        times=("SAN", "GRE"),
        nome_times=(home, away),
        escudos=("", ""),
        date=datetime(2025, 11, 19, 21, 30),
    )


def _bsm(home, away, hora, *canais):
    return BroadcastSourceMatch(nome_times=(home, away), hora=hora, canais=tuple(canais))


def test_single_match_normalizes_channels():
    pool = [_bsm("Santos", "Grêmio", "21h30", "SPORTV", "PREMIERE FC")]
    assert reconcile(_fixture(), pool) == ["SporTV", "Premiere"]


def test_multiple_records_are_unioned():
    pool = [
        _bsm("Santos", "Gremio", "21h30", "SPORTV"),
        _bsm("Santos FC", "Grêmio", "21h00", "SporTV", "GLOBO SP, RS"),
        _bsm("Palmeiras", "Grêmio", "21h30", "ESPN"),
    ]
    assert reconcile(_fixture(), pool) == ["SporTV", "Globo SP", "Globo RS"]


def test_malformed_records_skipped():
    pool = [
        BroadcastSourceMatch(nome_times=("Santos",), hora="21h30", canais=("ESPN",)),
        BroadcastSourceMatch(nome_times=("Santos", ""), hora="21h30", canais=("ESPN",)),
        BroadcastSourceMatch(nome_times=("Santos", "Grêmio"), hora=None, canais=("ESPN",)),
        BroadcastSourceMatch(nome_times=("Santos", "Grêmio"), hora="  ", canais=("ESPN",)),
        _bsm("Santos", "Grêmio", "21h30", "Max"),
    ]
    assert reconcile(_fixture(), pool) == ["Max"]


def test_no_match_returns_empty():
    pool = [_bsm("Santos", "Grêmio", "16h00", "SPORTV")]
    assert reconcile(_fixture(), pool) == []


def test_reconcile_all_unions_pools_and_applies_precedence():
    uol = [_bsm("Santos", "Grêmio", "21h30", "PREMIERE FC", "SPORTV")]
    fntv = [_bsm("Santos", "Gremio", "21h30", "PREMIERE 3")]
    assert reconcile_all(_fixture(), [uol, fntv]) == ["SporTV", "Premiere 3"]


def test_reconcile_all_empty_pools():
    assert reconcile_all(_fixture(), [[], []]) == []
