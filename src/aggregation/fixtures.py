from __future__ import annotations

import re
from datetime import datetime
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from broadcast.matching import strip_accents
from core.config import DEFAULT_ALLOWED_LEAGUE_IDS
from core.dates import format_hora, parse_dia, parse_kickoff
from core.fixture_record import SourceFixture
from core.models import Match

DEFAULT_TARGET_COUNTRY = "Brazil"
DEFAULT_TIMEZONE = "America/Sao_Paulo"

# Nome editoriale per lega (precede il nome grezzo dell'API)
LEAGUE_DISPLAY_NAMES = {
    71: "Brasileirão Série A",
    72: "Brasileirão Série B",
    73: "Copa do Brasil",
    13: "Libertadores",
    11: "Copa Sul-Americana",
    1070: "Libertadores Feminina",
    2: "Champions League",
    39: "Campeonato Inglês",
    140: "Campeonato Espanhol",
    135: "Campeonato Italiano",
}


def is_in_scope(
    record: SourceFixture,
    target_country: str = DEFAULT_TARGET_COUNTRY,
    allowed_league_ids: Iterable[int] = DEFAULT_ALLOWED_LEAGUE_IDS,
) -> bool:
    if record.league_country is not None and record.league_country == target_country:
        return True
    return record.league_id is not None and record.league_id in set(allowed_league_ids)


def fallback_abbreviation(name: str) -> str:
    """Prime tre lettere del nome, senza accenti né spazi: 'São Paulo' -> 'SAO'."""
    compact = re.sub(r"\s+", "", strip_accents(name))
    return compact[:3].upper()


def league_display_name(record: SourceFixture) -> str:
    if record.league_editorial_name:
        return record.league_editorial_name
    if record.league_id is not None and record.league_id in LEAGUE_DISPLAY_NAMES:
        return LEAGUE_DISPLAY_NAMES[record.league_id]
    return record.league_name or ""


def local_kickoff(record: SourceFixture, tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    kickoff = record.kickoff
    if kickoff.tzinfo is None:
        return kickoff
    return kickoff.astimezone(ZoneInfo(tz_name))


def is_on_date(record: SourceFixture, dia: str, tz_name: str = DEFAULT_TIMEZONE) -> bool:
    return local_kickoff(record, tz_name).date() == parse_dia(dia)


def convert(record: SourceFixture, dia: str, tz_name: str = DEFAULT_TIMEZONE) -> Optional[Match]:
    """
    Converte un record autorevole nella partita canonica (canali vuoti).

    Ritorna None se manca il nome di una delle due squadre.
    Solleva KickoffParseError se l'orario derivato non è interpretabile.
    """
    if not record.home_name or not record.away_name:
        return None
    hora = format_hora(local_kickoff(record, tz_name))
    return Match(
        campeonato=league_display_name(record),
        estadio=record.stadium or "",
        hora=hora,
        times=(
            record.home_code or fallback_abbreviation(record.home_name),
            record.away_code or fallback_abbreviation(record.away_name),
        ),
        nome_times=(record.home_name, record.away_name),
        escudos=(record.home_logo or "", record.away_logo or ""),
        date=parse_kickoff(dia, hora),
        canais=[],
    )


__all__ = [
    "LEAGUE_DISPLAY_NAMES",
    "is_in_scope",
    "fallback_abbreviation",
    "league_display_name",
    "local_kickoff",
    "is_on_date",
    "convert",
]
