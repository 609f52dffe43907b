from __future__ import annotations

import re
import unicodedata
from typing import List, Optional, Pattern, Sequence, Tuple

# ─── Alias applicati dopo la rimozione dei diacritici (ordine significativo)
TEAM_ALIASES: List[Tuple[Pattern[str], str]] = [
    # Squadre femminili: "(F)", "Feminino", "Fem.", "W", "Women"
    (re.compile(r"\s*\((?:f|fem)\)\s*$", re.IGNORECASE), " feminino"),
    (re.compile(r"\s+(?:feminino|fem\.?|women|w)\s*$", re.IGNORECASE), " feminino"),
    # Categorie giovanili: "Sub-20", "Sub 20", "U20"
    (re.compile(r"\s*\b(?:sub|u)[\s-]?(\d{2})\b", re.IGNORECASE), r" sub\1"),
    # Club resi in modo incoerente tra le fonti
    (re.compile(r"\batletico[\s-]*mg\b", re.IGNORECASE), "atletico mineiro"),
    (re.compile(r"\bath?letico[\s-]*(?:pr|paranaense)\b", re.IGNORECASE), "athletico paranaense"),
    (re.compile(r"\batletico[\s-]*go\b", re.IGNORECASE), "atletico goianiense"),
    (re.compile(r"\bamerica[\s-]*mg\b", re.IGNORECASE), "america mineiro"),
    (re.compile(r"\bbotafogo[\s-]*rj\b", re.IGNORECASE), "botafogo"),
    (re.compile(r"\b(?:red\s+bull|rb)\s+bragantino\b", re.IGNORECASE), "bragantino"),
    (re.compile(r"\bvasco\s+da\s+gama\b", re.IGNORECASE), "vasco"),
]

_LEADING_HOUR_RE = re.compile(r"^(\d+)")


def strip_accents(value: str) -> str:
    normalized = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in normalized if not unicodedata.combining(ch))


def normalize_team_name(name: str) -> str:
    """'Atlético-MG' -> 'atletico mineiro', 'Corinthians (F)' -> 'corinthians feminino'."""
    value = strip_accents(name or "")
    for pattern, replacement in TEAM_ALIASES:
        value = pattern.sub(replacement, value)
    return re.sub(r"\s+", " ", value).strip().lower()


def team_names_match(a: str, b: str) -> bool:
    na = normalize_team_name(a)
    nb = normalize_team_name(b)
    if not na or not nb:
        return False
    return na in nb or nb in na


def _normalize_time(value: str) -> str:
    return re.sub(r"\s+", "", value or "").lower()


def _leading_hour(value: str) -> Optional[int]:
    m = _LEADING_HOUR_RE.match(value)
    return int(m.group(1)) if m else None


def times_match(a: str, b: str) -> bool:
    """
    Orari uguali se identici dopo normalizzazione oppure se l'ora iniziale
    differisce al massimo di 1 (fonti che arrotondano allo slot di trasmissione).
    Confronto letterale: nessun riporto a cavallo della mezzanotte.
    """
    na = _normalize_time(a)
    nb = _normalize_time(b)
    if na == nb:
        return True
    ha = _leading_hour(na)
    hb = _leading_hour(nb)
    if ha is None or hb is None:
        return False
    return abs(ha - hb) <= 1


def matches(
    fixture_names: Sequence[str],
    fixture_time: str,
    candidate_names: Sequence[str],
    candidate_time: str,
) -> bool:
    """Stessa partita solo se casa, trasferta e orario combaciano (nessuno scambio di lato)."""
    if len(fixture_names) < 2 or len(candidate_names) < 2:
        return False
    return (
        team_names_match(fixture_names[0], candidate_names[0])
        and team_names_match(fixture_names[1], candidate_names[1])
        and times_match(fixture_time, candidate_time)
    )


__all__ = [
    "TEAM_ALIASES",
    "strip_accents",
    "normalize_team_name",
    "team_names_match",
    "times_match",
    "matches",
]
