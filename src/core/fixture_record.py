from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


class InvalidRecordError(ValueError):
    """Record della fonte autorevole con forma inattesa (il record va scartato)."""


@dataclass
class SourceFixture:
    kickoff: datetime
    home_name: Optional[str]
    away_name: Optional[str]
    home_code: Optional[str]
    away_code: Optional[str]
    home_logo: Optional[str]
    away_logo: Optional[str]
    league_id: Optional[int]
    league_name: Optional[str]
    league_editorial_name: Optional[str]
    league_country: Optional[str]
    stadium: Optional[str]

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "SourceFixture":
        # raw è il record grezzo API-Football (fixture, league, teams)
        if not isinstance(raw, dict):
            raise InvalidRecordError(f"Record non è un oggetto: {type(raw).__name__}")
        fixture = _as_dict(raw.get("fixture"), "fixture")
        league = _as_dict(raw.get("league"), "league")
        teams = _as_dict(raw.get("teams"), "teams")
        home = _as_dict(teams.get("home"), "teams.home")
        away = _as_dict(teams.get("away"), "teams.away")
        venue = fixture.get("venue") or {}
        if not isinstance(venue, dict):
            venue = {}

        date_raw = fixture.get("date")
        if not isinstance(date_raw, str) or not date_raw:
            raise InvalidRecordError("fixture.date mancante")
        try:
            kickoff = datetime.fromisoformat(date_raw.replace("Z", "+00:00"))
        except ValueError as e:
            raise InvalidRecordError(f"fixture.date non ISO8601: {date_raw!r}") from e

        def _as_int(v):
            try:
                return int(v) if v is not None else None
            except (ValueError, TypeError):
                return None

        return cls(
            kickoff=kickoff,
            home_name=_as_str(home.get("name")),
            away_name=_as_str(away.get("name")),
            home_code=_as_str(home.get("code")),
            away_code=_as_str(away.get("code")),
            home_logo=_as_str(home.get("logo")),
            away_logo=_as_str(away.get("logo")),
            league_id=_as_int(league.get("id")),
            league_name=_as_str(league.get("name")),
            league_editorial_name=_as_str(league.get("editorialName")),
            league_country=_as_str(league.get("country")),
            stadium=_as_str(venue.get("name")),
        )


def _as_dict(value: Any, label: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidRecordError(f"Campo {label} con forma inattesa: {type(value).__name__}")
    return value


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None
