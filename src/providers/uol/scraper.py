from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import httpx
from bs4 import BeautifulSoup

from core.config import get_settings
from core.dates import dia_to_iso
from core.logging import get_logger
from core.models import BroadcastSourceMatch
from providers.base import BroadcastSource
from providers.exceptions import ScraperError

log = get_logger(__name__)

STATE_SCRIPT_ID = "VUELAND_STATE"
TEAM_KEY_PREFIX = "football-team-"
MATCH_KEY_PREFIX = "football-match-"


def extract_state(html: str) -> Dict[str, Any]:
    """
    La pagina UOL incorpora lo stato dell'app in
    <script id="VUELAND_STATE" type="application/json">{...}</script>.
    """
    soup = BeautifulSoup(html, "html.parser")
    script = soup.find("script", id=STATE_SCRIPT_ID)
    if script is None or not script.string:
        raise ScraperError("Blocco VUELAND_STATE non trovato nella pagina UOL")
    try:
        state = json.loads(script.string)
    except json.JSONDecodeError as e:
        raise ScraperError(f"VUELAND_STATE non è JSON valido: {e}") from e
    if not isinstance(state, dict):
        raise ScraperError("VUELAND_STATE con struttura inattesa (atteso oggetto)")
    return state


def _to_match(raw: Dict[str, Any], teams: Dict[Any, Dict[str, Any]], data_api: str) -> Optional[BroadcastSourceMatch]:
    if raw.get("date") != data_api:
        return None
    broadcast = (raw.get("content") or {}).get("broadcast") or []
    canais = [b.get("name") for b in broadcast if isinstance(b, dict) and b.get("name")]
    if not canais:
        return None
    ids = raw.get("teams") or {}
    home = teams.get(ids.get("home"))
    away = teams.get(ids.get("away"))
    if not home or not away:
        return None
    championship = raw.get("championship") or {}
    return BroadcastSourceMatch(
        nome_times=(home.get("name") or "", away.get("name") or ""),
        hora=raw.get("hour"),
        canais=tuple(canais),
        campeonato=championship.get("editorialName") or championship.get("name") or "",
        fonte="uol",
    )


def parse_uol_state(state: Dict[str, Any], data_api: str) -> List[BroadcastSourceMatch]:
    """Partite con trasmissione nella data richiesta (YYYY-MM-DD)."""
    teams: Dict[Any, Dict[str, Any]] = {}
    raw_matches: List[Dict[str, Any]] = []
    for key, value in state.items():
        if not isinstance(value, dict):
            continue
        if key.startswith(TEAM_KEY_PREFIX):
            teams[value.get("id")] = value
        elif key.startswith(MATCH_KEY_PREFIX):
            raw_matches.append(value)

    out: List[BroadcastSourceMatch] = []
    for raw in raw_matches:
        try:
            match = _to_match(raw, teams, data_api)
        except (AttributeError, TypeError) as e:
            log.warning("Record UOL con forma inattesa ignorato: %s", e)
            continue
        if match is not None:
            out.append(match)
    return out


class UolBroadcastSource(BroadcastSource):
    name = "uol"

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None) -> None:
        settings = get_settings()
        self.url = url or settings.uol_url
        self._timeout = timeout if timeout is not None else settings.scraper_timeout
        self._headers = {
            "Accept": "text/html",
            "User-Agent": settings.scraper_user_agent,
        }

    async def _get_html(self) -> str:
        try:
            async with httpx.AsyncClient(
                headers=self._headers, timeout=self._timeout, follow_redirects=True
            ) as client:
                resp = await client.get(self.url)
                resp.raise_for_status()
                return resp.text
        except httpx.HTTPError as e:
            raise ScraperError(f"Errore nel recupero della pagina UOL: {e}") from e

    async def fetch_matches(self, dia: str) -> List[BroadcastSourceMatch]:
        html = await self._get_html()
        matches = parse_uol_state(extract_state(html), dia_to_iso(dia))
        log.info("UOL: %s partite con trasmissione per %s", len(matches), dia)
        return matches


__all__ = ["UolBroadcastSource", "extract_state", "parse_uol_state"]
