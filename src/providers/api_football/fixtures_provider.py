from __future__ import annotations

from typing import Any, Dict, List, Optional

from core.config import get_settings
from core.logging import get_logger
from providers.base import FixturesSource
from .http_client import get_http_client, APIFootballHttpClient

log = get_logger(__name__)


class ApiFootballFixturesProvider(FixturesSource):
    """
    Fonte autorevole delle partite del giorno (API-Football /fixtures).
    - Usa APIFootballHttpClient (requests + retry)
    - Restituisce i record grezzi: la validazione avviene in SourceFixture.from_api
    - Gli orari arrivano già nel fuso configurato (parametro 'timezone')
    """

    def __init__(self, client: Optional[APIFootballHttpClient] = None) -> None:
        self._settings = get_settings()
        self._client = client or get_http_client()
        self._last_raw: Dict[str, Any] | None = None

    def fetch_fixtures(self, date: str) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"date": date, "timezone": self._settings.timezone}
        raw = self._client.api_get("/fixtures", params=params)
        self._last_raw = raw

        errors = raw.get("errors")
        if errors:
            # API-Football risponde 200 anche con chiave invalida o quota esaurita
            raise RuntimeError(f"API-Football ha restituito errori: {errors}")

        response = raw.get("response", [])
        if not isinstance(response, list):
            log.warning("Formato inatteso: 'response' non è una lista")
            return []
        log.info(
            "Fixtures ricevute date=%s count=%s",
            date,
            len(response),
            extra={"fetch_stats": self._client.get_stats()},
        )
        return response

    def get_last_stats(self) -> Dict[str, Any]:
        return self._client.get_stats()

    def get_last_raw(self) -> Dict[str, Any]:
        return self._last_raw or {}


__all__ = ["ApiFootballFixturesProvider"]
