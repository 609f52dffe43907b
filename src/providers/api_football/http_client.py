from __future__ import annotations

import random
import time
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests

from core.config import get_settings
from core.logging import get_logger
from .exceptions import RateLimitError, TransientAPIError

log = get_logger(__name__)

_BASE_URL = "https://v3.football.api-sports.io"
_TRANSIENT_STATUSES = (500, 502, 503, 504)


class APIFootballHttpClient:
    """
    Client HTTP con retry e backoff per API Football (versione requests).
    Gestisce rate limit (429), errori transitori (5xx, network) e ritorna JSON.

    Telemetria dell'ultima chiamata (vedi get_stats):
      - attempts / retries
      - latency_ms: durata complessiva, successo o errore finale
      - last_status: ultimo HTTP status ricevuto (None se nessuna risposta)
    """

    def __init__(self) -> None:
        self._settings = get_settings()
        self._session = requests.Session()
        self._session.headers.update(
            {
                "x-apisports-key": self._settings.api_football_key,
                "Accept": "application/json",
            }
        )
        self._max_attempts = self._settings.api_football_max_attempts
        self._base = self._settings.api_football_backoff_base
        self._factor = self._settings.api_football_backoff_factor
        self._jitter = self._settings.api_football_backoff_jitter
        self._timeout = self._settings.api_football_timeout

        self._last_attempts: int = 0
        self._last_latency_ms: float = 0.0
        self._last_status: Optional[int] = None
        self._started: float = 0.0

    def _compute_delay(self, attempt: int) -> float:
        # attempt parte da 1
        delay = self._base * (self._factor ** (attempt - 1))
        if self._jitter > 0:
            delay *= random.uniform(1 - self._jitter, 1 + self._jitter)
        return delay

    def _record(self, attempt: int) -> None:
        self._last_attempts = attempt
        self._last_latency_ms = (time.perf_counter() - self._started) * 1000

    def _send(self, url: str, params: Optional[Dict[str, Any]]) -> requests.Response:
        if not params:
            return self._session.get(url, timeout=self._timeout)
        try:
            return self._session.get(url, params=params, timeout=self._timeout)
        except TypeError:
            # Session.get monkeypatchata con firma ridotta nei test: query costruita a mano
            query = urlencode(params, doseq=True)
            return self._session.get(f"{url}?{query}", timeout=self._timeout)

    def _wait(self, attempt: int, reason: str, retry_after: Optional[str] = None) -> None:
        wait = self._compute_delay(attempt)
        if retry_after:
            try:
                wait = max(wait, float(retry_after))
            except ValueError:
                pass
        log.warning("retry attempt=%s wait=%.2fs reason=%s", attempt, wait, reason)
        time.sleep(wait)

    def api_get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        log.info("api_football GET %s params=%s", path, params)
        url = _BASE_URL + path

        self._started = time.perf_counter()
        self._last_attempts = 0
        self._last_latency_ms = 0.0
        self._last_status = None

        for attempt in range(1, self._max_attempts + 1):
            final = attempt == self._max_attempts
            try:
                resp = self._send(url, params)
            except (requests.Timeout, requests.ConnectionError) as e:
                if final:
                    self._record(attempt)
                    raise TransientAPIError(
                        f"Errore di rete persistente dopo {attempt} tentativi: {e}"
                    ) from e
                self._wait(attempt, f"network:{e.__class__.__name__}")
                continue

            self._last_status = resp.status_code

            if 200 <= resp.status_code < 300:
                self._record(attempt)
                try:
                    return resp.json()
                except ValueError as e:
                    raise RuntimeError(
                        f"Risposta non valida (non JSON) status={resp.status_code}"
                    ) from e

            if resp.status_code == 429:
                if final:
                    self._record(attempt)
                    raise RateLimitError(f"Rate limit dopo {attempt} tentativi (429).")
                self._wait(attempt, "rate_limit", resp.headers.get("Retry-After"))
                continue

            if resp.status_code in _TRANSIENT_STATUSES:
                if final:
                    self._record(attempt)
                    raise TransientAPIError(
                        f"Status {resp.status_code} persistente dopo {attempt} tentativi."
                    )
                self._wait(attempt, f"http_{resp.status_code}")
                continue

            self._record(attempt)
            try:
                payload = resp.json()
            except Exception:
                payload = {"raw": resp.text}
            if 400 <= resp.status_code < 500:
                raise ValueError(
                    f"Richiesta API fallita (status={resp.status_code}) non retriable: {payload}"
                )
            raise RuntimeError(
                f"Risposta inattesa (status={resp.status_code}) non retriable: {payload}"
            )

        # max_attempts <= 0
        self._record(self._max_attempts)
        raise RuntimeError(f"Nessun tentativo eseguito path={path} max_attempts={self._max_attempts}")

    def get_stats(self) -> Dict[str, Any]:
        """
        Telemetria dell'ultima chiamata:
          attempts, retries (attempts - 1), latency_ms, last_status
        """
        return {
            "attempts": self._last_attempts,
            "retries": max(self._last_attempts - 1, 0),
            "latency_ms": round(self._last_latency_ms, 2),
            "last_status": self._last_status,
        }


def get_http_client() -> APIFootballHttpClient:
    """
    Restituisce sempre una nuova istanza per far sì che i test che
    modificano le variabili d'ambiente abbiano effetto immediato.
    """
    return APIFootballHttpClient()
