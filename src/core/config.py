import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, List


# Brasileirão A/B, Libertadores (+ femminile) e leghe estere seguite
DEFAULT_ALLOWED_LEAGUE_IDS: List[int] = [71, 72, 13, 1070, 2, 39, 140, 135]


def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    v = value.strip().lower()
    if v in {"0", "false", "no"}:
        return False
    return True


def _parse_list(value: Optional[str]) -> Optional[List[str]]:
    if not value:
        return None
    parts = [p.strip() for p in value.split(",")]
    clean = [p for p in parts if p]
    return clean or None


@dataclass
class Settings:
    api_football_key: str

    api_football_max_attempts: int
    api_football_backoff_base: float
    api_football_backoff_factor: float
    api_football_backoff_jitter: float
    api_football_timeout: float

    data_dir: str
    cache_file: str
    enable_cache: bool

    timezone: str
    target_country: str
    allowed_league_ids: List[int]

    uol_url: str
    futebolnatv_url: str
    enable_futebolnatv: bool
    scraper_timeout: float
    scraper_user_agent: str

    @classmethod
    def from_env(cls) -> "Settings":
        key = os.getenv("API_FOOTBALL_KEY")
        if not key:
            raise ValueError("API_FOOTBALL_KEY non impostata. Aggiungi a .env: API_FOOTBALL_KEY=LA_TUA_CHIAVE")

        def _int(name: str, default: int) -> int:
            raw = os.getenv(name)
            if not raw:
                return default
            try:
                return int(raw)
            except ValueError as e:
                raise ValueError(f"Variabile {name} deve essere un intero (valore: {raw!r})") from e

        def _float(name: str, default: float) -> float:
            raw = os.getenv(name)
            if not raw:
                return default
            try:
                return float(raw)
            except ValueError as e:
                raise ValueError(f"Variabile {name} deve essere un numero (valore: {raw!r})") from e

        max_attempts = _int("API_FOOTBALL_MAX_ATTEMPTS", 5)
        backoff_base = _float("API_FOOTBALL_BACKOFF_BASE", 0.5)
        backoff_factor = _float("API_FOOTBALL_BACKOFF_FACTOR", 2.0)
        backoff_jitter = _float("API_FOOTBALL_BACKOFF_JITTER", 0.2)
        timeout = _float("API_FOOTBALL_TIMEOUT", 10.0)

        data_dir = os.getenv("TV_DATA_DIR", "data")
        cache_file = os.getenv("TV_CACHE_FILE", "matches_cache.json")
        enable_cache = _parse_bool(os.getenv("TV_ENABLE_CACHE"), True)

        tz_name = os.getenv("TV_TIMEZONE", "America/Sao_Paulo")
        target_country = os.getenv("TV_TARGET_COUNTRY", "Brazil")

        raw_ids = _parse_list(os.getenv("TV_ALLOWED_LEAGUE_IDS"))
        if raw_ids is None:
            allowed_league_ids = list(DEFAULT_ALLOWED_LEAGUE_IDS)
        else:
            try:
                allowed_league_ids = [int(x) for x in raw_ids]
            except ValueError as e:
                raise ValueError(
                    f"Variabile TV_ALLOWED_LEAGUE_IDS deve contenere interi separati da virgola (valore: {raw_ids!r})"
                ) from e

        uol_url = os.getenv("UOL_URL", "https://www.uol.com.br/esporte/futebol/central-de-jogos/")
        futebolnatv_url = os.getenv("FUTEBOLNATV_URL", "https://www.futebolnatv.com.br/jogos-hoje/")
        enable_futebolnatv = _parse_bool(os.getenv("ENABLE_FUTEBOLNATV"), True)
        scraper_timeout = _float("SCRAPER_TIMEOUT", 20.0)
        scraper_user_agent = os.getenv(
            "SCRAPER_USER_AGENT",
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        )

        return cls(
            api_football_key=key,
            api_football_max_attempts=max_attempts,
            api_football_backoff_base=backoff_base,
            api_football_backoff_factor=backoff_factor,
            api_football_backoff_jitter=backoff_jitter,
            api_football_timeout=timeout,
            data_dir=data_dir,
            cache_file=cache_file,
            enable_cache=enable_cache,
            timezone=tz_name,
            target_country=target_country,
            allowed_league_ids=allowed_league_ids,
            uol_url=uol_url,
            futebolnatv_url=futebolnatv_url,
            enable_futebolnatv=enable_futebolnatv,
            scraper_timeout=scraper_timeout,
            scraper_user_agent=scraper_user_agent,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def _reset_settings_cache_for_tests() -> None:
    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "_reset_settings_cache_for_tests", "DEFAULT_ALLOWED_LEAGUE_IDS"]
