from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from broadcast.reconcile import reconcile_all
from core.config import DEFAULT_ALLOWED_LEAGUE_IDS, get_settings
from core.dates import KickoffParseError, dia_to_iso, resolve_dia
from core.fixture_record import InvalidRecordError, SourceFixture
from core.logging import get_logger
from core.models import BroadcastSourceMatch, MatchDataset
from core.persistence import CacheStore, JsonFileCache, cache_key
from providers.api_football.fixtures_provider import ApiFootballFixturesProvider
from providers.base import BroadcastSource, FixturesSource
from providers.futebolnatv.scraper import FutebolNaTvBroadcastSource
from providers.uol.scraper import UolBroadcastSource

from .fixtures import (
    DEFAULT_TARGET_COUNTRY,
    DEFAULT_TIMEZONE,
    convert,
    is_in_scope,
    is_on_date,
)

logger = get_logger("aggregation.pipeline")


class MatchAggregator:
    """
    Orchestrazione di un run giornaliero:
    cache -> fonte autorevole -> filtro/conversione -> pool palinsesti ->
    riconciliazione -> ordinamento -> cache.

    Gli errori non escono mai da get_matches: l'unico esito visibile di un
    fallimento è una lista vuota.
    """

    def __init__(
        self,
        fixtures_source: FixturesSource,
        broadcast_sources: Sequence[BroadcastSource],
        cache: Optional[CacheStore] = None,
        *,
        use_cache: bool = True,
        timezone: str = DEFAULT_TIMEZONE,
        target_country: str = DEFAULT_TARGET_COUNTRY,
        allowed_league_ids: Sequence[int] = DEFAULT_ALLOWED_LEAGUE_IDS,
    ) -> None:
        self._fixtures_source = fixtures_source
        self._broadcast_sources = list(broadcast_sources)
        self._cache = cache
        self._use_cache = use_cache and cache is not None
        self._timezone = timezone
        self._target_country = target_country
        self._allowed_league_ids = list(allowed_league_ids)

    # ------------------------------------------------------------------
    # Fasi
    # ------------------------------------------------------------------

    async def _fetch_fixtures(self, dia: str) -> Optional[List[Dict[str, Any]]]:
        try:
            return await asyncio.to_thread(self._fixtures_source.fetch_fixtures, dia_to_iso(dia))
        except Exception as exc:
            logger.error("Recupero fixtures fallito per %s: %s", dia, exc, extra={"dia": dia})
            return None

    def _build_fixtures(self, raw_records: List[Dict[str, Any]], dia: str) -> MatchDataset:
        out: MatchDataset = []
        skipped_shape = off_date = out_of_scope = 0
        for raw in raw_records:
            try:
                record = SourceFixture.from_api(raw)
            except InvalidRecordError as exc:
                skipped_shape += 1
                logger.warning("Record fixture scartato: %s", exc)
                continue
            if not is_on_date(record, dia, self._timezone):
                off_date += 1
                continue
            if not is_in_scope(record, self._target_country, self._allowed_league_ids):
                out_of_scope += 1
                continue
            try:
                match = convert(record, dia, self._timezone)
            except KickoffParseError as exc:
                logger.warning("Orario non interpretabile, partita scartata: %s", exc)
                continue
            if match is not None:
                out.append(match)
        logger.debug(
            "Fixtures filtrate dia=%s kept=%s shape=%s off_date=%s out_of_scope=%s",
            dia,
            len(out),
            skipped_shape,
            off_date,
            out_of_scope,
        )
        return out

    async def _fetch_pool(self, source: BroadcastSource, dia: str) -> List[BroadcastSourceMatch]:
        try:
            return list(await source.fetch_matches(dia))
        except Exception as exc:
            logger.warning(
                "Fonte %s non disponibile, uso pool vuoto: %s",
                source.name,
                exc,
                extra={"source": source.name},
            )
            return []

    async def _fetch_pools(self, dia: str) -> List[List[BroadcastSourceMatch]]:
        # Ogni fetch è isolato: il fallimento di uno non cancella gli altri
        return list(await asyncio.gather(*(self._fetch_pool(s, dia) for s in self._broadcast_sources)))

    def _load(self, key: str) -> Optional[MatchDataset]:
        try:
            return self._cache.get(key)
        except Exception as exc:
            logger.warning("Lettura cache fallita per %s, la ignoro: %s", key, exc)
            return None

    def _store(self, key: str, matches: MatchDataset) -> None:
        if self._cache is None:
            return
        try:
            self._cache.set(key, matches)
        except Exception as exc:
            logger.warning("Scrittura cache fallita per %s: %s", key, exc)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def get_matches(self, dia: Optional[str] = None) -> MatchDataset:
        dia = resolve_dia(dia)
        key = cache_key(dia)

        if self._use_cache:
            cached = self._load(key)
            if cached is not None:
                logger.info("Cache hit per %s (%s partite)", dia, len(cached))
                return cached

        raw_records = await self._fetch_fixtures(dia)
        if raw_records is None:
            # Non si scrive in cache: il prossimo run potrà ritentare
            return []

        fixtures = self._build_fixtures(raw_records, dia)
        if not fixtures:
            logger.info("Nessuna partita in ambito per %s", dia)
            self._store(key, [])
            return []

        pools = await self._fetch_pools(dia)

        result: MatchDataset = []
        for fixture in fixtures:
            fixture.canais = reconcile_all(fixture, pools)
            if fixture.canais:
                result.append(fixture)

        result.sort(key=lambda m: m.date)
        self._store(key, result)
        logger.info(
            "Aggregazione completata per %s",
            dia,
            extra={
                "run_summary": {"fixtures": len(fixtures), "with_broadcast": len(result)},
                "pool_sizes": {s.name: len(p) for s, p in zip(self._broadcast_sources, pools)},
            },
        )
        return result


def build_default_aggregator(use_cache: Optional[bool] = None) -> MatchAggregator:
    """Aggregatore con i collaboratori reali configurati da variabili d'ambiente."""
    settings = get_settings()
    sources: List[BroadcastSource] = [UolBroadcastSource()]
    if settings.enable_futebolnatv:
        sources.append(FutebolNaTvBroadcastSource())
    return MatchAggregator(
        ApiFootballFixturesProvider(),
        sources,
        JsonFileCache(Path(settings.data_dir) / settings.cache_file),
        use_cache=settings.enable_cache if use_cache is None else use_cache,
        timezone=settings.timezone,
        target_country=settings.target_country,
        allowed_league_ids=settings.allowed_league_ids,
    )


async def get_matches(dia: Optional[str] = None, *, use_cache: Optional[bool] = None) -> MatchDataset:
    """
    Partite del giorno ('dd-mm-aaaa') con almeno un canale di trasmissione,
    ordinate per orario. Data assente o non valida: oggi.
    """
    return await build_default_aggregator(use_cache=use_cache).get_matches(dia)


__all__ = ["MatchAggregator", "build_default_aggregator", "get_matches"]
