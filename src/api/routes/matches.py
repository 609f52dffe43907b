from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from aggregation.pipeline import MatchAggregator, build_default_aggregator
from core.logging import get_logger

router = APIRouter(tags=["matches"])
logger = get_logger("api.routes.matches")


def get_aggregator(
    refresh: bool = Query(False, description="Ignora la cache e rilegge le fonti"),
) -> MatchAggregator:
    return build_default_aggregator(use_cache=False if refresh else None)


@router.get("/matches", summary="Partite del giorno con canali di trasmissione")
async def list_matches(
    date: Optional[str] = Query(None, description="Data dd-mm-aaaa (default: oggi)"),
    aggregator: MatchAggregator = Depends(get_aggregator),
):
    matches = await aggregator.get_matches(date)
    logger.info("GET /matches date=%s count=%s", date, len(matches))
    return {
        "count": len(matches),
        "items": [m.to_dict() for m in matches],
    }
