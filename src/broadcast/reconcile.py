from __future__ import annotations

from typing import Iterable, List, Sequence

from core.logging import get_logger
from core.models import BroadcastSourceMatch, Match

from .channels import apply_channel_precedence, normalize_channels
from .matching import matches

logger = get_logger("broadcast.reconcile")


def _is_well_formed(record: BroadcastSourceMatch) -> bool:
    names = record.nome_times
    if not isinstance(names, (list, tuple)) or len(names) < 2:
        return False
    if not all(isinstance(n, str) and n.strip() for n in names[:2]):
        return False
    return isinstance(record.hora, str) and bool(record.hora.strip())


def reconcile(fixture: Match, pool: Sequence[BroadcastSourceMatch]) -> List[str]:
    """
    Canali (normalizzati, senza duplicati) di tutti i record del pool che
    corrispondono alla partita. Passata singola sul pool.
    """
    found: List[str] = []
    for record in pool:
        if not _is_well_formed(record):
            logger.debug("Record incompleto ignorato: %s", record)
            continue
        if not matches(fixture.nome_times, fixture.hora, record.nome_times[:2], record.hora):
            continue
        for name in normalize_channels(record.canais):
            if name not in found:
                found.append(name)
    return found


def reconcile_all(fixture: Match, pools: Iterable[Sequence[BroadcastSourceMatch]]) -> List[str]:
    """Unione dei canali trovati in ciascun pool, con la precedenza dei feed numerati applicata."""
    union: List[str] = []
    for pool in pools:
        for name in reconcile(fixture, pool):
            if name not in union:
                union.append(name)
    return apply_channel_precedence(union)


__all__ = ["reconcile", "reconcile_all"]
