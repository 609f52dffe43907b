from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional

from core.logging import get_logger

logger = get_logger("core.dates")

_DIA_RE = re.compile(r"^\d{2}-\d{2}-\d{4}$")
_HORA_RE = re.compile(r"^(\d{1,2})h(\d{1,2})?$", re.IGNORECASE)


class KickoffParseError(ValueError):
    """Orario di calcio d'inizio non conforme al formato '21h30' / '19h'."""


def format_dia(d: date) -> str:
    """Formatta una data come 'dd-mm-aaaa'."""
    return d.strftime("%d-%m-%Y")


def today_dia() -> str:
    return format_dia(datetime.now().date())


def parse_dia(dia: str) -> date:
    """
    Converte 'dd-mm-aaaa' in date.
    Solleva ValueError se la stringa non rispetta il formato o non è una data reale.
    """
    if not _DIA_RE.match(dia):
        raise ValueError(f"Data non valida (atteso dd-mm-aaaa): {dia!r}")
    return datetime.strptime(dia, "%d-%m-%Y").date()


def dia_to_iso(dia: str) -> str:
    return parse_dia(dia).isoformat()


def resolve_dia(dia: Optional[str]) -> str:
    """
    Ritorna la data richiesta se valida, altrimenti la data odierna.
    Una data malformata produce un warning, mai un errore.
    """
    if dia is None:
        return today_dia()
    if isinstance(dia, str):
        try:
            parse_dia(dia)
            return dia
        except ValueError:
            pass
    logger.warning("Data non valida %r. Uso la data odierna.", dia)
    return today_dia()


def parse_kickoff(dia: str, hora: str) -> datetime:
    """
    Costruisce il datetime locale (naive) a partire da 'dd-mm-aaaa' e '21h30'.

    I minuti sono opzionali ('19h' -> 19:00). Qualsiasi altra forma
    solleva KickoffParseError.
    """
    if not isinstance(hora, str):
        raise KickoffParseError(f"Orario mancante: {hora!r}")
    m = _HORA_RE.match(hora.strip())
    if not m:
        raise KickoffParseError(f"Formato orario non valido: {hora!r} (es: 21h30, 19h, 15h)")
    d = parse_dia(dia)
    hours = int(m.group(1))
    minutes = int(m.group(2)) if m.group(2) else 0
    try:
        return datetime(d.year, d.month, d.day, hours, minutes)
    except ValueError as e:
        raise KickoffParseError(f"Orario fuori intervallo: {hora!r}") from e


def format_hora(dt: datetime) -> str:
    return f"{dt.hour:02d}h{dt.minute:02d}"


__all__ = [
    "KickoffParseError",
    "format_dia",
    "today_dia",
    "parse_dia",
    "dia_to_iso",
    "resolve_dia",
    "parse_kickoff",
    "format_hora",
]
