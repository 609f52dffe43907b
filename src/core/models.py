from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class Match:
    """
    Partita canonica (fonte autorevole) arricchita con i canali di trasmissione.

    L'identità non è memorizzata: due partite coincidono per (nome_times, hora)
    secondo il matcher fuzzy.
    """

    campeonato: str
    estadio: str
    hora: str                     # 21h30
    times: Tuple[str, str]        # ("SAN", "GRE")
    nome_times: Tuple[str, str]   # ("Santos", "Grêmio")
    escudos: Tuple[str, str]
    date: datetime                # orario locale naive
    canais: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "campeonato": self.campeonato,
            "estadio": self.estadio,
            "hora": self.hora,
            "times": list(self.times),
            "nome_times": list(self.nome_times),
            "canais": list(self.canais),
            "escudos": list(self.escudos),
            "date": self.date.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Match":
        return cls(
            campeonato=raw.get("campeonato") or "",
            estadio=raw.get("estadio") or "",
            hora=raw["hora"],
            times=_pair(raw.get("times")),
            nome_times=_pair(raw.get("nome_times")),
            escudos=_pair(raw.get("escudos")),
            date=datetime.fromisoformat(raw["date"]),
            canais=list(raw.get("canais") or []),
        )


@dataclass(frozen=True)
class BroadcastSourceMatch:
    """Partita estratta da un sito di palinsesti: nomi e orario così come resi dalla fonte."""

    nome_times: Tuple[str, ...]
    hora: Optional[str]
    canais: Tuple[str, ...]
    campeonato: str = ""
    fonte: str = ""


def _pair(value: Any) -> Tuple[str, str]:
    items = list(value or [])
    items += [""] * (2 - len(items))
    return (str(items[0] or ""), str(items[1] or ""))


MatchDataset = List[Match]
