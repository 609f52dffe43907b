from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from core.models import BroadcastSourceMatch


class FixturesSource(ABC):
    """
    Interfaccia astratta per la fonte autorevole delle partite.

    Le implementazioni restituiscono i record grezzi del giorno; eventuali
    errori di rete/HTTP vengono propagati (l'orchestratore interrompe il run).
    """

    @abstractmethod
    def fetch_fixtures(self, date: str) -> List[Dict[str, Any]]:
        """
        Parametri:
            date: data in formato YYYY-MM-DD.

        Ritorna:
            Lista di dizionari (record grezzi della fonte).
        """
        raise NotImplementedError


class BroadcastSource(ABC):
    """
    Interfaccia astratta per un sito di palinsesti TV.

    Un errore viene trattato dall'orchestratore come pool vuoto, mai fatale.
    """

    name: str = "broadcast"

    @abstractmethod
    async def fetch_matches(self, dia: str) -> List[BroadcastSourceMatch]:
        """
        Parametri:
            dia: data in formato dd-mm-aaaa.
        """
        raise NotImplementedError
