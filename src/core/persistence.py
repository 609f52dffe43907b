from __future__ import annotations

import json
import logging
import os
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from .models import Match, MatchDataset

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# File names
# ---------------------------------------------------------------------------
CACHE_FILE_NAME = "matches_cache.json"
CACHE_KEY_PREFIX = "jogos:"


def cache_key(dia: str) -> str:
    """Chiave di cache derivata dalla data formattata ('dd-mm-aaaa')."""
    return f"{CACHE_KEY_PREFIX}{dia}"


# ---------------------------------------------------------------------------
# Path helpers (runtime: rispettano TV_DATA_DIR se impostata)
# ---------------------------------------------------------------------------


def _data_dir() -> Path:
    return Path(os.getenv("TV_DATA_DIR", "data"))


def default_cache_path() -> Path:
    return _data_dir() / os.getenv("TV_CACHE_FILE", CACHE_FILE_NAME)


# ---------------------------------------------------------------------------
# Low level
# ---------------------------------------------------------------------------


def _ensure_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _write_json_atomic(path: Path, data: Any, indent: int = 2) -> None:
    _ensure_dir(path)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=indent)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, path)


def _load_json_dict(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except (JSONDecodeError, UnicodeDecodeError):
        LOGGER.warning("Invalid / corrupt cache JSON at %s", path)
        return {}
    except OSError as e:
        LOGGER.warning("Error reading cache file %s: %s", path, e)
        return {}
    if not isinstance(raw, dict):
        LOGGER.warning("Invalid structure in cache JSON (expected object) at %s", path)
        return {}
    return raw


# ---------------------------------------------------------------------------
# Cache store
# ---------------------------------------------------------------------------


class CacheStore(Protocol):
    def get(self, key: str) -> Optional[MatchDataset]:
        ...

    def set(self, key: str, matches: MatchDataset) -> None:
        ...


class JsonFileCache:
    """
    Cache su file JSON: mappa chiave-data -> lista di partite serializzate.

    Il file è letto ad ogni get e riscritto per intero (atomico) ad ogni set.
    Corse concorrenti sulla stessa data: vince l'ultima scrittura.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else default_cache_path()

    def get(self, key: str) -> Optional[MatchDataset]:
        data = _load_json_dict(self.path)
        if key not in data:
            return None
        items = data[key]
        if not isinstance(items, list):
            LOGGER.warning("Invalid cache entry for %s (expected list)", key)
            return None
        out: MatchDataset = []
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                out.append(Match.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                LOGGER.warning("Skipping invalid cached match for %s: %s", key, e)
        return out

    def set(self, key: str, matches: MatchDataset) -> None:
        data = _load_json_dict(self.path)
        data[key] = [m.to_dict() for m in matches]
        _write_json_atomic(self.path, data)


class MemoryCache:
    """Cache in memoria (processo singolo, test)."""

    def __init__(self) -> None:
        self._data: Dict[str, List[Dict[str, Any]]] = {}

    def get(self, key: str) -> Optional[MatchDataset]:
        items = self._data.get(key)
        if items is None:
            return None
        return [Match.from_dict(item) for item in items]

    def set(self, key: str, matches: MatchDataset) -> None:
        self._data[key] = [m.to_dict() for m in matches]


__all__ = [
    "CacheStore",
    "JsonFileCache",
    "MemoryCache",
    "cache_key",
    "default_cache_path",
]
