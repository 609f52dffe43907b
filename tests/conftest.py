import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from core.config import _reset_settings_cache_for_tests  # noqa: E402


@pytest.fixture(autouse=True)
def reset_settings_cache():
    _reset_settings_cache_for_tests()
    yield
    _reset_settings_cache_for_tests()


@pytest.fixture
def env(monkeypatch, tmp_path):
    monkeypatch.setenv("API_FOOTBALL_KEY", "DUMMY")
    monkeypatch.setenv("TV_DATA_DIR", str(tmp_path))
    _reset_settings_cache_for_tests()
    return tmp_path


@pytest.fixture
def api_fixture():
    """Factory di record grezzi nel formato API-Football /fixtures."""

    def _build(
        home="Santos",
        away="Grêmio",
        date="2025-11-19T21:30:00-03:00",
        league_id=71,
        league_name="Serie A",
        country="Brazil",
        venue="Vila Belmiro",
    ):
        return {
            "fixture": {"id": 1, "date": date, "venue": {"name": venue}},
            "league": {"id": league_id, "name": league_name, "country": country},
            "teams": {
                "home": {"id": 10, "name": home, "logo": f"https://media.example/{home}.png"},
                "away": {"id": 20, "name": away, "logo": f"https://media.example/{away}.png"},
            },
        }

    return _build
