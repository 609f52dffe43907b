import json
import logging

from core.logging import JsonFormatter, get_logger


def test_get_logger_idempotent() -> None:
    logger1 = get_logger("test.logger")
    handlers_before = list(logger1.handlers)
    logger2 = get_logger("test.logger")
    assert logger1 is logger2
    assert len(logger1.handlers) == len(handlers_before)


def test_json_formatter_whitelisted_extra() -> None:
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "ciao %s", ("mondo",), None)
    record.run_summary = {"fixtures": 3}
    record.not_whitelisted = "nascosto"
    payload = json.loads(JsonFormatter().format(record))
    assert payload["msg"] == "ciao mondo"
    assert payload["level"] == "INFO"
    assert payload["run_summary"] == {"fixtures": 3}
    assert "not_whitelisted" not in payload


def test_level_from_env_without_api_key(monkeypatch) -> None:
    # Il livello non dipende da Settings: vale anche senza API_FOOTBALL_KEY
    monkeypatch.delenv("API_FOOTBALL_KEY", raising=False)
    monkeypatch.setenv("TV_LOG_LEVEL", "warning")
    assert get_logger("test.logger.level.warning").level == logging.WARNING
    monkeypatch.setenv("TV_LOG_LEVEL", "boh")
    assert get_logger("test.logger.level.fallback").level == logging.INFO
