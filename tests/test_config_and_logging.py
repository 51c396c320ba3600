"""Configuration loading and structured logging tests."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from matcher_app.config import MatcherConfig, ScoringWeights
from matcher_app.logging_config import (
    CORRELATION_ID,
    JsonFormatter,
    correlation_context,
    log_event,
    operation_context,
    redact_for_log,
)
from tools.observability import instrument_tool

_ENV_KEYS = (
    "APP_ENV",
    "APP_CONFIG_PATH",
    "MATCHER_CONFIG_DIR",
    "COLOR_WEIGHT",
    "DEFAULT_BUDGET",
    "PRICE_THRESHOLDS",
    "QUERY_LIMIT",
    "RESULT_LIMIT",
    "CATALOG_DB_PATH",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_match_shop_tuning() -> None:
    config = MatcherConfig.from_env()
    assert config.query_limit == 20
    assert config.result_limit == 12
    assert config.image_size == (100, 100)
    assert config.weights == ScoringWeights()
    assert config.weights.price_thresholds == ((0.5, 5.0), (0.8, 3.0), (1.0, 1.0))


def test_yaml_file_and_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "staging.yaml").write_text(
        "\n".join(
            [
                "# staging tuning",
                'catalog_db_path: "/tmp/staging.db"',
                "color_weight: 25",
                "result_limit: 6",
                "price_thresholds: 0.6:5,1.0:2",
            ]
        )
    )
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("MATCHER_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("DEFAULT_BUDGET", "30000")

    config = MatcherConfig.from_env()
    assert config.environment == "staging"
    assert config.catalog_db_path == "/tmp/staging.db"
    assert config.result_limit == 6
    assert config.weights.color == 25.0
    assert config.weights.default_budget == 30000.0
    assert config.weights.price_thresholds == ((0.6, 5.0), (1.0, 2.0))


def test_invalid_weights_are_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(ValueError):
        ScoringWeights(color=-1)
    with pytest.raises(ValueError):
        ScoringWeights(default_budget=0)
    monkeypatch.setenv("PRICE_THRESHOLDS", "0.5-5")
    with pytest.raises(ValueError):
        MatcherConfig.from_env()


def test_redaction_masks_images_and_urls() -> None:
    payload = {
        "image": b"\x89PNG",
        "image_url": "https://cdn.example.com/look.jpg",
        "note": "contact me at shopper@example.com",
        "raw": b"abcd",
        "colors": ("red", "gold"),
    }
    assert redact_for_log(payload) == {
        "image": "[redacted]",
        "image_url": "[redacted]",
        "note": "contact me at [redacted-email]",
        "raw": "[4 bytes]",
        "colors": ["red", "gold"],
    }


def test_json_formatter_includes_correlation_and_extra_fields() -> None:
    record = logging.LogRecord("matcher", logging.INFO, __file__, 1, "hello", None, None)
    record.event = "recommendation_started"
    record.attempts = 2
    with correlation_context("abc123"):
        payload = json.loads(JsonFormatter().format(record))
    assert payload["correlation_id"] == "abc123"
    assert payload["event"] == "recommendation_started"
    assert payload["attempts"] == 2


def test_log_event_redacts_fields(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.log_event")
    with caplog.at_level(logging.INFO, logger="tests.log_event"):
        log_event(logger, logging.INFO, "image_received", image=b"123", correlation_id="cid-1")
    record = caplog.records[-1]
    assert record.event == "image_received"
    assert record.image == "[redacted]"
    assert record.correlation_id == "cid-1"


def test_correlation_context_restores_previous_value() -> None:
    token = CORRELATION_ID.set("outer")
    try:
        with correlation_context("inner") as scoped:
            assert scoped == "inner"
        assert CORRELATION_ID.get() == "outer"
    finally:
        CORRELATION_ID.reset(token)


def test_instrument_tool_logs_failures(caplog: pytest.LogCaptureFixture) -> None:
    @instrument_tool("flaky")
    def flaky() -> None:
        raise RuntimeError("boom")

    with caplog.at_level(logging.DEBUG):
        with pytest.raises(RuntimeError):
            flaky()
    events = [getattr(record, "event", None) for record in caplog.records]
    assert "tool_call_started" in events
    assert "tool_call_failed" in events


def test_redaction_summarises_pixel_arrays_and_inline_urls() -> None:
    pixels = np.zeros((100, 100, 3), dtype=np.uint8)
    assert redact_for_log(pixels) == "[array shape=(100, 100, 3) dtype=uint8]"
    assert redact_for_log("fetched https://cdn.example.com/a.png ok") == "fetched [redacted-url] ok"


def test_operation_context_logs_duration(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG):
        with operation_context("app:suggest", correlation_id="req-9") as scoped:
            assert scoped == "req-9"
    completed = [record for record in caplog.records if getattr(record, "event", None) == "operation_completed"]
    assert completed
    assert completed[-1].operation == "app:suggest"
    assert completed[-1].correlation_id == "req-9"
    assert completed[-1].duration_ms >= 0


def test_operation_context_logs_failures(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG):
        with pytest.raises(KeyError):
            with operation_context("app:analyze"):
                raise KeyError("boom")
    events = [getattr(record, "event", None) for record in caplog.records]
    assert "operation_failed" in events
    assert "operation_completed" not in events


def test_instrument_tool_reports_result_count(caplog: pytest.LogCaptureFixture) -> None:
    @instrument_tool("lookup")
    def lookup(limit: int = 3) -> list:
        return list(range(limit))

    with caplog.at_level(logging.DEBUG):
        assert lookup(limit=2) == [0, 1]
    completed = [record for record in caplog.records if getattr(record, "event", None) == "tool_call_completed"]
    assert completed[-1].result_count == 2
    assert completed[-1].tool == "lookup"
