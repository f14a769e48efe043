"""
Tests for logging configuration.
"""
import logging

import pytest

from pos_pricing.logging_config import QUIET_LOGGERS, setup_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("PRICING_LOG_LEVEL", raising=False)
    names = ("pos_pricing", "pos_pricing.pricing") + QUIET_LOGGERS
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


class TestLoggingConfiguration:
    """Service and pricing log levels."""

    def test_defaults_to_info(self):
        setup_logging()

        assert logging.getLogger("pos_pricing").level == logging.INFO
        assert logging.getLogger("pos_pricing.pricing").level == logging.INFO

    def test_log_level_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        setup_logging()

        assert logging.getLogger("pos_pricing").level == logging.WARNING

    def test_explicit_level_beats_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        setup_logging(level="error")

        assert logging.getLogger("pos_pricing").level == logging.ERROR

    def test_unknown_level_means_info(self):
        setup_logging(level="LOUD")

        assert logging.getLogger("pos_pricing").level == logging.INFO

    def test_pricing_trace_without_sql_echo(self, monkeypatch):
        monkeypatch.setenv("PRICING_LOG_LEVEL", "DEBUG")
        setup_logging(level="INFO")

        assert logging.getLogger("pos_pricing.pricing").level == logging.DEBUG
        assert logging.getLogger("pos_pricing").level == logging.INFO
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_unknown_pricing_level_follows_service_level(self, monkeypatch):
        monkeypatch.setenv("PRICING_LOG_LEVEL", "chatty")
        setup_logging(level="WARNING")

        assert logging.getLogger("pos_pricing.pricing").level == logging.WARNING

    def test_library_loggers_quiet_outside_debug(self):
        setup_logging(level="INFO")

        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING


class TestPricingLogs:
    """Pricing logs stay free of anything but ids and amounts at INFO."""

    def test_success_is_logged_at_info(self, pricing_engine, caplog):
        from pos_pricing.seed_demo import DEMO_RESTAURANT_ID, CHICKEN_DINNER_VARIANT_ID

        with caplog.at_level(logging.INFO, logger="pos_pricing"):
            pricing_engine.calculate_price({
                "restaurant_id": DEMO_RESTAURANT_ID,
                "item_type": "chicken",
                "variant_id": CHICKEN_DINNER_VARIANT_ID,
            })

        messages = [record.getMessage() for record in caplog.records if record.levelno == logging.INFO]
        assert any("23.00" in message for message in messages)
