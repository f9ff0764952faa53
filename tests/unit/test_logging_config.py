"""
Tests for structlog configuration

Checks:
1. Level names and constants accepted
2. Unknown level rejected
3. JSON renderer output
"""

import json
import logging

import pytest
import structlog

from cart_engine.logging_config import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging"""

    def test_json_output(self, capsys) -> None:
        configure_logging("info", json=True)

        structlog.get_logger("cart_engine.test").info("cart_hydrated", cart_id="cart-1", line_count=2)

        record = json.loads(capsys.readouterr().out.strip())
        assert record["event"] == "cart_hydrated"
        assert record["cart_id"] == "cart-1"
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_level_filters(self, capsys) -> None:
        configure_logging(logging.WARNING, json=True)

        structlog.get_logger().info("tier_dropped")
        assert capsys.readouterr().out == ""

    def test_unknown_level(self) -> None:
        with pytest.raises(ValueError):
            configure_logging("loud")
