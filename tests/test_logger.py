import logging
from types import SimpleNamespace

from cago.utils import logger as logger_module
from cago.utils.logger import CorrelationFilter, correlation_id_var, setup_logger


def test_level_comes_from_settings(monkeypatch):
    monkeypatch.setattr(logger_module, "get_settings", lambda: SimpleNamespace(log_level="DEBUG"))

    log = setup_logger("cago.level-from-settings")

    assert log.level == logging.DEBUG


def test_explicit_level_wins(monkeypatch):
    monkeypatch.setattr(logger_module, "get_settings", lambda: SimpleNamespace(log_level="DEBUG"))

    assert setup_logger("cago.explicit-level", level="ERROR").level == logging.ERROR


def test_records_carry_current_correlation_id():
    record = logging.LogRecord("cago", logging.INFO, __file__, 1, "hello", None, None)
    token = correlation_id_var.set("req-123")
    try:
        assert CorrelationFilter().filter(record)
    finally:
        correlation_id_var.reset(token)

    assert record.correlation_id == "req-123"
