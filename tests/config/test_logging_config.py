from __future__ import annotations

import logging

import pytest

from erpcore.config import ConfigurationError, configure_logging, resolve_log_level


def test_resolve_log_level_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ERPCORE_LOG_LEVEL", "warning")

    assert resolve_log_level() == logging.WARNING


def test_explicit_level_wins_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ERPCORE_LOG_LEVEL", "ERROR")

    assert resolve_log_level("debug") == logging.DEBUG
    assert resolve_log_level(logging.INFO) == logging.INFO


def test_unknown_level_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        resolve_log_level("LOUD")


def test_configure_logging_quiets_library_loggers() -> None:
    configure_logging(level="INFO", force=True)

    assert logging.getLogger().level == logging.INFO
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
