"""
Unit tests for logging configuration.
It asserts expected behavior and guards against regressions in the corresponding component.
These tests are executed by `pytest` locally and in CI and should remain deterministic.
"""

import logging

import pytest

from pesaflow.common import logging as logging_module


def test_configure_logging_caps_pdf_loggers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(logging_module, "_LOGGING_CONFIGURED", False)
    for name in logging_module.NOISY_LOGGERS:
        monkeypatch.setattr(logging.getLogger(name), "level", logging.NOTSET)

    logging_module.configure_logging("debug")

    assert logging.getLogger("fpdf").level == logging.WARNING
    assert logging.getLogger("fontTools").level == logging.WARNING
    assert logging_module._LOGGING_CONFIGURED is True


def test_configure_logging_runs_once(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(logging_module, "_LOGGING_CONFIGURED", True)
    monkeypatch.setattr(logging.getLogger("fpdf"), "level", logging.NOTSET)

    logging_module.configure_logging("error")

    assert logging.getLogger("fpdf").level == logging.NOTSET
