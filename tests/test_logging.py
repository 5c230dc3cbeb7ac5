"""Tests for logging setup."""

from __future__ import annotations

import logging

import pytest
import structlog

from flagstore.core.logging import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_levels():
    names = ("flagstore", "sqlalchemy.engine")
    levels = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)
    structlog.reset_defaults()


def test_setup_logging_uses_setting_by_default():
    setup_logging()

    assert logging.getLogger("flagstore").level == logging.INFO
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_setup_logging_level_override():
    setup_logging("DEBUG")

    assert logging.getLogger("flagstore").level == logging.DEBUG
    # SQL stays quiet outside debug mode
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_events_reach_stdlib_logging(caplog):
    setup_logging("DEBUG")

    with caplog.at_level(logging.DEBUG, logger="flagstore"):
        get_logger("flagstore.tests").debug("flag_created", flagger="User:1")

    assert any("flag_created" in record.getMessage() for record in caplog.records)
