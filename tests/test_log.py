"""Tests for the ripple logging helpers."""

import logging

import pytest

from log import _ColorFormatter, get_logger, set_level


@pytest.fixture
def restore_level():
    root = logging.getLogger("ripple")
    level = root.level
    yield root
    root.setLevel(level)


def test_logger_hierarchy():
    logger = get_logger("collision.continuous")
    assert logger.name == "ripple.collision.continuous"
    assert logging.getLogger("ripple").handlers


def test_configured_once():
    get_logger("a")
    count = len(logging.getLogger("ripple").handlers)
    get_logger("b")
    assert len(logging.getLogger("ripple").handlers) == count


def test_set_level(restore_level):
    set_level(logging.DEBUG)
    assert get_logger("ga.dense").isEnabledFor(logging.DEBUG)
    set_level("ERROR")
    assert not get_logger("ga.dense").isEnabledFor(logging.WARNING)


def test_color_formatter_leaves_record_untouched():
    record = logging.LogRecord("ripple.x", logging.WARNING, __file__, 1, "hello", None, None)
    text = _ColorFormatter("%(levelname)s %(message)s", use_color=True).format(record)
    assert "\033[33m" in text
    assert record.levelname == "WARNING"
