"""Tests for unified logging setup."""

from __future__ import annotations

import json
import logging

import pytest

from wipe_control.configs.loader import LoggingConfig
from wipe_control.utils import logging_config


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logging_config.setup_logging(to_stderr=False, capture_warnings=False)
    logging_config.pop_context()
    logging.captureWarnings(False)


def test_logging_idempotency(tmp_path):
    """Repeated setup must not duplicate file output."""
    log_path = tmp_path / "wiper.log"

    logging_config.setup_logging(
        log_level="INFO",
        log_file=str(log_path),
        json=True,
        to_stderr=False,
        context={"app": "wiper"},
    )
    logger = logging_config.get_logger("wiper_test")
    logger.info("hello")

    logging_config.setup_logging(
        log_level="INFO",
        log_file=str(log_path),
        json=True,
        to_stderr=False,
    )
    logger.info("world")

    lines = log_path.read_text().strip().splitlines()
    assert len(lines) == 2

    rec = json.loads(lines[0])
    assert rec["msg"] == "hello"
    assert rec["lvl"] == "INFO"
    assert rec.get("app") == "wiper"


def test_human_format_includes_context(tmp_path):
    log_path = tmp_path / "human.log"
    logging_config.setup_logging(
        log_level="DEBUG", log_file=str(log_path), to_stderr=False,
    )
    logging_config.push_context(app="wiper", job="benchy.gcode")
    logging_config.get_logger("wiper_test").debug("pruned")

    line = log_path.read_text().strip()
    assert "| DEBUG" in line
    assert "app=wiper job=benchy.gcode |" in line
    assert line.endswith("pruned")


def test_level_filters_records(tmp_path):
    log_path = tmp_path / "level.log"
    logging_config.setup_logging(
        log_level="WARNING", log_file=str(log_path), to_stderr=False,
    )
    logger = logging_config.get_logger("wiper_test")
    logger.info("dropped")
    logger.warning("kept")
    logging_config.set_level("DEBUG")
    logger.debug("now visible")

    text = log_path.read_text()
    assert "dropped" not in text
    assert "kept" in text
    assert "now visible" in text


def test_push_and_pop_context():
    logging_config.push_context(app="wiper", layer=3)
    logging_config.push_context(layer=4)
    assert logging_config.get_context() == {"app": "wiper", "layer": 4}

    logging_config.pop_context(keys=["layer"])
    assert logging_config.get_context() == {"app": "wiper"}

    logging_config.pop_context()
    assert logging_config.get_context() == {}


def test_returns_installed_handlers(tmp_path):
    handlers = logging_config.setup_logging(
        log_file=str(tmp_path / "x.log"), to_stderr=True,
    )
    assert len(handlers) == 2
    root = logging.getLogger()
    assert all(h in root.handlers for h in handlers)


def test_unknown_format_mode():
    with pytest.raises(ValueError, match="Unknown format mode"):
        logging_config.ContextFormatter("xml")


def test_setup_from_wiper_config(tmp_path):
    log_path = tmp_path / "cfg.log"
    cfg = LoggingConfig(log_level="DEBUG", log_file=str(log_path), json_format=True)
    logging_config.setup_logging(
        **cfg.setup_kwargs(), to_stderr=False, context={"app": "wiper"},
    )
    logging_config.get_logger("wiper_test").debug("from config")

    rec = json.loads(log_path.read_text().strip())
    assert rec["msg"] == "from config"
    assert rec["lvl"] == "DEBUG"
    assert rec.get("app") == "wiper"
