"""Tests for structlog configuration."""

import json

import pytest
import structlog

from pos_ledger import logging_setup
from pos_ledger.catalog import ProductCatalog


@pytest.fixture
def restore_logging():
    yield
    if logging_setup._log_file is not None:
        logging_setup._log_file.close()
        logging_setup._log_file = None
    structlog.reset_defaults()


def test_events_are_written_as_json_lines(tmp_path, restore_logging):
    log_path = tmp_path / "logs" / "debug.log"
    logging_setup.configure_logging(str(log_path))

    ProductCatalog().add("Tea", 10)
    logging_setup._log_file.flush()

    record = json.loads(log_path.read_text(encoding="utf-8").splitlines()[-1])
    assert record["event"] == "product_added"
    assert record["level"] == "info"
    assert record["name"] == "Tea"
    assert "timestamp" in record


def test_unopenable_path_falls_back_to_stderr(tmp_path, capsys, restore_logging):
    blocker = tmp_path / "file"
    blocker.write_text("")

    logging_setup.configure_logging(str(blocker / "debug.log"))
    structlog.get_logger("test").info("still_logging")

    err = capsys.readouterr().err
    assert "cannot open debug log" in err
    assert "still_logging" in err
