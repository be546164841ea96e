from __future__ import annotations

import logging
import logging.handlers
import os

import pytest

from expense_import.utilities import LOGGING, configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_writes_under_given_directory(tmp_path, restore_root_logger):
    log_dir = tmp_path / "nested" / "logs"

    log_file = configure_logging(log_dir)

    assert log_dir.is_dir()
    assert log_file == log_dir / "expense_import.log"
    files = [
        h for h in restore_root_logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)
    ]
    assert [h.baseFilename for h in files] == [os.path.abspath(log_file)]
    assert logging.getLogger("httpx").level == logging.WARNING


def test_configure_logging_leaves_module_config_untouched(tmp_path, restore_root_logger):
    original = LOGGING["handlers"]["file"]["filename"]
    configure_logging(tmp_path)
    assert LOGGING["handlers"]["file"]["filename"] == original
