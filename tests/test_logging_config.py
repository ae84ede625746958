"""
Tests for the logging setup
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from autodeployer.utils.logging_config import get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_setup_logging_writes_thread_names_to_file(tmp_path, restore_root_logger):
    """File records carry the thread name so each target's trail can be followed"""
    root = setup_logging(log_dir=str(tmp_path / "logs"), log_file="run.log")

    get_logger("autodeployer.test").debug("staging files")
    for handler in root.handlers:
        handler.flush()

    content = (tmp_path / "logs" / "run.log").read_text(encoding="utf-8")
    assert "MainThread" in content
    assert "autodeployer.test" in content
    assert "staging files" in content


def test_setup_logging_replaces_handlers(tmp_path, restore_root_logger):
    setup_logging(log_dir=str(tmp_path))
    root = setup_logging(log_dir=str(tmp_path), console_level=logging.INFO)

    assert len(root.handlers) == 2
    console = [h for h in root.handlers if not isinstance(h, RotatingFileHandler)]
    assert console[0].level == logging.INFO


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
