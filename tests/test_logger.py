import logging

import pytest

from src.server import logger


@pytest.fixture
def log_file(tmp_path, monkeypatch):
    path = tmp_path / "logs" / "server.log"
    monkeypatch.setattr(logger, "LOG_FILE_PATH", path)
    yield path
    logger.stop_logging_listener()


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


def test_listener_requires_queue():
    with pytest.raises(RuntimeError):
        logger.start_logging_listener()


def test_producer_logging_requires_queue():
    with pytest.raises(RuntimeError):
        logger.setup_producer_logging()


def test_query_is_written_to_log_file(log_file, restore_root_logger):
    logger.setup_logging_queue()
    logger.start_logging_listener()
    logger.setup_producer_logging()

    logger.log("2026-01-01 10:00:00", "127.0.0.1", "COMPLETE 3 ca", 1.5)
    logger.stop_logging_listener()

    content = log_file.read_text(encoding="utf-8")
    assert "level=INFO" in content
    assert "Client IP: 127.0.0.1" in content
    assert "Query: 'COMPLETE 3 ca'" in content
    assert "Execution Time: 1.50 ms" in content


def test_stop_without_listener_is_noop():
    logger.stop_logging_listener()
    logger.stop_logging_listener()
