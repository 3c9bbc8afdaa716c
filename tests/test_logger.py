# File: tests/test_logger.py
import logging
from logging.handlers import RotatingFileHandler

import pytest

from kb_scout.config import KnowledgeConfig
from kb_scout.logger import DEFAULT_BACKUPS, DEFAULT_MAX_BYTES, LOGGER_NAME, configure, configure_from


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    configure()


def _rotating(lg: logging.Logger) -> list[RotatingFileHandler]:
    return [h for h in lg.handlers if isinstance(h, RotatingFileHandler)]


def test_stdout_only_by_default():
    lg = configure_from(KnowledgeConfig())
    assert lg.name == LOGGER_NAME
    assert lg.level == logging.INFO
    assert len(lg.handlers) == 1 and not _rotating(lg)
    assert not lg.propagate


def test_rotation_policy_comes_from_config(tmp_path):
    cfg = KnowledgeConfig(log_file=tmp_path / "kb.log", log_max_bytes=2048, log_backups=5, log_level="debug")
    lg = configure_from(cfg)

    (handler,) = _rotating(lg)
    assert handler.baseFilename == str(tmp_path / "kb.log")
    assert (handler.maxBytes, handler.backupCount) == (2048, 5)
    assert lg.level == logging.DEBUG

    lg.info("Crawl done. Total: %d", 3)
    handler.flush()
    assert "Crawl done. Total: 3" in (tmp_path / "kb.log").read_text(encoding="utf-8")


def test_explicit_arguments_override_config(tmp_path):
    cfg = KnowledgeConfig(log_file=tmp_path / "config.log", log_max_bytes=2048)
    lg = configure_from(cfg, level="ERROR", log_file=tmp_path / "cli.log", log_format="%(message)s")

    (handler,) = _rotating(lg)
    assert handler.baseFilename == str(tmp_path / "cli.log")
    assert handler.maxBytes == 2048
    assert handler.formatter._fmt == "%(message)s"
    assert lg.level == logging.ERROR


def test_reconfigure_closes_previous_file_handler(tmp_path):
    lg = configure(log_file=tmp_path / "a.log")
    (old,) = _rotating(lg)
    configure(log_file=tmp_path / "b.log")
    assert old.stream is None
    assert [h.baseFilename for h in _rotating(lg)] == [str(tmp_path / "b.log")]


def test_rotation_defaults():
    cfg = KnowledgeConfig()
    assert (cfg.log_max_bytes, cfg.log_backups) == (DEFAULT_MAX_BYTES, DEFAULT_BACKUPS) == (5 * 1024 * 1024, 3)
    assert cfg.log_file is None and cfg.log_level == "INFO"
