"""Tests for logger setup."""

import logging
import os
import time

from edi_engine.logger import LOGGER_NAME, cleanup_old_logs, get_logger, setup_logger


class TestLogger:
    """Tests for setup_logger and cleanup_old_logs."""

    def test_setup_creates_log_file(self, tmp_path):
        """Should attach one file and one console handler."""
        logger = setup_logger(log_dir=str(tmp_path))
        logger.info("hello")

        assert logger is get_logger()
        assert logger.name == LOGGER_NAME
        assert len(logger.handlers) == 2
        assert len(list(tmp_path.glob("edi_engine_*.log"))) == 1

    def test_setup_twice_replaces_handlers(self, tmp_path):
        """Should not stack handlers on repeated setup."""
        setup_logger(log_dir=str(tmp_path))
        logger = setup_logger(log_dir=str(tmp_path))
        assert len(logger.handlers) == 2
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)

    def test_cleanup_old_logs(self, tmp_path):
        """Should delete only logs older than the retention period."""
        old = tmp_path / "old.log"
        new = tmp_path / "new.log"
        old.write_text("old")
        new.write_text("new")
        stale = time.time() - 20 * 24 * 60 * 60
        os.utime(old, (stale, stale))

        assert cleanup_old_logs(tmp_path, retention_days=10) == 1
        assert not old.exists()
        assert new.exists()
