"""Tests for structured logging."""

from __future__ import annotations

import logging
from pathlib import Path

from rskills.core.logging import get_logger, log_command, log_error, reset_logger, setup_logging


class TestSetupLogging:
    def setup_method(self):
        reset_logger()

    def teardown_method(self):
        reset_logger()

    def test_setup_returns_logger(self):
        logger = setup_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == "rskills"

    def test_setup_debug_level(self):
        logger = setup_logging(log_level="DEBUG")
        assert logger.level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        logger = setup_logging(log_level="chatty")
        assert logger.level == logging.INFO

    def test_setup_with_file_handler(self, tmp_path: Path):
        logs_dir = tmp_path / "logs"
        logger = setup_logging(logs_dir=logs_dir)
        assert logs_dir.exists()
        assert len(logger.handlers) == 2

    def test_setup_without_file_handler(self):
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_setup_idempotent(self):
        assert setup_logging() is setup_logging()

    def test_get_logger_auto_setup(self):
        assert isinstance(get_logger(), logging.Logger)

    def test_module_loggers_propagate(self, tmp_path: Path):
        logs_dir = tmp_path / "logs"
        setup_logging(log_level="DEBUG", logs_dir=logs_dir)
        logging.getLogger("rskills.translation.compare").info("compared 3 files")
        assert "compared 3 files" in (logs_dir / "rskills.log").read_text(encoding="utf-8")


class TestLogFunctions:
    def setup_method(self):
        reset_logger()

    def teardown_method(self):
        reset_logger()

    def test_log_command(self, tmp_path: Path):
        logs_dir = tmp_path / "logs"
        setup_logging(log_level="DEBUG", logs_dir=logs_dir)
        log_command(["cargo", "clippy"], 0, 1234.5)
        content = (logs_dir / "rskills.log").read_text(encoding="utf-8")
        assert "cmd='cargo clippy'" in content
        assert "duration=1234ms" in content or "duration=1235ms" in content

    def test_log_command_error(self, tmp_path: Path):
        logs_dir = tmp_path / "logs"
        setup_logging(log_level="DEBUG", logs_dir=logs_dir)
        log_command(["cargo", "test"], None, 10.0, error="timeout")
        content = (logs_dir / "rskills.log").read_text(encoding="utf-8")
        assert "ERROR" in content
        assert "error=timeout" in content

    def test_log_error(self, tmp_path: Path):
        logs_dir = tmp_path / "logs"
        setup_logging(log_level="DEBUG", logs_dir=logs_dir)
        log_error("command_failed", "cargo test failed", exit_code=101)
        content = (logs_dir / "rskills.log").read_text(encoding="utf-8")
        assert "category=command_failed" in content
        assert "exit_code=101" in content
