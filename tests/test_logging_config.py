"""Tests for logging setup."""

import logging

import pytest


@pytest.fixture(autouse=True)
def restore_logging():
    root_logger = logging.getLogger()
    repair_logger = logging.getLogger("workflow")
    saved = (list(root_logger.handlers), root_logger.level, list(repair_logger.handlers), repair_logger.level)
    yield
    for handler in root_logger.handlers + repair_logger.handlers:
        if handler not in saved[0] and handler not in saved[2]:
            handler.close()
    root_logger.handlers[:] = saved[0]
    root_logger.setLevel(saved[1])
    repair_logger.handlers[:] = saved[2]
    repair_logger.setLevel(saved[3])


class TestSetupLogging:
    def test_creates_log_files(self, tmp_path):
        from config.logging_config import setup_logging
        log_dir = setup_logging(log_dir=tmp_path / "logs", console_enabled=False)
        logging.getLogger("workflow.graph").info("repair attempt 1")
        for handler in logging.getLogger().handlers + logging.getLogger("workflow").handlers:
            handler.flush()
        assert (log_dir / "continuity_gate.log").exists()
        assert "repair attempt 1" in (log_dir / "gate_repairs.log").read_text(encoding="utf-8")
        assert "repair attempt 1" in (log_dir / "continuity_gate.log").read_text(encoding="utf-8")

    def test_console_handler_optional(self, tmp_path):
        from config.logging_config import setup_logging
        setup_logging(log_dir=tmp_path, console_enabled=False)
        kinds = [type(h) for h in logging.getLogger().handlers]
        assert logging.StreamHandler not in kinds

        setup_logging(log_dir=tmp_path, console_enabled=True)
        kinds = [type(h) for h in logging.getLogger().handlers]
        assert kinds.count(logging.StreamHandler) == 1

    def test_reinit_does_not_duplicate(self, tmp_path):
        from config.logging_config import setup_logging
        setup_logging(log_dir=tmp_path, console_enabled=False)
        setup_logging(log_dir=tmp_path, console_enabled=False)
        assert len(logging.getLogger().handlers) == 1
        assert len(logging.getLogger("workflow").handlers) == 1

    def test_level(self, tmp_path):
        from config.logging_config import setup_logging
        setup_logging(level=logging.DEBUG, log_dir=tmp_path, console_enabled=False)
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("langgraph").level == logging.WARNING
