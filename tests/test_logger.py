"""
Unit tests for logging configuration.
"""
import logging

from core.constraint_manager import ConstraintManager
from utils.logger import LOGGER_NAME, MODULE_LOGGERS, configure_logging


class TestConfigureLogging:
    """Tests for configure_logging."""

    def teardown_method(self):
        for name in (LOGGER_NAME,) + MODULE_LOGGERS:
            logger = logging.getLogger(name)
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()

    def _read(self, log_path):
        for handler in logging.getLogger(LOGGER_NAME).handlers:
            handler.flush()
        return log_path.read_text(encoding="utf-8")

    def test_writes_to_log_file(self, tmp_path):
        """Test that module loggers reach the log file."""
        log_path = tmp_path / "logs" / "run.log"
        configure_logging("INFO", log_path)
        logging.getLogger("scheduler.solver").info("solving")
        assert "solving" in self._read(log_path)

    def test_returned_logger_writes(self, tmp_path):
        """Test that the returned logger writes to the log file too."""
        log_path = tmp_path / "run.log"
        logger = configure_logging("INFO", log_path)
        logger.info("starting run")
        assert "starting run" in self._read(log_path)

    def test_constraint_manager_debug_captured(self, tmp_path):
        """Test that rule application lines are logged at debug level."""
        log_path = tmp_path / "run.log"
        configure_logging("DEBUG", log_path)

        def sample_rule(model, state):
            pass

        cm = ConstraintManager(None, None)
        cm.add_rule(sample_rule)
        cm.add_rule(sample_rule, condition=False)
        cm.apply_all()
        text = self._read(log_path)
        assert "Applying sample_rule" in text
        assert "Skipping sample_rule" in text

    def test_idempotent(self, tmp_path):
        """Test that configuring twice does not duplicate handlers."""
        log_path = tmp_path / "run.log"
        logger = configure_logging("INFO", log_path)
        configure_logging("INFO", log_path)
        assert len(logger.handlers) == 2
        for name in MODULE_LOGGERS:
            assert len(logging.getLogger(name).handlers) == 2
