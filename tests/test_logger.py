"""
Tests for logger functionality.
"""

import logging

import pytest

from companystore.logger import StructuredLogger, get_logger, reset_logger, track_operation


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with default settings."""
        logger = StructuredLogger(name="test", level="INFO", log_dir=tmp_path, enable_console=False)

        assert logger.logger.name == "test"
        assert logger.metrics["queries_executed"] == 0

    def test_log_with_context(self, tmp_path):
        """Context is appended as JSON, non-serializable values as strings."""
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_file=True, enable_console=False)

        logger.info("Message with context", handle="acme", path=tmp_path)

        content = next(tmp_path.glob("*.log")).read_text()
        assert "Message with context | Context: " in content
        assert '"handle": "acme"' in content

    def test_metrics_tracking(self, tmp_path):
        """Metrics should be tracked correctly."""
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)

        logger.record_query()
        logger.record_query()
        logger.record_operation("get")
        logger.record_operation("get")
        logger.record_failure("get", "NotFoundError")

        metrics = logger.get_metrics()
        assert metrics["queries_executed"] == 2
        assert metrics["operations"]["get"]["calls"] == 2
        assert metrics["operations"]["get"]["failures"] == 1
        assert metrics["operations"]["get"]["failure_rate"] == 0.5
        assert metrics["errors_by_type"]["NotFoundError"] == 1

    def test_no_file_by_default(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)
        logger.info("Test message")
        assert list(tmp_path.glob("*.log")) == []

    def test_log_file_creation(self, tmp_path):
        """Log file should be created in specified directory."""
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_file=True, enable_console=False)

        logger.info("Test message")

        log_files = list(tmp_path.glob("*.log"))
        assert len(log_files) == 1
        assert "Test message" in log_files[0].read_text()

    def test_metrics_summary(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_file=True, enable_console=False)
        logger.record_operation("remove")
        logger.record_failure("remove", "NotFoundError")

        logger.log_metrics_summary()

        content = next(tmp_path.glob("*.log")).read_text()
        assert "remove: 1 calls, 1 failed (100.0%)" in content


    def test_get_metrics_does_not_mutate_live_counters(self, tmp_path):
        """Failure rates live only on the returned snapshot."""
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)
        logger.record_operation("get")

        snapshot = logger.get_metrics()
        snapshot["operations"]["get"]["calls"] = 99

        assert snapshot["operations"]["get"]["failure_rate"] == 0.0
        assert logger.metrics["operations"]["get"] == {"calls": 1, "failures": 0}

    def test_metrics_summary_at_debug(self, tmp_path):
        """Summary honours the requested level."""
        logger = StructuredLogger(name="test", level="INFO", log_dir=tmp_path, enable_file=True, enable_console=False)
        logger.log_metrics_summary(level=logging.DEBUG)
        assert "Company Store Metrics" not in next(tmp_path.glob("*.log")).read_text()

        logger.logger.setLevel(logging.DEBUG)
        logger.log_metrics_summary(level=logging.DEBUG)
        content = next(tmp_path.glob("*.log")).read_text()
        assert "DEBUG    | test:" in content
        assert "Company Store Metrics" in content


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_get_logger_singleton(self):
        """get_logger should return same instance."""
        reset_logger()

        logger1 = get_logger(enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reads_environment(self, monkeypatch, tmp_path):
        """Level and log directory come from the environment."""
        monkeypatch.setenv("COMPANYSTORE_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("COMPANYSTORE_LOG_DIR", str(tmp_path))
        reset_logger()

        logger = get_logger(enable_console=False)
        logger.debug("Debug line")

        assert logger.logger.level == 10
        assert "Debug line" in next(tmp_path.glob("*.log")).read_text()

    def test_reset_logger(self):
        """reset_logger should create new instance."""
        reset_logger()
        logger1 = get_logger(enable_console=False)
        logger1.record_query()

        reset_logger()
        logger2 = get_logger(enable_console=False)

        assert logger2 is not logger1
        assert logger2.metrics["queries_executed"] == 0


class TestTrackOperation:
    """Test the operation tracking decorator."""

    def test_success_counted(self, quiet_logger):
        @track_operation("noop")
        def noop():
            return "ok"

        assert noop() == "ok"
        assert quiet_logger.metrics["operations"]["noop"] == {"calls": 1, "failures": 0}

    def test_failure_counted_and_reraised(self, quiet_logger):
        @track_operation("boom")
        def boom():
            raise ValueError("nope")

        with pytest.raises(ValueError):
            boom()

        assert quiet_logger.metrics["operations"]["boom"]["failures"] == 1
        assert quiet_logger.metrics["errors_by_type"]["ValueError"] == 1
