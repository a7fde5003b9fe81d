"""
Tests for logger functionality.
"""

import logging

from jobboard.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["requests_total"] == 0

    def test_log_file_written(self, tmp_path):
        logger = StructuredLogger(name="test-file", log_dir=tmp_path, enable_console=False)

        logger.info("Message with context", url="https://example.com", count=5)
        for handler in logger.logger.handlers:
            handler.flush()

        files = list(tmp_path.glob("jobboard_*.log"))
        assert len(files) == 1
        content = files[0].read_text(encoding="utf-8")
        assert "Message with context | Context:" in content
        assert '"count": 5' in content

    def test_context_with_datetime_is_serialized(self, caplog):
        from datetime import datetime

        logger = StructuredLogger(name="test-ctx", enable_file=False, enable_console=False)
        with caplog.at_level(logging.INFO, logger="test-ctx"):
            logger.info("Job created", expires_at=datetime(2030, 1, 1, 12, 1))

        assert "2030-01-01 12:01:00" in caplog.text

    def test_configure_replaces_handlers(self, tmp_path):
        logger = StructuredLogger(name="test-cfg", enable_file=False)
        assert len(logger.logger.handlers) == 1

        logger.configure(level="DEBUG", log_dir=tmp_path, enable_file=True, enable_console=False)

        assert logger.logger.level == logging.DEBUG
        assert len(logger.logger.handlers) == 1
        assert isinstance(logger.logger.handlers[0], logging.FileHandler)

    def test_request_metrics(self):
        logger = StructuredLogger(name="test-metrics", enable_file=False, enable_console=False)

        logger.record_request("GET", 200)
        logger.record_request("POST", 201)
        logger.record_request("POST", 409)
        logger.record_request("GET", 500)
        logger.record_error("NotFoundError")
        logger.record_error("NotFoundError")
        logger.record_outcome("job", "created")

        metrics = logger.get_metrics()
        assert metrics["requests_total"] == 4
        assert metrics["responses_by_status"] == {"2xx": 2, "4xx": 1, "5xx": 1}
        assert metrics["errors_by_type"] == {"NotFoundError": 2}
        assert metrics["outcomes"] == {"job/created": 1}
        assert metrics["server_error_rate"] == 0.25

    def test_metrics_from_many_threads(self):
        from concurrent.futures import ThreadPoolExecutor

        logger = StructuredLogger(name="test-threads", enable_file=False, enable_console=False)

        def work(_):
            for _ in range(200):
                logger.record_request("GET", 200)
                logger.record_error("NotFoundError")
                logger.record_outcome("job", "created")

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(work, range(8)))

        metrics = logger.get_metrics()
        assert metrics["requests_total"] == 1600
        assert metrics["responses_by_status"] == {"2xx": 1600}
        assert metrics["errors_by_type"] == {"NotFoundError": 1600}
        assert metrics["outcomes"] == {"job/created": 1600}

    def test_get_metrics_returns_copy(self):
        logger = StructuredLogger(name="test-copy", enable_file=False, enable_console=False)
        logger.record_outcome("skill", "added")

        logger.get_metrics()["outcomes"]["skill/added"] = 99

        assert logger.metrics["outcomes"]["skill/added"] == 1

    def test_metrics_summary(self, caplog):
        logger = StructuredLogger(name="test-summary", enable_file=False, enable_console=False)
        logger.record_request("GET", 200)
        logger.record_outcome("user", "deleted")

        with caplog.at_level(logging.INFO, logger="test-summary"):
            logger.log_metrics_summary()

        assert "Requests: 1" in caplog.text
        assert "user/deleted: 1" in caplog.text


class TestGlobalLogger:

    def test_get_logger_is_singleton(self):
        reset_logger()
        try:
            first = get_logger(name="test-global")
            assert get_logger() is first
            # no file handler unless requested
            assert not any(isinstance(h, logging.FileHandler) for h in first.logger.handlers)
        finally:
            reset_logger()
