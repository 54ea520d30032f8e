"""
Tests for configuration, structured logging and notices
"""

import json
import logging

from admin_console.config import ConsoleConfig, reload_config
from admin_console.logging_config import JSONFormatter, log_action, setup_logging
from admin_console.notifications import InAppNotifier, LogNotifier, NoticeLevel


class TestConfig:
    """Test environment-driven configuration"""

    def test_defaults(self):
        config = ConsoleConfig()
        assert config.default_page_size == 10
        assert config.page_window == 5
        assert config.max_topup_amount == "10000000"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("CONSOLE_API_BASE_URL", "https://api.example.in")
        monkeypatch.setenv("CONSOLE_DEFAULT_PAGE_SIZE", "20")

        config = reload_config()

        assert config.api_base_url == "https://api.example.in"
        assert config.default_page_size == 20

        monkeypatch.delenv("CONSOLE_API_BASE_URL")
        monkeypatch.delenv("CONSOLE_DEFAULT_PAGE_SIZE")
        reload_config()


class TestStructuredLogging:
    """Test JSON log output"""

    def test_log_action_fields(self):
        logger = logging.getLogger("admin_console.tests.audit")
        records = []

        class Capture(logging.Handler):
            def emit(self, record):
                records.append(record)

        handler = Capture()
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        try:
            log_action(logger, "info", "Bank 3 deleted", user_id="ADM001", action="delete", resource="bank")
        finally:
            logger.removeHandler(handler)

        entry = json.loads(JSONFormatter().format(records[0]))
        assert entry["message"] == "Bank 3 deleted"
        assert entry["level"] == "INFO"
        assert entry["user_id"] == "ADM001"
        assert entry["action"] == "delete"
        assert entry["resource"] == "bank"
        assert entry["logger"] == "admin_console.tests.audit"
        assert "details" not in entry

    def test_log_action_details(self):
        formatter = JSONFormatter()
        logger = logging.getLogger("admin_console.tests.details")
        records = []

        class Capture(logging.Handler):
            def emit(self, record):
                records.append(record)

        handler = Capture()
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        try:
            log_action(logger, "warning", "Limit 4 updated", details={"fields": ["limit_amount"]})
        finally:
            logger.removeHandler(handler)

        entry = json.loads(formatter.format(records[0]))
        assert entry["level"] == "WARNING"
        assert entry["details"] == {"fields": ["limit_amount"]}
        assert "user_id" not in entry

    def test_setup_logging_text(self, tmp_path):
        log_file = tmp_path / "console.log"
        logger = setup_logging("DEBUG", logger_name="admin_console.tests.file",
                               log_format="text", log_file=str(log_file))
        logger.debug("hello")
        for handler in logger.handlers:
            handler.flush()

        assert "hello" in log_file.read_text()
        assert logger.propagate is False
        assert len(logger.handlers) == 1


class TestNotifiers:
    """Test notice sinks"""

    def test_in_app_drain(self):
        notifier = InAppNotifier(max_notices=2)
        notifier.info("one")
        notifier.success("two")
        notifier.error("three")

        assert [n.message for n in notifier.notices] == ["two", "three"]
        assert notifier.latest().level == NoticeLevel.ERROR
        assert len(notifier.drain()) == 2
        assert notifier.latest() is None

    def test_log_notifier(self, caplog):
        with caplog.at_level(logging.ERROR, logger="admin_console.notices"):
            LogNotifier().error("Failed to fetch banks")
        assert "Failed to fetch banks" in caplog.text
