import logging

import pytest

from app.core.logging_config import OtpRedactionFilter, sanitize_log_data, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_sanitize_log_data_redacts_secrets():
    data = {
        "app_env": "production",
        "database_url": "postgresql://user:pw@db/doula",
        "stripe_secret_key": "sk_live_123",
        "otp_code": "123456",
    }

    sanitized = sanitize_log_data(data)

    assert sanitized["app_env"] == "production"
    assert sanitized["database_url"] == "***REDACTED***"
    assert sanitized["stripe_secret_key"] == "***REDACTED***"
    assert sanitized["otp_code"] == "***REDACTED***"
    assert data["stripe_secret_key"] == "sk_live_123"


def test_otp_filter_masks_codes():
    record = logging.LogRecord("app", logging.INFO, __file__, 1, "Sent otp=%s to %s", ("042917", "a@example.com"), None)

    assert OtpRedactionFilter().filter(record) is True
    assert record.getMessage() == "Sent otp=****** to a@example.com"


def test_otp_filter_leaves_other_numbers():
    record = logging.LogRecord("app", logging.INFO, __file__, 1, "Contract updated: contract_id=123456", None, None)

    OtpRedactionFilter().filter(record)

    assert record.getMessage() == "Contract updated: contract_id=123456"


def test_console_only_without_log_dir(restore_root_logger):
    setup_logging("debug", log_dir="")

    assert restore_root_logger.level == logging.DEBUG
    assert len(restore_root_logger.handlers) == 1
    assert logging.getLogger("stripe").level == logging.WARNING


def test_file_handler_under_log_dir(restore_root_logger, tmp_path):
    setup_logging("INFO", log_dir=str(tmp_path / "logs"))

    assert len(restore_root_logger.handlers) == 2
    assert (tmp_path / "logs" / "doula_connect.log").exists()
