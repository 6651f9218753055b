"""
Logging configuration for Doula Connect API.

Console logging always; a rotating file under LOG_DIR when one is set.
One-time codes and secrets never reach a handler.
"""
import logging
import re
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SENSITIVE_KEYS = (
    "password", "token", "secret", "key", "code", "otp",
    "smtp_password", "database_url",
)

# "otp=123456", "code: 123456", "otp_code='123456'"
OTP_PATTERN = re.compile(r"((?:otp|code)\w*['\"]?\s*[=:]\s*['\"]?)\d{6}\b", re.IGNORECASE)


class OtpRedactionFilter(logging.Filter):
    """Masks six-digit codes that follow an otp/code label."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = OTP_PATTERN.sub(r"\1******", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = None):
    """
    Configure the root logger.

    Args:
        log_level: Logging level name; unknown names fall back to INFO
        log_dir: Directory for doula_connect.log, or None/"" for console only
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()

    handlers = [logging.StreamHandler(sys.stdout)]
    handlers[0].setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path / "doula_connect.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5
        )
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=DATE_FORMAT))
        handlers.append(file_handler)

    redaction = OtpRedactionFilter()
    for handler in handlers:
        handler.setLevel(level)
        handler.addFilter(redaction)
        logger.addHandler(handler)

    # Quiet chatty third-party libraries
    for name in ("uvicorn", "uvicorn.access", "stripe", "sqlalchemy.engine"):
        logging.getLogger(name).setLevel(logging.WARNING)


def sanitize_log_data(data: dict) -> dict:
    """Copy of data with values under sensitive-looking keys redacted."""
    return {
        key: "***REDACTED***" if any(s in key.lower() for s in SENSITIVE_KEYS) else value
        for key, value in data.items()
    }
