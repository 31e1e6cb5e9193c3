"""Structured JSON logging for container output."""

import logging
import sys
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from unboundconf.services.fetcher import BadStatusError, FetchError


# Run ID for correlating the log entries of one configuration generation
RUN_ID = str(uuid.uuid4())


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter that adds run_id and standardized fields."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = (
            datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        )
        log_record["run_id"] = RUN_ID
        log_record["level"] = record.levelname
        log_record["logger"] = record.name


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure structured JSON logging for the application.

    Args:
        verbose: Log at DEBUG level instead of INFO.

    Returns:
        logging.Logger: Configured root logger.
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    json_handler = logging.StreamHandler(sys.stdout)
    json_handler.setFormatter(CustomJsonFormatter("%(message)s"))
    logger.addHandler(json_handler)

    # urllib3 logs every retry at WARNING, already reported per list
    logging.getLogger("urllib3").setLevel(logging.ERROR)

    return logger


def log_fetch_error(error: Exception) -> None:
    """Log a failed remote list fetch as a warning.

    Args:
        error: Error returned by the blocklist build.
    """
    logger = logging.getLogger(__name__)
    fields: Dict[str, Any] = {"error_type": type(error).__name__}
    if isinstance(error, FetchError):
        fields["url"] = error.url
        fields["cancelled"] = error.cancelled
    if isinstance(error, BadStatusError):
        fields["status_code"] = error.status_code

    logger.warning(f"Blocklist fetch failed: {error}", extra=fields)


def log_build_summary(
    hostname_lines: int,
    ip_lines: int,
    fetch_errors: int,
    providers: list[str],
    config_path: str,
    duration_sec: float,
) -> None:
    """Log the configuration generation summary.

    Args:
        hostname_lines: Number of blocked hostname lines written.
        ip_lines: Number of blocked IP lines written.
        fetch_errors: Number of remote lists that could not be fetched.
        providers: Upstream providers forwarded to.
        config_path: Path of the written configuration.
        duration_sec: Total generation time in seconds.
    """
    logger = logging.getLogger(__name__)
    logger.info(
        "Unbound configuration generated",
        extra={
            "hostname_lines": hostname_lines,
            "ip_lines": ip_lines,
            "fetch_errors": fetch_errors,
            "providers": providers,
            "config_path": config_path,
            "duration_sec": duration_sec,
        },
    )
