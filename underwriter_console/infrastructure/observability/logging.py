"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from underwriter_console.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_decision(
    user_id: str,
    kind: str,
    ok: bool,
    duration_ms: float,
) -> None:
    """Log structured decision outcome for audit"""
    logging.getLogger("underwriter_console.decisions").info(
        "Decision submitted",
        extra={
            "user_id": user_id,
            "step": "decision_submit",
            "decision_kind": kind,
            "outcome": "accepted" if ok else "failed",
            "duration_ms": duration_ms,
        },
    )


def log_forced_logout(service: str, status_code: int) -> None:
    """Log a session teardown caused by a backend refusing the token"""
    logging.getLogger("underwriter_console.session").warning(
        "Session invalidated by backend",
        extra={
            "backend_service": service,
            "status_code": status_code,
            "step": "forced_logout",
        },
    )
