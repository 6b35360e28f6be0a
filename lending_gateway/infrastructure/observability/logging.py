"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from lending_gateway.config import settings


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

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_loan_submission(
    request_id: str,
    user_id: str,
    outcome: str,
    duration_ms: float,
    loan_id: str | None = None,
    interest_rate: str | None = None,
) -> None:
    """Log a loan application outcome (accepted or the rejection category)"""
    logging.info(
        "Loan application processed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "loan_submit",
            "outcome": outcome,
            "loan_id": loan_id,
            "interest_rate": interest_rate,
            "duration_ms": duration_ms,
        },
    )


def log_referral_allocation(
    request_id: str,
    user_id: str,
    outcome: str,
    duration_ms: float,
    referral_code: str | None = None,
) -> None:
    """Log a referral code request outcome"""
    logging.info(
        "Referral code request processed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "referral_code",
            "outcome": outcome,
            "referral_code": referral_code,
            "duration_ms": duration_ms,
        },
    )
