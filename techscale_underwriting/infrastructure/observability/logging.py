"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger
from techscale_underwriting.config import settings


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


def log_underwriting_outcome(
    request_id: str,
    application_id: str,
    risk_score: int,
    risk_tier: str,
    decision: str,
    offer_type: Optional[str],
    duration_ms: float,
) -> None:
    """Log structured underwriting outcome for analysis"""
    logging.info(
        "Underwriting completed",
        extra={
            "request_id": request_id,
            "application_id": application_id,
            "step": "underwriting_complete",
            "risk_score": risk_score,
            "risk_tier": risk_tier,
            "decision": decision,
            "offer_type": offer_type,
            "duration_ms": duration_ms,
        },
    )
