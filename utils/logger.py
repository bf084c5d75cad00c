"""
Logging utility functions and helpers.
"""

import logging
from typing import Any, Dict, Optional


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Usage:
        from utils.logger import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)


def mask_email(email: str) -> str:
    """
    ``priya.sharma@example.com`` -> ``p***@example.com``
    """
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"


def sanitize_log_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Remove sensitive information from log data.

    Secrets and tokens are redacted; customer emails are masked so a log
    line can still be matched to an order without exposing the address.
    """
    sensitive_fields = {
        'password', 'token', 'secret', 'api_key', 'authorization'
    }

    sanitized = data.copy()

    for key, value in sanitized.items():
        lowered = key.lower()
        if any(sensitive in lowered for sensitive in sensitive_fields):
            if isinstance(value, str):
                # Tokens keep a short prefix for debugging
                if 'token' in lowered and len(value) > 8:
                    sanitized[key] = f"{value[:8]}..."
                else:
                    sanitized[key] = "***REDACTED***"

        elif 'email' in lowered and isinstance(value, str):
            sanitized[key] = mask_email(value)

        elif isinstance(value, dict):
            sanitized[key] = sanitize_log_data(value)

    return sanitized


def log_database_query(
    logger: logging.Logger,
    query_type: str,
    table: str,
    duration_ms: float,
    rows_affected: Optional[int] = None
):
    """
    Log a data client call in a structured format.

    Args:
        logger: Logger instance
        query_type: SELECT, INSERT, UPDATE or DELETE
        table: Table name
        duration_ms: Query duration in milliseconds
        rows_affected: Rows returned or touched, when known

    Slow calls (over a second) are logged at WARNING, the rest at DEBUG.
    """
    log_data = {
        "query_type": query_type,
        "table": table,
        "duration_ms": round(duration_ms, 2)
    }

    if rows_affected is not None:
        log_data["rows_affected"] = rows_affected

    if duration_ms > 1000:
        logger.warning(
            f"Slow {query_type} query on {table}",
            extra=log_data
        )
    else:
        logger.debug(
            f"{query_type} query on {table}",
            extra=log_data
        )
