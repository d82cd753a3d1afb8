"""
Logging helpers shared by routers and services.
"""

import logging
from typing import Any, Dict, Optional


SECRET_FIELDS = {'password', 'secret', 'api_key', 'credit_card', 'cvv'}
TOKEN_FIELDS = {'token'}
# Customer contact data that ends up in order payloads
CONTACT_FIELDS = {'phone', 'address'}


def get_logger(name: str) -> logging.Logger:
    """
    Usage:
        from utils.logger import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)


def _mask_contact(value: str) -> str:
    if len(value) <= 3:
        return "***"
    return f"***{value[-3:]}"


def sanitize_log_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of `data` that is safe to put in a log record.

    - secrets (passwords, keys) are fully redacted
    - tokens keep their first 8 characters
    - phone numbers and addresses keep only their last 3 characters
    - nested dicts and lists of dicts are sanitized recursively
    """
    sanitized = data.copy()

    for key, value in sanitized.items():
        lowered = key.lower()

        if isinstance(value, dict):
            sanitized[key] = sanitize_log_data(value)
        elif isinstance(value, list):
            sanitized[key] = [sanitize_log_data(v) if isinstance(v, dict) else v for v in value]
        elif not isinstance(value, str):
            continue
        elif any(field in lowered for field in SECRET_FIELDS):
            sanitized[key] = "***REDACTED***"
        elif any(field in lowered for field in TOKEN_FIELDS):
            sanitized[key] = f"{value[:8]}..." if len(value) > 8 else "***REDACTED***"
        elif any(field in lowered for field in CONTACT_FIELDS):
            sanitized[key] = _mask_contact(value)

    return sanitized


def log_request(
    logger: logging.Logger,
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    client_ip: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None
):
    """
    Log one HTTP request; the level follows the status code
    (5xx error, 4xx warning, everything else info).
    """
    log_data = {
        "method": method,
        "path": path,
        "status_code": status_code,
        "duration_ms": round(duration_ms, 2),
    }

    if client_ip:
        log_data["client_ip"] = client_ip

    if extra:
        log_data.update(sanitize_log_data(extra))

    message = f'{client_ip or "unknown"} - "{method} {path}" {status_code}'

    if status_code >= 500:
        logger.error(message, extra=log_data)
    elif status_code >= 400:
        logger.warning(message, extra=log_data)
    else:
        logger.info(message, extra=log_data)
