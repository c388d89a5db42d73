"""API Gateway proxy responses."""

import json
import logging
import os
from decimal import Decimal
from typing import Any, Optional

logger = logging.getLogger(__name__)


def cors_headers(allowed_origin: Optional[str] = None) -> dict:
    """CORS headers; the origin defaults to ALLOWED_ORIGIN, read per response."""
    return {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": allowed_origin or os.environ.get("ALLOWED_ORIGIN", "*"),
        "Access-Control-Allow-Credentials": True,
        "Access-Control-Allow-Methods": "POST,GET,OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type,Authorization",
    }


def _default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return str(value)


def build_response(status_code: int, body: Any, raw_body: bool = False) -> dict:
    """Build a proxy response; ``raw_body`` passes a string body through unencoded."""
    logger.info(
        "Request complete",
        extra={"event_type": "lambda_complete", "status_code": status_code},
    )
    return {
        "statusCode": status_code,
        "headers": cors_headers(),
        "body": body if raw_body else json.dumps(body, default=_default),
    }


def message_response(status_code: int, message: str) -> dict:
    return build_response(status_code, {"message": message})
