"""Decoding of request and message bodies."""

import base64
import binascii
import json
from typing import Any, Optional

from product_service.exceptions import ErrorContext, ParseError


def parse_json_object(body: Any, message_id: Optional[str] = None) -> dict:
    """
    Decode a JSON object from a text body.

    Raises:
        ParseError: Body is not valid JSON or not an object
    """
    context = ErrorContext(message_id=message_id)
    try:
        data = json.loads(body)
    except (TypeError, ValueError) as e:
        raise ParseError(
            message=f"Invalid JSON: {e}",
            context=context,
            original_exception=e,
        ) from e
    if not isinstance(data, dict):
        raise ParseError(
            message=f"Expected a JSON object, got {type(data).__name__}",
            context=context,
        )
    return data


def event_body(event: dict) -> Optional[str]:
    """Text body of an API Gateway proxy event, base64-decoded when flagged."""
    body = event.get("body")
    if body is None or not event.get("isBase64Encoded"):
        return body
    try:
        return base64.b64decode(body).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ParseError(
            message=f"Invalid base64 body: {e}",
            original_exception=e,
        ) from e
