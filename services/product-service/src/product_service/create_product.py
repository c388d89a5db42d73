"""
AWS Lambda handler for synchronous product creation (POST /products).

Validates the request body, writes the product and its stock row in one
conditional transaction, and maps the outcome to an HTTP status.
No notification is published from this path.
"""

import os
from typing import Any, Optional

from product_service.exceptions import (
    BackendError,
    ConflictError,
    ParseError,
    ProductServiceError,
    ValidationError,
)
from product_service.logging_config import configure_logging, set_correlation_id
from product_service.mapper import map_product
from product_service.parsing import event_body, parse_json_object
from product_service.repository import ProductRepository
from product_service.responses import build_response, message_response
from product_service.settings import get_settings
from product_service.validator import validate_product

logger = configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    service_name="product-service",
)

BODY_REQUIRED = "Product is required"
INVALID_JSON = "Invalid JSON in request body"
CONFLICT = "Product creation failed due to conflict. Product might already exist."
INTERNAL_ERROR = "Internal server error"
CREATED = "Product and stock created successfully"


def create_product(
    body: Optional[str],
    repository: ProductRepository,
    require_count: bool = True,
) -> dict:
    """
    Run one creation request through parse, validate, map and write.

    Args:
        body: Raw request body
        repository: Store for the dual-table write
        require_count: Whether a missing count is a validation failure

    Returns:
        API Gateway proxy response
    """
    if not body:
        return message_response(400, BODY_REQUIRED)

    try:
        data = parse_json_object(body)
    except ParseError as e:
        logger.warning(f"Rejected request body: {e.message}")
        return message_response(400, INVALID_JSON)

    try:
        validate_product(data, require_count=require_count).raise_for_invalid(data)
    except ValidationError as e:
        logger.info(f"Validation failed: {e.message}", extra={"extra_data": e.to_dict()})
        return message_response(400, e.message)

    product = map_product(data)
    log = logger.with_product(product.id)

    try:
        repository.create_product(product)
    except ConflictError as e:
        log.warning(f"Conflict creating product: {e.message}")
        return message_response(409, CONFLICT)
    except BackendError as e:
        log.error(f"Backend error: {e.message}", extra={"extra_data": e.to_dict()})
        return message_response(500, INTERNAL_ERROR)

    log.info("Product created")
    return build_response(201, {"id": product.id, "message": CREATED})


def handler(event: dict, context: Any) -> dict:
    """Lambda entry point."""
    set_correlation_id(getattr(context, "aws_request_id", None) if context else None)

    try:
        settings = get_settings()
        repository = ProductRepository(
            products_table=settings.require("products_table"),
            stocks_table=settings.require("stocks_table"),
        )
        body = event_body(event or {})
        return create_product(body, repository, settings.create_requires_count)
    except ParseError as e:
        logger.warning(f"Rejected request body: {e.message}")
        return message_response(400, INVALID_JSON)
    except ProductServiceError as e:
        logger.error(f"Product service error: {e.message}", extra={"extra_data": e.to_dict()})
        return message_response(500, INTERNAL_ERROR)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return message_response(500, INTERNAL_ERROR)
