"""
AWS Lambda handlers for reading the catalog (GET /products, GET /products/{id}).
Each product is returned with the count from its stock row, 0 when missing.
"""

import os
from typing import Any

from product_service.exceptions import ProductServiceError
from product_service.logging_config import configure_logging, set_correlation_id
from product_service.repository import ProductRepository
from product_service.responses import build_response, message_response
from product_service.settings import get_settings

logger = configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    service_name="product-service",
)


def _repository() -> ProductRepository:
    settings = get_settings()
    return ProductRepository(
        products_table=settings.require("products_table"),
        stocks_table=settings.require("stocks_table"),
    )


def list_handler(event: dict, context: Any) -> dict:
    """Return every product with its stock count."""
    set_correlation_id(getattr(context, "aws_request_id", None) if context else None)

    try:
        products = _repository().list_products()
    except ProductServiceError as e:
        logger.error(f"Failed to list products: {e.message}", extra={"extra_data": e.to_dict()})
        return message_response(500, "Internal server error")
    except Exception as e:
        logger.error(f"Unexpected error listing products: {e}", exc_info=True)
        return message_response(500, "Internal server error")

    logger.info(f"Listed {len(products)} products")
    return build_response(200, [product.model_dump() for product in products])


def get_handler(event: dict, context: Any) -> dict:
    """Return one product by its path id."""
    set_correlation_id(getattr(context, "aws_request_id", None) if context else None)

    product_id = ((event or {}).get("pathParameters") or {}).get("id")
    if not product_id:
        return message_response(400, "Product Id is required")

    try:
        product = _repository().get_product(product_id)
    except ProductServiceError as e:
        logger.error(f"Failed to get product: {e.message}", extra={"extra_data": e.to_dict()})
        return message_response(500, "Something went wrong")
    except Exception as e:
        logger.error(f"Unexpected error getting product: {e}", exc_info=True)
        return message_response(500, "Something went wrong")

    if product is None:
        return message_response(404, "Product not found")

    return build_response(200, product.model_dump())
