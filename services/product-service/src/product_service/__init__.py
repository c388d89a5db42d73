"""
Product Service - AWS Serverless product catalog.

This package provides the Lambda handlers and building blocks for
creating products synchronously over HTTP, ingesting product batches
from SQS with per-message failure reporting, and reading the catalog.
"""

from product_service.exceptions import (
    BackendError,
    ConfigurationError,
    ConflictError,
    NotifyError,
    ParseError,
    ProductServiceError,
    ValidationError,
)
from product_service.mapper import map_product
from product_service.models import Product, StockEntry
from product_service.notifier import ProductNotifier
from product_service.repository import ProductRepository
from product_service.validator import ValidationResult, validate_product

__all__ = [
    "Product",
    "StockEntry",
    "ProductRepository",
    "ProductNotifier",
    "ValidationResult",
    "validate_product",
    "map_product",
    "ProductServiceError",
    "ValidationError",
    "ParseError",
    "ConflictError",
    "BackendError",
    "NotifyError",
    "ConfigurationError",
]

__version__ = "1.0.0"
