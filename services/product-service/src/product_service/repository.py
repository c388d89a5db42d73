"""
DynamoDB access for products and stock counts.

Creation writes both tables in one TransactWriteItems call, each put
guarded by attribute_not_exists on its key, so a product and its stock
row land together or not at all.
"""

import logging
from decimal import Decimal, DecimalException
from typing import Any, Optional

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError as PydanticValidationError

from product_service.clients import AWSClientFactory
from product_service.exceptions import BackendError, ConflictError
from product_service.models import Product

logger = logging.getLogger(__name__)

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def serialize_item(item: dict) -> dict:
    return {key: _serializer.serialize(value) for key, value in item.items()}


def deserialize_item(item: dict) -> dict:
    return {key: _deserializer.deserialize(value) for key, value in item.items()}


def _plain_number(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def is_conditional_conflict(error: ClientError) -> bool:
    """True when a cancelled transaction failed on a condition expression."""
    if error.response.get("Error", {}).get("Code") != "TransactionCanceledException":
        return False
    reasons = error.response.get("CancellationReasons") or []
    if any(reason.get("Code") == "ConditionalCheckFailed" for reason in reasons):
        return True
    return "ConditionalCheckFailed" in str(error)


class ProductRepository:
    """Reads and writes products together with their stock rows."""

    def __init__(self, products_table: str, stocks_table: str, client=None):
        self.products_table = products_table
        self.stocks_table = stocks_table
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = AWSClientFactory.get_dynamodb_client()
        return self._client

    def build_transaction(self, product: Product) -> list[dict]:
        """The two conditional puts for a new product."""
        return [
            {
                "Put": {
                    "TableName": self.products_table,
                    "Item": serialize_item(product.to_item()),
                    "ConditionExpression": "attribute_not_exists(id)",
                }
            },
            {
                "Put": {
                    "TableName": self.stocks_table,
                    "Item": serialize_item(product.stock_entry().to_item()),
                    "ConditionExpression": "attribute_not_exists(product_id)",
                }
            },
        ]

    def create_product(self, product: Product) -> Product:
        """
        Insert a product and its stock row atomically.

        Raises:
            ConflictError: The product or stock key already exists
            BackendError: Any other DynamoDB or transport failure
        """
        try:
            transact_items = self.build_transaction(product)
        except (DecimalException, TypeError) as e:
            raise BackendError(
                message=f"Failed to serialize product {product.id}: {e!r}",
                service_name="DynamoDB",
                operation="TransactWriteItems",
                original_exception=e,
            ) from e

        try:
            self.client.transact_write_items(TransactItems=transact_items)
        except ClientError as e:
            if is_conditional_conflict(e):
                raise ConflictError(
                    message=f"Product {product.id} already exists",
                    product_id=product.id,
                    original_exception=e,
                ) from e
            raise BackendError(
                message=f"Failed to create product {product.id}: {e}",
                service_name="DynamoDB",
                operation="TransactWriteItems",
                original_exception=e,
            ) from e
        except BotoCoreError as e:
            raise BackendError(
                message=f"Failed to create product {product.id}: {e}",
                service_name="DynamoDB",
                operation="TransactWriteItems",
                original_exception=e,
            ) from e

        logger.info(
            "Product and stock created",
            extra={"product_id": product.id},
        )
        return product

    def get_product(self, product_id: str) -> Optional[Product]:
        """Fetch a product joined with its stock count, None when absent."""
        try:
            product_item = self.client.get_item(
                TableName=self.products_table,
                Key=serialize_item({"id": product_id}),
            ).get("Item")
            if not product_item:
                return None
            stock_item = self.client.get_item(
                TableName=self.stocks_table,
                Key=serialize_item({"product_id": product_id}),
            ).get("Item")
        except (ClientError, BotoCoreError) as e:
            raise BackendError(
                message=f"Failed to get product {product_id}: {e}",
                service_name="DynamoDB",
                operation="GetItem",
                original_exception=e,
            ) from e

        stock = deserialize_item(stock_item) if stock_item else {}
        return self._join(deserialize_item(product_item), stock.get("count"))

    def list_products(self) -> list[Product]:
        """All products joined with their stock counts."""
        try:
            product_items = self._scan(self.products_table)
            stock_items = self._scan(self.stocks_table)
        except (ClientError, BotoCoreError) as e:
            raise BackendError(
                message=f"Failed to list products: {e}",
                service_name="DynamoDB",
                operation="Scan",
                original_exception=e,
            ) from e

        counts = {item.get("product_id"): item.get("count") for item in stock_items}
        return [self._join(item, counts.get(item.get("id"))) for item in product_items]

    def _scan(self, table_name: str) -> list[dict]:
        items = []
        paginator = self.client.get_paginator("scan")
        for page in paginator.paginate(TableName=table_name):
            items.extend(deserialize_item(item) for item in page.get("Items", []))
        return items

    @staticmethod
    def _join(product_item: dict, count: Any) -> Product:
        data = {key: _plain_number(value) for key, value in product_item.items()}
        data["count"] = _plain_number(count) if count is not None else 0
        try:
            return Product.model_validate(data)
        except PydanticValidationError as e:
            raise BackendError(
                message=f"Malformed product row {data.get('id')!r}: {e}",
                service_name="DynamoDB",
                operation="Deserialize",
                original_exception=e,
            ) from e

