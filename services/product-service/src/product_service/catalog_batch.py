"""
AWS Lambda handler for batch product ingestion from SQS.

Each message is handled on its own: parse, validate, write product and
stock, then notify. Failures are collected per message and reported
back through ``batchItemFailures`` so SQS redelivers only those.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from product_service.exceptions import (
    ConflictError,
    NotifyError,
    ParseError,
    ProductServiceError,
)
from product_service.logging_config import (
    LogContext,
    configure_logging,
    log_execution_time,
    set_correlation_id,
)
from product_service.mapper import map_product
from product_service.notifier import ProductNotifier
from product_service.parsing import parse_json_object
from product_service.repository import ProductRepository
from product_service.settings import get_settings
from product_service.validator import validate_product

logger = configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    service_name="product-service",
)


class MessageOutcome(Enum):
    """What the queue should do with a message."""
    ACKED = "acked"
    REDELIVER = "redeliver"


@dataclass
class BatchResult:
    """Accumulates per-message outcomes in delivery order."""
    outcomes: list[tuple[str, MessageOutcome]] = field(default_factory=list)

    def record(self, message_id: str, outcome: MessageOutcome) -> None:
        self.outcomes.append((message_id, outcome))

    @property
    def failed_ids(self) -> list[str]:
        return [
            message_id
            for message_id, outcome in self.outcomes
            if outcome is MessageOutcome.REDELIVER
        ]

    @property
    def acked_count(self) -> int:
        return len(self.outcomes) - len(self.failed_ids)

    def to_response(self) -> dict:
        return {
            "batchItemFailures": [
                {"itemIdentifier": message_id} for message_id in self.failed_ids
            ]
        }


class CatalogBatchProcessor:
    """Runs the ingestion pipeline over a batch of SQS records."""

    def __init__(
        self,
        repository: ProductRepository,
        notifier: ProductNotifier,
        redeliver_on_notify_failure: bool = False,
    ):
        self.repository = repository
        self.notifier = notifier
        self.redeliver_on_notify_failure = redeliver_on_notify_failure

    @log_execution_time(logger)
    def process_batch(self, records: list[dict]) -> BatchResult:
        result = BatchResult()

        logger.info(
            f"Received {len(records)} messages",
            extra={"metrics": {"input_count": len(records)}},
        )

        for record in records:
            message_id = record.get("messageId", "")
            with LogContext(message_id=message_id):
                try:
                    outcome = self.process_record(record)
                except Exception as e:
                    logger.error(
                        f"Unexpected error processing message {message_id}: {e}",
                        exc_info=True,
                    )
                    outcome = MessageOutcome.REDELIVER
            result.record(message_id, outcome)

        logger.info(
            "Batch processing complete",
            extra={
                "metrics": {
                    "acked": result.acked_count,
                    "redeliver": len(result.failed_ids),
                }
            },
        )
        return result

    def process_record(self, record: dict) -> MessageOutcome:
        message_id = record.get("messageId", "")

        try:
            data = parse_json_object(record.get("body"), message_id=message_id)
        except ParseError as e:
            logger.error(f"Error processing message {message_id}: {e.message}")
            return MessageOutcome.REDELIVER

        verdict = validate_product(data)
        if not verdict.is_valid:
            logger.warning(f"Invalid product data, skipping: {verdict.message}")
            return MessageOutcome.ACKED

        product = map_product(data)
        log = logger.with_product(product.id)

        try:
            self.repository.create_product(product)
        except ConflictError as e:
            log.warning(f"Product already exists: {e.message}")
            return MessageOutcome.REDELIVER
        except ProductServiceError as e:
            log.error(f"DynamoDB error for product {product.id}: {e.message}")
            return MessageOutcome.REDELIVER

        try:
            self.notifier.notify_created(product)
        except NotifyError as e:
            log.error(
                f"Notification failed for product {product.id}: {e.message}",
                extra={"extra_data": e.to_dict()},
            )
            if self.redeliver_on_notify_failure:
                return MessageOutcome.REDELIVER

        return MessageOutcome.ACKED


def handler(event: dict, context: Any) -> dict:
    """Lambda entry point for the SQS event source mapping."""
    set_correlation_id(getattr(context, "aws_request_id", None) if context else None)

    settings = get_settings()
    processor = CatalogBatchProcessor(
        repository=ProductRepository(
            products_table=settings.require("products_table"),
            stocks_table=settings.require("stocks_table"),
        ),
        notifier=ProductNotifier(topic_arn=settings.require("sns_topic_arn")),
        redeliver_on_notify_failure=settings.redeliver_on_notify_failure,
    )

    result = processor.process_batch((event or {}).get("Records", []))
    response = result.to_response()
    logger.info(f"Batch item failures: {response['batchItemFailures']}")
    return response
