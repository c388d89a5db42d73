"""
Publishes product-created notifications to SNS.
"""

import logging

from botocore.exceptions import BotoCoreError, ClientError

from product_service.clients import AWSClientFactory
from product_service.exceptions import NotifyError
from product_service.models import Product

logger = logging.getLogger(__name__)

SUBJECT = "New Product Created"


class ProductNotifier:
    """Sends one SNS message per created product, with ``count`` as a filterable attribute."""

    def __init__(self, topic_arn: str, client=None):
        self.topic_arn = topic_arn
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = AWSClientFactory.get_sns_client()
        return self._client

    def notify_created(self, product: Product) -> str:
        """
        Publish a creation notice for a product already written to the store.

        Returns:
            The SNS message ID

        Raises:
            NotifyError: If the publish call fails
        """
        try:
            response = self.client.publish(
                TopicArn=self.topic_arn,
                Message=product.to_message(),
                Subject=SUBJECT,
                MessageAttributes={
                    "count": {
                        "DataType": "Number",
                        "StringValue": str(product.count),
                    }
                },
            )
        except (ClientError, BotoCoreError) as e:
            raise NotifyError(
                message=f"Failed to publish notification for product {product.id}: {e}",
                topic_arn=self.topic_arn,
                product_id=product.id,
                original_exception=e,
            ) from e

        message_id = response.get("MessageId", "")
        logger.info(
            "Product notification published",
            extra={"product_id": product.id, "extra_data": {"sns_message_id": message_id}},
        )
        return message_id
