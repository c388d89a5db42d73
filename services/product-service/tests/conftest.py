"""Pytest fixtures and configuration."""

import json
import os

import boto3
import pytest
from moto import mock_aws

os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ["PRODUCTS_TABLE"] = "products"
os.environ["STOCKS_TABLE"] = "stocks"
os.environ["SNS_TOPIC_ARN"] = "arn:aws:sns:us-east-1:123456789012:create-product-topic"
os.environ["UPLOAD_BUCKET"] = "import-bucket"
os.environ.pop("LOCALSTACK_ENDPOINT", None)

from product_service.clients import AWSClientFactory  # noqa: E402
from product_service.repository import ProductRepository  # noqa: E402
from product_service.settings import reset_settings  # noqa: E402


@pytest.fixture(autouse=True)
def reset_singletons():
    """Give every test fresh settings and AWS clients."""
    AWSClientFactory.reset()
    reset_settings()
    yield
    AWSClientFactory.reset()
    reset_settings()


@pytest.fixture
def aws():
    with mock_aws():
        yield


@pytest.fixture
def dynamodb_tables(aws):
    """Create the products and stocks tables, yield a low-level client."""
    client = boto3.client("dynamodb", region_name="us-east-1")
    client.create_table(
        TableName="products",
        KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )
    client.create_table(
        TableName="stocks",
        KeySchema=[{"AttributeName": "product_id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "product_id", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )
    yield client


@pytest.fixture
def repository(dynamodb_tables):
    return ProductRepository(products_table="products", stocks_table="stocks")


@pytest.fixture
def topic_queue(aws):
    """Create the product topic with an SQS subscriber, yield the queue URL."""
    sns = boto3.client("sns", region_name="us-east-1")
    sqs = boto3.client("sqs", region_name="us-east-1")

    topic_arn = sns.create_topic(Name="create-product-topic")["TopicArn"]
    queue_url = sqs.create_queue(QueueName="product-notifications")["QueueUrl"]
    queue_arn = sqs.get_queue_attributes(
        QueueUrl=queue_url, AttributeNames=["QueueArn"]
    )["Attributes"]["QueueArn"]
    sns.subscribe(TopicArn=topic_arn, Protocol="sqs", Endpoint=queue_arn)

    yield queue_url


def read_notifications(queue_url: str) -> list[dict]:
    """Drain SNS envelopes delivered to the subscriber queue."""
    sqs = boto3.client("sqs", region_name="us-east-1")
    messages = sqs.receive_message(
        QueueUrl=queue_url, MaxNumberOfMessages=10
    ).get("Messages", [])
    return [json.loads(message["Body"]) for message in messages]


def count_items(client, table_name: str) -> int:
    return client.scan(TableName=table_name, Select="COUNT")["Count"]


def sqs_event(*bodies) -> dict:
    """Build an SQS event; dict bodies are JSON-encoded, strings pass through."""
    return {
        "Records": [
            {
                "messageId": f"msg-{index}",
                "body": body if isinstance(body, str) else json.dumps(body),
            }
            for index, body in enumerate(bodies)
        ]
    }


def api_event(body=None, **extra) -> dict:
    """Build an API Gateway proxy event."""
    event = {"body": body if body is None or isinstance(body, str) else json.dumps(body)}
    event.update(extra)
    return event


@pytest.fixture
def valid_product():
    return {
        "title": "Test Product",
        "description": "Test Description",
        "price": 100,
        "count": 5,
    }
