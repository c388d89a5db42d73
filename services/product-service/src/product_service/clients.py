"""
Process-wide AWS clients, created on first use and reused across invocations.
"""

from typing import Optional

import boto3
from botocore.config import Config

from product_service.settings import Settings, get_settings


def build_boto_config(settings: Settings) -> Config:
    return Config(
        retries={"max_attempts": settings.boto_max_attempts, "mode": "standard"},
        connect_timeout=5,
        read_timeout=10,
    )


class AWSClientFactory:
    """Factory for creating AWS clients with proper configuration."""

    _dynamodb_client = None
    _sns_client = None
    _s3_client = None

    @classmethod
    def _client(cls, service_name: str, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        kwargs = {
            "config": build_boto_config(settings),
            "region_name": settings.aws_region,
        }
        if settings.localstack_endpoint:
            kwargs["endpoint_url"] = settings.localstack_endpoint
        return boto3.client(service_name, **kwargs)

    @classmethod
    def get_dynamodb_client(cls):
        """Get or create DynamoDB client."""
        if cls._dynamodb_client is None:
            cls._dynamodb_client = cls._client("dynamodb")
        return cls._dynamodb_client

    @classmethod
    def get_sns_client(cls):
        """Get or create SNS client."""
        if cls._sns_client is None:
            cls._sns_client = cls._client("sns")
        return cls._sns_client

    @classmethod
    def get_s3_client(cls):
        """Get or create S3 client."""
        if cls._s3_client is None:
            cls._s3_client = cls._client("s3")
        return cls._s3_client

    @classmethod
    def reset(cls):
        """Reset clients (useful for testing)."""
        cls._dynamodb_client = None
        cls._sns_client = None
        cls._s3_client = None
