"""
AWS Lambda handler issuing presigned S3 upload URLs for catalog import files
(GET /import?name=products.csv).
"""

import os
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from product_service.clients import AWSClientFactory
from product_service.exceptions import BackendError, ProductServiceError
from product_service.logging_config import configure_logging, set_correlation_id
from product_service.responses import build_response, message_response
from product_service.settings import get_settings

logger = configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    service_name="product-service",
)

UPLOAD_PREFIX = "uploaded/"
CSV_CONTENT_TYPE = "text/csv"


def generate_upload_url(bucket: str, file_name: str, expires_in: int, client=None) -> str:
    """Presign a PUT of ``file_name`` under the upload prefix."""
    s3 = client or AWSClientFactory.get_s3_client()
    key = f"{UPLOAD_PREFIX}{file_name}"
    try:
        return s3.generate_presigned_url(
            "put_object",
            Params={"Bucket": bucket, "Key": key, "ContentType": CSV_CONTENT_TYPE},
            ExpiresIn=expires_in,
        )
    except (ClientError, BotoCoreError) as e:
        raise BackendError(
            message=f"Failed to presign upload for {key}: {e}",
            service_name="S3",
            operation="PutObject",
            original_exception=e,
        ) from e


def handler(event: dict, context: Any) -> dict:
    """Return a presigned URL as the raw response body."""
    set_correlation_id(getattr(context, "aws_request_id", None) if context else None)

    file_name = ((event or {}).get("queryStringParameters") or {}).get("name")
    if not file_name or not file_name.lower().endswith(".csv"):
        return message_response(
            400, "Invalid or missing file name. Please provide a CSV file name."
        )

    try:
        settings = get_settings()
        url = generate_upload_url(
            bucket=settings.require("upload_bucket"),
            file_name=file_name,
            expires_in=settings.presigned_url_expiry,
        )
    except ProductServiceError as e:
        logger.error(f"Error generating import URL: {e.message}", extra={"extra_data": e.to_dict()})
        return build_response(500, {"message": "Error generating import URL", "error": e.message})

    logger.info(f"Issued upload URL for {UPLOAD_PREFIX}{file_name}")
    return build_response(200, url, raw_body=True)
