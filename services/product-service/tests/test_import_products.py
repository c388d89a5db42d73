"""Tests for the import URL handler."""

import json
from unittest.mock import Mock
from urllib.parse import parse_qs, urlparse

import pytest
from botocore.exceptions import ClientError

from product_service import import_products
from product_service.exceptions import BackendError


class TestImportHandler:
    """Tests for GET /import."""

    def test_returns_presigned_url(self, aws):
        response = import_products.handler({"queryStringParameters": {"name": "products.csv"}}, None)

        assert response["statusCode"] == 200
        url = urlparse(response["body"])
        assert url.path.endswith("/uploaded/products.csv")
        assert "Signature" in url.query or "X-Amz-Signature" in parse_qs(url.query)

    @pytest.mark.parametrize(
        "params",
        [None, {}, {"name": ""}, {"name": "products.json"}],
    )
    def test_rejects_non_csv_names(self, aws, params):
        response = import_products.handler({"queryStringParameters": params}, None)

        assert response["statusCode"] == 400
        assert "CSV" in json.loads(response["body"])["message"]

    def test_accepts_uppercase_extension(self, aws):
        response = import_products.handler({"queryStringParameters": {"name": "PRODUCTS.CSV"}}, None)

        assert response["statusCode"] == 200


class TestGenerateUploadUrl:
    """Tests for generate_upload_url."""

    def test_presign_parameters(self):
        client = Mock()
        client.generate_presigned_url.return_value = "https://signed"

        url = import_products.generate_upload_url("bucket", "a.csv", 60, client=client)

        assert url == "https://signed"
        client.generate_presigned_url.assert_called_once_with(
            "put_object",
            Params={"Bucket": "bucket", "Key": "uploaded/a.csv", "ContentType": "text/csv"},
            ExpiresIn=60,
        )

    def test_presign_failure(self):
        client = Mock()
        client.generate_presigned_url.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )

        with pytest.raises(BackendError):
            import_products.generate_upload_url("bucket", "a.csv", 60, client=client)
