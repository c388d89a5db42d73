"""Tests for the catalog read handlers."""

import json
from unittest.mock import patch

from product_service import get_products
from product_service.exceptions import BackendError
from product_service.mapper import map_product
from product_service.repository import ProductRepository


def _seed(repository, valid_product):
    repository.create_product(map_product({**valid_product, "id": "p-1", "count": 3}))
    repository.create_product(map_product({**valid_product, "id": "p-2", "price": "12.5", "count": 0}))


def _seed_malformed(dynamodb_tables):
    dynamodb_tables.put_item(
        TableName="products",
        Item={"id": {"S": "x"}, "title": {"S": "T"}, "price": {"N": "5"}},
    )


class TestListHandler:
    """Tests for GET /products."""

    def test_lists_products_with_counts(self, repository, valid_product):
        _seed(repository, valid_product)

        response = get_products.list_handler({}, None)

        assert response["statusCode"] == 200
        products = {p["id"]: p for p in json.loads(response["body"])}
        assert products["p-1"]["count"] == 3
        assert products["p-2"]["count"] == 0
        assert products["p-2"]["price"] == 12.5

    def test_empty_catalog(self, repository):
        response = get_products.list_handler({}, None)

        assert json.loads(response["body"]) == []

    def test_backend_error(self, repository):
        error = BackendError(message="boom", service_name="DynamoDB", operation="Scan")
        with patch.object(ProductRepository, "list_products", side_effect=error):
            response = get_products.list_handler({}, None)

        assert response["statusCode"] == 500

    def test_malformed_row_returns_500(self, repository, dynamodb_tables):
        _seed_malformed(dynamodb_tables)

        response = get_products.list_handler({}, None)

        assert response["statusCode"] == 500
        assert response["headers"]["Access-Control-Allow-Origin"] == "*"

    def test_unexpected_error_returns_500(self, repository):
        with patch.object(ProductRepository, "list_products", side_effect=RuntimeError("boom")):
            response = get_products.list_handler({}, None)

        assert response["statusCode"] == 500


class TestGetHandler:
    """Tests for GET /products/{id}."""

    def test_found(self, repository, valid_product):
        _seed(repository, valid_product)

        response = get_products.get_handler({"pathParameters": {"id": "p-1"}}, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["id"] == "p-1"
        assert body["count"] == 3
        assert body["title"] == "Test Product"

    def test_not_found(self, repository):
        response = get_products.get_handler({"pathParameters": {"id": "nope"}}, None)

        assert response["statusCode"] == 404
        assert json.loads(response["body"])["message"] == "Product not found"

    def test_missing_id(self, repository):
        for event in ({}, {"pathParameters": None}, {"pathParameters": {}}):
            response = get_products.get_handler(event, None)
            assert response["statusCode"] == 400

    def test_backend_error(self, repository):
        error = BackendError(message="boom", service_name="DynamoDB", operation="GetItem")
        with patch.object(ProductRepository, "get_product", side_effect=error):
            response = get_products.get_handler({"pathParameters": {"id": "p-1"}}, None)

        assert response["statusCode"] == 500

    def test_malformed_row_returns_500(self, repository, dynamodb_tables):
        _seed_malformed(dynamodb_tables)

        response = get_products.get_handler({"pathParameters": {"id": "x"}}, None)

        assert response["statusCode"] == 500
        assert json.loads(response["body"])["message"] == "Something went wrong"
        assert response["headers"]["Access-Control-Allow-Origin"] == "*"

    def test_unexpected_error_returns_500(self, repository):
        with patch.object(ProductRepository, "get_product", side_effect=RuntimeError("boom")):
            response = get_products.get_handler({"pathParameters": {"id": "p-1"}}, None)

        assert response["statusCode"] == 500
