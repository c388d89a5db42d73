"""Tests for environment-driven settings."""

import pytest

from product_service.exceptions import ConfigurationError
from product_service.settings import Settings


class TestSettings:
    """Tests for Settings.from_env."""

    def test_defaults(self):
        settings = Settings.from_env({})

        assert settings.products_table == ""
        assert settings.aws_region == "us-east-1"
        assert settings.create_requires_count is True
        assert settings.redeliver_on_notify_failure is False
        assert settings.presigned_url_expiry == 900
        assert settings.localstack_endpoint is None

    def test_reads_environment(self):
        settings = Settings.from_env(
            {
                "PRODUCTS_TABLE": "p",
                "STOCKS_TABLE": "s",
                "SNS_TOPIC_ARN": "arn",
                "AWS_REGION": "eu-west-1",
                "CREATE_REQUIRES_COUNT": "no",
                "REDELIVER_ON_NOTIFY_FAILURE": "TRUE",
                "PRESIGNED_URL_EXPIRY": "60",
                "LOCALSTACK_ENDPOINT": "http://localhost:4566",
            }
        )

        assert settings.products_table == "p"
        assert settings.aws_region == "eu-west-1"
        assert settings.create_requires_count is False
        assert settings.redeliver_on_notify_failure is True
        assert settings.presigned_url_expiry == 60
        assert settings.localstack_endpoint == "http://localhost:4566"

    @pytest.mark.parametrize(
        "env",
        [
            {"CREATE_REQUIRES_COUNT": "maybe"},
            {"PRESIGNED_URL_EXPIRY": "soon"},
            {"BOTO_MAX_ATTEMPTS": "0"},
        ],
    )
    def test_invalid_values(self, env):
        with pytest.raises(ConfigurationError) as exc_info:
            Settings.from_env(env)

        assert exc_info.value.config_key == next(iter(env))

    def test_require(self):
        settings = Settings(products_table="products")

        assert settings.require("products_table") == "products"
        with pytest.raises(ConfigurationError) as exc_info:
            settings.require("stocks_table")
        assert exc_info.value.config_key == "STOCKS_TABLE"
