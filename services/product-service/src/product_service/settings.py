"""
Environment-driven configuration for the product service Lambdas.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from product_service.exceptions import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_bool(environ: Mapping[str, str], key: str, default: bool) -> bool:
    raw = environ.get(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        message=f"Invalid boolean value for {key}: {raw!r}",
        config_key=key,
    )


def _parse_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(
            message=f"Invalid integer value for {key}: {raw!r}",
            config_key=key,
        )
    if value <= 0:
        raise ConfigurationError(
            message=f"{key} must be positive, got {value}",
            config_key=key,
        )
    return value


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read once per process from the environment."""

    products_table: str = ""
    stocks_table: str = ""
    sns_topic_arn: str = ""
    upload_bucket: str = ""
    aws_region: str = "us-east-1"
    localstack_endpoint: Optional[str] = None
    create_requires_count: bool = True
    redeliver_on_notify_failure: bool = False
    presigned_url_expiry: int = 900
    boto_max_attempts: int = 3

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            products_table=env.get("PRODUCTS_TABLE", ""),
            stocks_table=env.get("STOCKS_TABLE", ""),
            sns_topic_arn=env.get("SNS_TOPIC_ARN", ""),
            upload_bucket=env.get("UPLOAD_BUCKET", ""),
            aws_region=env.get("AWS_REGION") or env.get("AWS_DEFAULT_REGION") or "us-east-1",
            localstack_endpoint=env.get("LOCALSTACK_ENDPOINT") or None,
            create_requires_count=_parse_bool(env, "CREATE_REQUIRES_COUNT", True),
            redeliver_on_notify_failure=_parse_bool(env, "REDELIVER_ON_NOTIFY_FAILURE", False),
            presigned_url_expiry=_parse_int(env, "PRESIGNED_URL_EXPIRY", 900),
            boto_max_attempts=_parse_int(env, "BOTO_MAX_ATTEMPTS", 3),
        )

    def require(self, attribute: str) -> str:
        """Return a required setting, raising ConfigurationError when it is empty."""
        value = getattr(self, attribute)
        if not value:
            raise ConfigurationError(
                message=f"Missing required setting: {attribute.upper()}",
                config_key=attribute.upper(),
            )
        return value


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the process-wide settings."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Drop cached settings (useful for testing)."""
    global _settings
    _settings = None
