"""
Logging setup for the product service Lambdas.

Under Lambda every record is one JSON line tagged with the invocation's
correlation id and, inside a batch, the SQS message id being processed.
"""

import functools
import json
import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")
_message_id: ContextVar[str] = ContextVar("message_id", default="")

# Attributes passed through `extra=` that are copied into the JSON line.
_RECORD_FIELDS = ("product_id", "status_code", "duration_ms", "metrics", "event_type")


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Bind the invocation's request id, or a fresh uuid4 when there is none."""
    cid = correlation_id or str(uuid.uuid4())
    _correlation_id.set(cid)
    return cid


def get_message_id() -> str:
    return _message_id.get()


class StructuredJsonFormatter(logging.Formatter):
    """Formats records as single-line JSON for CloudWatch Logs Insights."""

    def __init__(self, service_name: str = "product-service"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "correlation_id": _correlation_id.get(),
        }
        if _message_id.get():
            log_data["message_id"] = _message_id.get()

        log_data.update(
            {name: getattr(record, name) for name in _RECORD_FIELDS if hasattr(record, name)}
        )
        if isinstance(getattr(record, "extra_data", None), dict):
            log_data["data"] = record.extra_data
        if record.exc_info and record.exc_info[0]:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(log_data, default=str)


class ContextualLogger(logging.LoggerAdapter):
    """Adapter whose bound fields are merged into each call's `extra`."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**kwargs.get("extra", {}), **self.extra}
        return msg, kwargs

    def with_product(self, product_id: str) -> "ContextualLogger":
        return ContextualLogger(self.logger, {**self.extra, "product_id": product_id})


def configure_logging(
    level: str = "INFO",
    service_name: str = "product-service",
) -> ContextualLogger:
    """
    Install a single stdout handler on the root logger.

    JSON lines when running inside Lambda, a plain text format otherwise.
    boto and urllib3 are held at WARNING.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if os.environ.get("AWS_LAMBDA_FUNCTION_NAME"):
        handler.setFormatter(StructuredJsonFormatter(service_name))
    else:
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(asctime)s - %(name)s - %(message)s"))
    root_logger.addHandler(handler)

    for noisy in ("boto3", "botocore", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return ContextualLogger(logging.getLogger(service_name), {})


class LogContext:
    """Binds an SQS message id to every record logged inside the block."""

    def __init__(self, message_id: str):
        self.message_id = message_id
        self._token = None

    def __enter__(self):
        self._token = _message_id.set(self.message_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _message_id.reset(self._token)
        return False


def log_execution_time(logger: logging.Logger):
    """Decorator logging how long the wrapped call took, on success and on failure."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
                logger.error(
                    f"{func.__name__} failed after {duration_ms}ms: {e}",
                    extra={"duration_ms": duration_ms},
                    exc_info=True,
                )
                raise
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            logger.info(f"{func.__name__} completed", extra={"duration_ms": duration_ms})
            return result
        return wrapper
    return decorator
