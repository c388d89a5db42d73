"""Mapping of validated payloads to Product records."""

import uuid

from product_service.models import Product
from product_service.validator import to_number


def map_product(data: dict) -> Product:
    """
    Build a Product from a payload that already passed validate_product.

    Keeps a caller-supplied ``id`` and generates a UUID otherwise.
    Numeric strings are coerced; a missing count maps to 0.
    """
    product_id = data.get("id")
    if product_id is None or str(product_id) == "":
        product_id = str(uuid.uuid4())

    count = to_number(data.get("count"))

    return Product(
        id=str(product_id),
        title=str(data["title"]),
        description=str(data["description"]),
        price=float(to_number(data["price"])),
        count=int(count) if count is not None else 0,
    )
