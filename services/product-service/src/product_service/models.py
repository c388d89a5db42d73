"""
Data models for the product catalog.
Products and stock counts live in separate tables and are always written together.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """
    Catalog entry. ``count`` travels with the product at ingestion
    time and on reads, but is persisted in the stocks table.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str
    description: str
    price: float = Field(..., gt=0, allow_inf_nan=False)
    count: int = Field(0, ge=0)

    def to_item(self) -> dict[str, Any]:
        """Products table item, without the stock count."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "price": Decimal(str(self.price)),
        }

    def stock_entry(self) -> "StockEntry":
        return StockEntry(product_id=self.id, count=self.count)

    def to_message(self) -> str:
        """JSON payload published on product creation."""
        return self.model_dump_json()


class StockEntry(BaseModel):
    """Available quantity for a product."""
    model_config = ConfigDict(frozen=True)

    product_id: str = Field(..., min_length=1)
    count: int = Field(0, ge=0)

    def to_item(self) -> dict[str, Any]:
        return {"product_id": self.product_id, "count": self.count}
