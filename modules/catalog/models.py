"""
Catalog Module - Models
========================
Product as returned by the remote API, plus the storefront's list query.
"""

import enum
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class ProductSort(str, enum.Enum):
    LATEST = "latest"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NAME_ASC = "name_asc"


class Product(BaseModel):
    id: str
    shop_id: str
    category_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    price: Decimal
    stock_quantity: int = 0
    image_url: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def in_stock(self) -> bool:
        return self.is_active and self.stock_quantity > 0


class ProductQuery(BaseModel):
    """Search / filter / sort options for the product list."""
    search: Optional[str] = None
    min_price: Optional[Decimal] = Field(default=None, ge=0)
    max_price: Optional[Decimal] = Field(default=None, ge=0)
    sort: ProductSort = ProductSort.LATEST

    def as_params(self) -> dict:
        return {
            "search": self.search or None,
            "min_price": str(self.min_price) if self.min_price is not None else None,
            "max_price": str(self.max_price) if self.max_price is not None else None,
            "sort": self.sort.value,
        }
