"""
Shop Module - Models
======================
A vendor's storefront. One shop per vendor; the slug is derived by the API
from the name.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 100
DESCRIPTION_MIN_LENGTH = 10
DESCRIPTION_MAX_LENGTH = 1000


class Shop(BaseModel):
    id: str
    vendor_id: Optional[str] = None
    name: str
    slug: str = ""
    description: Optional[str] = None
    logo_url: Optional[str] = None
    banner_url: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_active: bool = True
    is_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ShopStats(Shop):
    total_products: int = 0
    total_orders: int = 0
    total_revenue: Decimal = Decimal("0")
    average_rating: float = 0.0


class ShopPage(BaseModel):
    shops: List[Shop] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 20
    total_pages: int = 1

    @field_validator("shops", mode="before")
    @classmethod
    def _null_shops(cls, v):
        return [] if v is None else v


class ShopCreate(BaseModel):
    name: str = ""
    description: str = ""
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
