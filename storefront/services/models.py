"""Database Models - Pydantic models for storefront tables."""
from decimal import Decimal
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, field_validator

from storefront.services.money import to_decimal as _to_decimal


class ProductSummary(BaseModel):
    """Product fields embedded in wishlist/comparison/history rows."""
    id: str
    name: str
    price: Decimal
    original_price: Optional[Decimal] = None
    image_url: Optional[str] = None
    brand: Optional[str] = None
    description: Optional[str] = None
    specifications: Optional[dict[str, Any]] = None
    stock: int = 0

    class Config:
        extra = "ignore"

    @field_validator("price", "original_price", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return _to_decimal(v) if v is not None else None

    @property
    def in_stock(self) -> bool:
        return self.stock > 0


class WishlistItem(BaseModel):
    """Wishlist row with its product."""
    id: str
    product_id: str
    created_at: Optional[datetime] = None
    product: Optional[ProductSummary] = None

    class Config:
        extra = "ignore"


class ComparisonItem(BaseModel):
    """Product comparison row with its product."""
    id: str
    product_id: Optional[str] = None
    created_at: Optional[datetime] = None
    product: Optional[ProductSummary] = None

    class Config:
        extra = "ignore"


class RecentlyViewedItem(BaseModel):
    """Recently viewed row with its product."""
    id: str
    product_id: Optional[str] = None
    viewed_at: Optional[datetime] = None
    product: Optional[ProductSummary] = None

    class Config:
        extra = "ignore"


class ShippingZone(BaseModel):
    """Shipping zone with a flat rate and optional free-shipping threshold."""
    id: str
    name: str
    regions: list[str] = []
    shipping_rate: Decimal
    free_shipping_threshold: Optional[Decimal] = None
    estimated_days: Optional[str] = None
    is_active: bool = True

    class Config:
        extra = "ignore"

    @field_validator("shipping_rate", mode="before")
    @classmethod
    def convert_rate_to_decimal(cls, v):
        return _to_decimal(v)

    @field_validator("free_shipping_threshold", mode="before")
    @classmethod
    def convert_threshold_to_decimal(cls, v):
        return _to_decimal(v) if v is not None else None


class CategoryRef(BaseModel):
    """Category fields embedded in a product row."""
    id: str
    name: str
    slug: str
    parent_category: Optional[str] = None

    class Config:
        extra = "ignore"


class Category(CategoryRef):
    """Catalog category."""
    description: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None


class Product(BaseModel):
    """Catalog product."""
    id: str
    name: str
    description: Optional[str] = None
    price: Decimal
    original_price: Optional[Decimal] = None
    category_id: Optional[str] = None
    image_url: Optional[str] = None
    stock: int = 0
    is_featured: bool = False
    is_active: bool = True
    sku: Optional[str] = None
    brand: Optional[str] = None
    specifications: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    category: Optional[CategoryRef] = None

    class Config:
        extra = "ignore"

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return _to_decimal(v)

    @field_validator("original_price", mode="before")
    @classmethod
    def convert_original_price_to_decimal(cls, v):
        return _to_decimal(v) if v is not None else None

    @property
    def in_stock(self) -> bool:
        return self.stock > 0


class ProductReview(BaseModel):
    """Approved customer review."""
    id: str
    product_id: str
    user_id: str
    rating: int
    title: Optional[str] = None
    comment: Optional[str] = None
    is_verified_purchase: Optional[bool] = None
    created_at: Optional[datetime] = None

    class Config:
        extra = "ignore"


def embed_product(row: dict) -> dict:
    """Move the PostgREST `products` embed to the `product` key."""
    data = dict(row)
    data["product"] = data.pop("products", None)
    return data
