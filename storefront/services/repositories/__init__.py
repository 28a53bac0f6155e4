"""
Repository Pattern for Database Operations

- CartRepository: per-user cart rows
- ProductRepository: catalog products and categories
- ShippingRepository: shipping zones
"""
from .cart_repo import CartRepository
from .product_repo import ProductRepository
from .shipping_repo import ShippingRepository

__all__ = [
    "CartRepository",
    "ProductRepository",
    "ShippingRepository",
]
