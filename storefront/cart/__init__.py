"""Cart package: models, local storage, and the cart store."""
from .models import CartLine, CartSnapshot
from .service import CartStore, create_cart_store
from .storage import FileSlot, LocalCartStorage, MemorySlot, RedisSlot

__all__ = [
    "CartLine",
    "CartSnapshot",
    "CartStore",
    "create_cart_store",
    "FileSlot",
    "LocalCartStorage",
    "MemorySlot",
    "RedisSlot",
]
