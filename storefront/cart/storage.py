"""Device-local persistence for the anonymous cart."""
import json
import os
from pathlib import Path
from typing import Optional, Protocol

from storefront.db import get_redis_sync, RedisKeys, TTL
from storefront.logging import get_logger
from .models import CartSnapshot

logger = get_logger(__name__)

CART_STORAGE_KEY = os.environ.get("CART_STORAGE_KEY", "cart")
CART_STORAGE_PATH = os.environ.get("CART_STORAGE_PATH", "")


class LocalSlot(Protocol):
    """A single string value kept on the device."""

    def get(self) -> Optional[str]: ...

    def set(self, value: str) -> None: ...

    def delete(self) -> None: ...


class MemorySlot:
    """In-process slot. Lost on exit; used for tests and ephemeral sessions."""

    def __init__(self, value: Optional[str] = None):
        self.value = value

    def get(self) -> Optional[str]:
        return self.value

    def set(self, value: str) -> None:
        self.value = value

    def delete(self) -> None:
        self.value = None


class FileSlot:
    """Slot stored as a JSON file on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def get(self) -> Optional[str]:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, value: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(self.path)

    def delete(self) -> None:
        self.path.unlink(missing_ok=True)


class RedisSlot:
    """Slot stored under an Upstash Redis key with a 30 day TTL."""

    def __init__(self, device_id: str, redis=None):
        self.key = RedisKeys.guest_cart_key(device_id)
        self._redis = redis

    @property
    def redis(self):
        if self._redis is None:
            self._redis = get_redis_sync()
        return self._redis

    def get(self) -> Optional[str]:
        return self.redis.get(self.key)

    def set(self, value: str) -> None:
        self.redis.set(self.key, value, ex=TTL.GUEST_CART)

    def delete(self) -> None:
        self.redis.delete(self.key)


def default_slot() -> LocalSlot:
    """Pick the slot from environment: a file when CART_STORAGE_PATH is set, memory otherwise."""
    if CART_STORAGE_PATH:
        return FileSlot(Path(CART_STORAGE_PATH) / f"{CART_STORAGE_KEY}.json")
    return MemorySlot()


class LocalCartStorage:
    """Reads and writes a CartSnapshot through a LocalSlot."""

    def __init__(self, slot: Optional[LocalSlot] = None):
        self.slot = slot if slot is not None else default_slot()

    def load(self) -> CartSnapshot:
        """Load the persisted snapshot; missing or corrupted data yields an empty cart."""
        data = self.slot.get()
        if not data:
            return CartSnapshot()

        try:
            return CartSnapshot.from_json(data)
        except (json.JSONDecodeError, ValueError, KeyError, TypeError) as e:
            logger.warning("Corrupted local cart data, discarding: %s", type(e).__name__)
            self.slot.delete()
            return CartSnapshot()

    def save(self, snapshot: CartSnapshot) -> None:
        self.slot.set(snapshot.to_json())

    def clear(self) -> None:
        self.slot.delete()
