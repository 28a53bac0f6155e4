"""Pytest configuration and fixtures"""
import itertools
import os
from typing import Any, Callable, Dict, List, Optional

import pytest

# Set test environment variables
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test_anon_key")
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")

from storefront.auth import Identity  # noqa: E402
from storefront.cart import CartStore, LocalCartStorage, MemorySlot  # noqa: E402
from storefront.services.repositories import CartRepository  # noqa: E402


class _Result:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class _FakeQuery:
    """Minimal async PostgREST builder over an in-memory table."""

    def __init__(self, client: "FakeSupabase", table: str):
        self.client = client
        self.table_name = table
        self._mode: Optional[str] = None
        self._payload: Any = None
        self._filters: List[tuple] = []
        self._predicates: List[Callable[[Dict[str, Any]], bool]] = []
        self._single = False
        self._order: Optional[tuple] = None
        self._limit: Optional[int] = None
        self._count: Optional[str] = None
        self._on_conflict: Optional[str] = None

    @property
    def rows(self) -> List[Dict[str, Any]]:
        return self.client.tables.setdefault(self.table_name, [])

    def select(self, *_columns, count=None):
        self._mode = "select"
        self._count = count
        return self

    def insert(self, data):
        self._mode = "insert"
        self._payload = data
        return self

    def upsert(self, data, on_conflict=None):
        self._mode = "upsert"
        self._payload = data
        self._on_conflict = on_conflict
        return self

    def update(self, data):
        self._mode = "update"
        self._payload = data
        return self

    def delete(self):
        self._mode = "delete"
        return self

    def eq(self, field: str, value):
        self._filters.append((field, value))
        return self

    def in_(self, field: str, values):
        allowed = list(values)
        self._predicates.append(lambda row: row.get(field) in allowed)
        return self

    def or_(self, filters: str):
        """Supports the `field.ilike.%term%` clauses the catalog search sends."""
        clauses = []
        for clause in filters.split(","):
            field, op, pattern = clause.split(".", 2)
            assert op == "ilike"
            clauses.append((field, pattern.strip("%").lower()))
        self._predicates.append(
            lambda row: any(term in str(row.get(field) or "").lower() for field, term in clauses)
        )
        return self

    def maybe_single(self):
        self._single = True
        return self

    def order(self, field: str, desc: bool = False):
        self._order = (field, desc)
        return self

    def limit(self, n: int):
        self._limit = n
        return self

    def _matches(self, row) -> bool:
        return all(row.get(field) == value for field, value in self._filters) and all(
            predicate(row) for predicate in self._predicates
        )

    def _stamp(self, row: Dict[str, Any]) -> Dict[str, Any]:
        row = dict(row)
        row.setdefault("id", f"{self.table_name}-{next(self.client.ids)}")
        row.setdefault("created_at", f"2025-01-01T00:00:{next(self.client.ticks):02d}Z")
        return row

    async def execute(self):
        self.client.calls.append((self.table_name, self._mode))
        if self._mode in self.client.fail_on:
            raise RuntimeError(f"simulated {self._mode} failure")

        if self._mode == "select":
            found = [dict(r) for r in self.rows if self._matches(r)]
            if self._order:
                field, desc = self._order
                found.sort(key=lambda r: r.get(field) or "", reverse=desc)
            if self._limit is not None:
                found = found[: self._limit]
            if self._single:
                return _Result(found[0] if found else None)
            return _Result(found, count=len(found) if self._count else None)

        payload = self._payload if isinstance(self._payload, list) else [self._payload]

        if self._mode == "insert":
            created = [self._stamp(r) for r in payload]
            self.rows.extend(created)
            return _Result(created)

        if self._mode == "upsert":
            keys = (self._on_conflict or "id").split(",")
            written = []
            for new in payload:
                existing = next(
                    (r for r in self.rows if all(r.get(k) == new.get(k) for k in keys)),
                    None,
                )
                if existing:
                    existing.update(new)
                    written.append(existing)
                else:
                    row = self._stamp(new)
                    self.rows.append(row)
                    written.append(row)
            return _Result(written)

        if self._mode == "update":
            updated = [r for r in self.rows if self._matches(r)]
            for r in updated:
                r.update(self._payload)
            return _Result(updated)

        if self._mode == "delete":
            removed = [r for r in self.rows if self._matches(r)]
            self.client.tables[self.table_name] = [r for r in self.rows if not self._matches(r)]
            return _Result(removed)

        return _Result([])


class FakeSupabase:
    """Stand-in for the async Supabase client's table API."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self.fail_on: set = set()
        self.ids = itertools.count(1)
        self.ticks = itertools.count(0)

    def table(self, name: str) -> _FakeQuery:
        return _FakeQuery(self, name)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def cart_repo(fake_supabase):
    return CartRepository(fake_supabase)


@pytest.fixture
def slot():
    return MemorySlot()


@pytest.fixture
def local_storage(slot):
    return LocalCartStorage(slot)


@pytest.fixture
def store(cart_repo, local_storage):
    return CartStore(remote=cart_repo, local=local_storage)


@pytest.fixture
def alice():
    return Identity(user_id="user-alice", email="alice@example.com")


@pytest.fixture
def sample_line_row():
    """A `cart_items` row as the backend returns it."""
    return {
        "user_id": "user-alice",
        "product_id": "prod-b",
        "product_name": "USB-C Hub",
        "product_image": "https://cdn.example.com/hub.png",
        "quantity": 3,
        "unit_price": 25.5,
    }


@pytest.fixture
def sample_zones():
    return [
        {
            "id": "zone-inside",
            "name": "Inside Dhaka",
            "regions": ["Dhaka", "Mirpur"],
            "shipping_rate": 60,
            "free_shipping_threshold": 2000,
            "estimated_days": "1-2",
            "is_active": True,
        },
        {
            "id": "zone-outside",
            "name": "Outside Dhaka",
            "regions": [],
            "shipping_rate": 120,
            "free_shipping_threshold": None,
            "estimated_days": "3-5",
            "is_active": True,
        },
    ]


@pytest.fixture
def catalog_tables():
    """`categories` and `products` rows for catalog queries."""
    return {
        "categories": [
            {"id": "cat-kb", "name": "Keyboards", "slug": "keyboards", "parent_category": "PC Accessories"},
            {"id": "cat-mice", "name": "Mice", "slug": "mice", "parent_category": "PC Accessories"},
            {"id": "cat-phones", "name": "Phones", "slug": "phones", "parent_category": None},
        ],
        "products": [
            {
                "id": "prod-kb",
                "name": "Mechanical Keyboard",
                "description": "Hot-swap switches",
                "brand": "Keychron",
                "price": 89.99,
                "category_id": "cat-kb",
                "stock": 4,
                "is_featured": True,
                "is_active": True,
                "created_at": "2025-01-03T00:00:00Z",
            },
            {
                "id": "prod-mouse",
                "name": "Wireless Mouse",
                "description": "Silent clicks",
                "brand": "Logitech",
                "price": "24.50",
                "category_id": "cat-mice",
                "stock": 0,
                "is_featured": False,
                "is_active": True,
                "created_at": "2025-01-02T00:00:00Z",
            },
            {
                "id": "prod-phone",
                "name": "Budget Phone",
                "description": "Pairs with a keyboard case",
                "brand": "Acme",
                "price": 199,
                "category_id": "cat-phones",
                "stock": 10,
                "is_featured": True,
                "is_active": True,
                "created_at": "2025-01-01T00:00:00Z",
            },
            {
                "id": "prod-retired",
                "name": "Retired Keyboard",
                "price": 10,
                "category_id": "cat-kb",
                "is_featured": True,
                "is_active": False,
                "created_at": "2025-01-04T00:00:00Z",
            },
        ],
    }
