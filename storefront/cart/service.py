"""Cart store: optimistic local cart with best-effort sync to the user's remote cart."""
import asyncio
from dataclasses import replace
from decimal import Decimal
from typing import Awaitable, Callable, Optional, Protocol

from storefront.auth import Identity, IdentityProvider
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.services.money import round_money, to_decimal, to_float
from .models import CartLine, CartSnapshot
from .storage import LocalCartStorage

logger = get_logger(__name__)


class RemoteCart(Protocol):
    """Per-user remote item collection keyed by (user_id, product_id)."""

    async def fetch_all(self, user_id: str) -> list[CartLine]: ...

    async def upsert(self, user_id: str, line: CartLine) -> None: ...

    async def upsert_many(self, user_id: str, lines: list[CartLine]) -> None: ...

    async def delete(self, user_id: str, product_id: str) -> None: ...

    async def delete_all(self, user_id: str) -> None: ...


def _user_id(identity: Optional[Identity]) -> Optional[str]:
    return identity.user_id if identity is not None else None


class CartStore:
    """
    Owns the cart lines for the current session.

    Features:
    - Anonymous carts persist to a device-local slot
    - Signed-in carts mirror every change to the remote `cart_items` table
    - On login the remote cart wins when non-empty, otherwise the local
      cart is pushed up and the local slot cleared

    Mutations update memory (and the local slot when anonymous) before
    returning. Remote writes run as background tasks; their failures are
    logged and never reach the caller.

    While a login reconciliation is in flight, mutations stay local and are
    recorded; once the reconciled cart is adopted they are replayed onto it
    and synced to the signed-in user.
    """

    def __init__(
        self,
        remote: Optional[RemoteCart] = None,
        local: Optional[LocalCartStorage] = None,
        identity_provider: Optional[IdentityProvider] = None,
    ):
        self.remote = remote
        self.local = local if local is not None else LocalCartStorage()
        self.identity: Optional[Identity] = None
        self.loading = False
        self.lines: CartSnapshot = self.local.load()

        # Identity that remote writes go to; lags `identity` during a login
        self._sync_identity: Optional[Identity] = None
        self._deferred: list[tuple] = []
        self._pending: set[asyncio.Task] = set()
        self._generation = 0
        self._unsubscribe: Optional[Callable[[], None]] = None
        if identity_provider is not None:
            self._unsubscribe = identity_provider.subscribe(self.set_identity)

    @classmethod
    async def create(
        cls,
        remote: Optional[RemoteCart] = None,
        local: Optional[LocalCartStorage] = None,
        identity_provider: Optional[IdentityProvider] = None,
    ) -> "CartStore":
        """Build a store and hydrate it for the provider's current identity."""
        store = cls(remote=remote, local=local, identity_provider=identity_provider)
        if identity_provider is not None and identity_provider.current is not None:
            await store.set_identity(identity_provider.current)
        return store

    # ==================== IDENTITY ====================

    async def set_identity(self, identity: Optional[Identity]) -> None:
        """React to login, logout or a user switch.

        Profile-only changes for the same user (e.g. a new email) are stored
        without touching the cart.
        """
        if _user_id(identity) == _user_id(self.identity):
            self.identity = identity
            if self._sync_identity is not None:
                self._sync_identity = identity
            return

        self._generation += 1
        generation = self._generation
        self.identity = identity
        self._sync_identity = None
        self._deferred = []

        if identity is None:
            self.loading = False
            self.lines = self.local.load()
            return

        self.loading = True
        try:
            lines, reconciled = await self._reconcile(identity)
        finally:
            if generation == self._generation:
                self.loading = False

        if generation != self._generation:
            logger.info(
                "Discarding stale cart reconciliation for user %s",
                sanitize_id_for_logging(identity.user_id),
            )
            return

        deferred, self._deferred = self._deferred, []
        self._sync_identity = self.identity
        if not reconciled:
            # The local slot already holds whatever changed while loading
            self.lines = self.local.load()
            return

        self.lines = lines
        if deferred:
            logger.info("Replaying %d cart changes made during login", len(deferred))
        for op, *args in deferred:
            getattr(self, op)(*args)

    async def _reconcile(self, identity: Identity) -> tuple[CartSnapshot, bool]:
        """Return the adopted snapshot and whether the remote side agreed to it."""
        local = self.local.load()
        if self.remote is None:
            logger.warning("No remote cart configured, keeping local cart")
            return local, False

        user_id = identity.user_id
        try:
            remote_lines = await self.remote.fetch_all(user_id)
            if remote_lines:
                self.local.clear()
                snapshot = CartSnapshot()
                for line in remote_lines:
                    snapshot.upsert(line)
                return snapshot, True

            if local:
                await self.remote.upsert_many(user_id, [replace(line) for line in local])
                self.local.clear()
                logger.info(
                    "Pushed %d local cart lines for user %s",
                    len(local),
                    sanitize_id_for_logging(user_id),
                )
                return local, True

            return CartSnapshot(), True
        except Exception as e:
            logger.warning(
                "Cart reconciliation failed for user %s: %s",
                sanitize_id_for_logging(user_id),
                type(e).__name__,
                exc_info=True,
            )
            return local, False

    # ==================== MUTATIONS ====================

    def add_line(
        self,
        product_id: str,
        name: str,
        unit_price,
        image_ref: str = "",
        quantity: int = 1,
    ) -> CartLine:
        """Add a product, merging quantities if it is already in the cart."""
        if not product_id or not isinstance(product_id, str):
            raise ValueError("product_id must be a non-empty string")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValueError("quantity must be a positive integer")
        price = to_decimal(unit_price)
        if not price.is_finite() or price < 0:
            raise ValueError("unit_price must be a non-negative number")

        line = self.lines.upsert(
            CartLine(
                product_id=product_id,
                name=name,
                unit_price=price,
                image_ref=image_ref or "",
                quantity=quantity,
            )
        )
        self._defer("add_line", product_id, name, price, image_ref or "", quantity)
        self._persist_line(line)
        return replace(line)

    def remove_line(self, product_id: str) -> None:
        """Remove a product; absent products are ignored."""
        if not self.lines.remove(product_id):
            return

        self._defer("remove_line", product_id)
        if self._sync_identity is not None:
            user_id = self._sync_identity.user_id
            self._schedule("delete", lambda: self.remote.delete(user_id, product_id))
        else:
            self.local.save(self.lines)

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """Set an absolute quantity; zero or less removes the line."""
        if not isinstance(quantity, int) or isinstance(quantity, bool):
            raise ValueError("quantity must be an integer")

        if quantity <= 0:
            self.remove_line(product_id)
            return

        line = self.lines.get(product_id)
        if line is None:
            return
        line.quantity = quantity
        self._defer("set_quantity", product_id, quantity)
        self._persist_line(line)

    def clear(self) -> None:
        """Empty the cart, remotely too when signed in."""
        self.lines = CartSnapshot()
        self._defer("clear")
        if self._sync_identity is not None:
            user_id = self._sync_identity.user_id
            self._schedule("clear", lambda: self.remote.delete_all(user_id))
        self.local.clear()

    # ==================== READS ====================

    def get_line(self, product_id: str) -> Optional[CartLine]:
        line = self.lines.get(product_id)
        return replace(line) if line else None

    def total_item_count(self) -> int:
        return self.lines.total_items

    def total_price(self) -> Decimal:
        return self.lines.total_price

    def summary(self) -> dict:
        """Cart summary for display, amounts rounded to cents."""
        if not self.lines:
            return {
                "is_empty": True,
                "loading": self.loading,
                "total_items": 0,
                "items": [],
                "total": 0.0,
            }

        return {
            "is_empty": False,
            "loading": self.loading,
            "total_items": self.total_item_count(),
            "items": [
                {
                    "product_id": line.product_id,
                    "name": line.name,
                    "image": line.image_ref,
                    "quantity": line.quantity,
                    "unit_price": to_float(round_money(line.unit_price)),
                    "total": to_float(round_money(line.line_total)),
                }
                for line in self.lines
            ],
            "total": to_float(round_money(self.total_price())),
        }

    # ==================== SYNC ====================

    def _defer(self, op: str, *args) -> None:
        if self.loading and self.identity is not None:
            self._deferred.append((op, *args))

    def _persist_line(self, line: CartLine) -> None:
        if self._sync_identity is not None:
            user_id = self._sync_identity.user_id
            payload = replace(line)
            self._schedule("upsert", lambda: self.remote.upsert(user_id, payload))
        else:
            self.local.save(self.lines)

    def _schedule(self, action: str, make_call: Callable[[], Awaitable[None]]) -> None:
        if self.remote is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, skipping remote cart %s", action)
            return

        task = loop.create_task(self._run_remote(action, make_call))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _run_remote(self, action: str, make_call: Callable[[], Awaitable[None]]) -> None:
        try:
            await make_call()
        except Exception as e:
            logger.error("Remote cart %s failed: %s", action, type(e).__name__, exc_info=True)

    async def flush(self) -> None:
        """Wait for background remote writes scheduled so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def close(self) -> None:
        """Stop following the identity provider."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None


async def create_cart_store(
    identity_provider: Optional[IdentityProvider] = None,
    local: Optional[LocalCartStorage] = None,
) -> CartStore:
    """Build a CartStore backed by the configured Supabase project."""
    from storefront.db import get_supabase
    from storefront.services.repositories import CartRepository

    client = await get_supabase()
    return await CartStore.create(
        remote=CartRepository(client),
        local=local,
        identity_provider=identity_provider,
    )
