"""Cart Repository - per-user `cart_items` rows.

Rows are unique on (user_id, product_id). Errors propagate to the caller;
the cart store decides what a failed sync means.
"""

from datetime import UTC, datetime

from storefront.cart.models import CartLine

from .base import BaseRepository

TABLE = "cart_items"


class CartRepository(BaseRepository):
    """Remote cart item collection."""

    async def fetch_all(self, user_id: str) -> list[CartLine]:
        """Get all cart lines for a user, oldest first."""
        result = (
            await self.client.table(TABLE)
            .select("product_id,product_name,product_image,quantity,unit_price")
            .eq("user_id", user_id)
            .order("created_at")
            .execute()
        )
        return [CartLine.from_row(row) for row in result.data or [] if row.get("product_id")]

    async def upsert(self, user_id: str, line: CartLine) -> None:
        """Create or replace the row for (user_id, line.product_id)."""
        row = line.to_row(user_id)
        row["updated_at"] = datetime.now(UTC).isoformat()
        await (
            self.client.table(TABLE)
            .upsert(row, on_conflict="user_id,product_id")
            .execute()
        )

    async def upsert_many(self, user_id: str, lines: list[CartLine]) -> None:
        """Push several lines in one request."""
        if not lines:
            return
        now = datetime.now(UTC).isoformat()
        rows = [{**line.to_row(user_id), "updated_at": now} for line in lines]
        await (
            self.client.table(TABLE)
            .upsert(rows, on_conflict="user_id,product_id")
            .execute()
        )

    async def delete(self, user_id: str, product_id: str) -> None:
        await (
            self.client.table(TABLE)
            .delete()
            .eq("user_id", user_id)
            .eq("product_id", product_id)
            .execute()
        )

    async def delete_all(self, user_id: str) -> None:
        await self.client.table(TABLE).delete().eq("user_id", user_id).execute()
