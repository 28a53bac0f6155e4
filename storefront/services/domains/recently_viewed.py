"""Recently Viewed Domain Service.

Tracks product views for signed-in users. Anonymous views are not recorded.
"""

from datetime import UTC, datetime

from storefront.logging import get_logger
from storefront.services.models import RecentlyViewedItem, embed_product

logger = get_logger(__name__)

RECENTLY_VIEWED_LIMIT = 10


class RecentlyViewedService:
    """Recently viewed products."""

    def __init__(self, client) -> None:
        self.client = client

    async def get_items(self, user_id: str | None) -> list[RecentlyViewedItem]:
        if not user_id:
            return []
        try:
            result = (
                await self.client.table("recently_viewed")
                .select("id,product_id,viewed_at,products:product_id(id,name,price,image_url)")
                .eq("user_id", user_id)
                .order("viewed_at", desc=True)
                .limit(RECENTLY_VIEWED_LIMIT)
                .execute()
            )
            return [RecentlyViewedItem(**embed_product(row)) for row in result.data or []]
        except Exception as e:
            logger.error("Failed to get recently viewed: %s", type(e).__name__, exc_info=True)
            return []

    async def track_view(self, user_id: str | None, product_id: str) -> None:
        """Bump `viewed_at` for a product seen before, insert it otherwise."""
        if not user_id:
            return
        try:
            existing = (
                await self.client.table("recently_viewed")
                .select("id")
                .eq("user_id", user_id)
                .eq("product_id", product_id)
                .execute()
            )
            if existing.data:
                await (
                    self.client.table("recently_viewed")
                    .update({"viewed_at": datetime.now(UTC).isoformat()})
                    .eq("id", existing.data[0]["id"])
                    .execute()
                )
            else:
                await (
                    self.client.table("recently_viewed")
                    .insert({"user_id": user_id, "product_id": product_id})
                    .execute()
                )
        except Exception as e:
            logger.warning("Failed to track product view: %s", type(e).__name__)

    async def clear_history(self, user_id: str | None) -> None:
        if not user_id:
            return
        try:
            await self.client.table("recently_viewed").delete().eq("user_id", user_id).execute()
        except Exception as e:
            logger.error("Failed to clear recently viewed: %s", type(e).__name__, exc_info=True)
