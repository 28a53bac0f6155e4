"""Wishlist Domain Service.

Handles the signed-in user's wishlist. Anonymous users have no wishlist.
All methods use async/await with supabase-py v2.
"""

from typing import Any

from storefront.errors import (
    ERROR_ALREADY_IN_WISHLIST,
    ERROR_LOGIN_REQUIRED_WISHLIST,
    ERROR_WISHLIST_FAILED,
)
from storefront.logging import get_logger
from storefront.services.models import WishlistItem, embed_product

logger = get_logger(__name__)

WISHLIST_SELECT = (
    "id,product_id,created_at,products:product_id(id,name,price,image_url,stock)"
)


class WishlistService:
    """Wishlist domain service."""

    def __init__(self, client) -> None:
        self.client = client

    async def get_items(self, user_id: str | None) -> list[WishlistItem]:
        """Get user's wishlist items, newest first.

        Args:
            user_id: Signed-in user ID, or None when anonymous

        Returns:
            List of WishlistItem (empty for anonymous users or on failure)

        """
        if not user_id:
            return []
        try:
            result = (
                await self.client.table("wishlist")
                .select(WISHLIST_SELECT)
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
            return [WishlistItem(**embed_product(row)) for row in result.data or []]
        except Exception as e:
            logger.error("Failed to get wishlist: %s", type(e).__name__, exc_info=True)
            return []

    async def add_item(self, user_id: str | None, product_id: str) -> dict[str, Any]:
        """Add product to wishlist.

        Args:
            user_id: Signed-in user ID, or None when anonymous
            product_id: Product UUID

        Returns:
            Success/failure result

        """
        if not user_id:
            return {"success": False, "reason": ERROR_LOGIN_REQUIRED_WISHLIST}

        if await self.is_in_wishlist(user_id, product_id):
            return {"success": False, "reason": ERROR_ALREADY_IN_WISHLIST}

        try:
            await (
                self.client.table("wishlist")
                .insert({"user_id": user_id, "product_id": product_id})
                .execute()
            )
            return {"success": True, "message": "Added to wishlist"}
        except Exception as e:
            if "duplicate" in str(e).lower() or "unique" in str(e).lower():
                return {"success": False, "reason": ERROR_ALREADY_IN_WISHLIST}
            logger.error("Failed to add to wishlist: %s", type(e).__name__, exc_info=True)
            return {"success": False, "reason": ERROR_WISHLIST_FAILED}

    async def remove_item(self, user_id: str | None, product_id: str) -> dict[str, Any]:
        """Remove product from wishlist."""
        if not user_id:
            return {"success": True, "message": "Removed from wishlist"}
        try:
            await (
                self.client.table("wishlist")
                .delete()
                .eq("user_id", user_id)
                .eq("product_id", product_id)
                .execute()
            )
            return {"success": True, "message": "Removed from wishlist"}
        except Exception as e:
            logger.error("Failed to remove from wishlist: %s", type(e).__name__, exc_info=True)
            return {"success": False, "reason": ERROR_WISHLIST_FAILED}

    async def is_in_wishlist(self, user_id: str | None, product_id: str) -> bool:
        if not user_id:
            return False
        try:
            result = (
                await self.client.table("wishlist")
                .select("id")
                .eq("user_id", user_id)
                .eq("product_id", product_id)
                .execute()
            )
            return bool(result.data)
        except Exception:
            logger.warning("Wishlist lookup failed", exc_info=True)
            return False

    async def toggle(self, user_id: str | None, product_id: str) -> dict[str, Any]:
        """Add the product if missing, remove it otherwise."""
        if await self.is_in_wishlist(user_id, product_id):
            return await self.remove_item(user_id, product_id)
        return await self.add_item(user_id, product_id)
