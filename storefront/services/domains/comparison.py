"""Product Comparison Domain Service.

A signed-in user can line up to MAX_COMPARISON_PRODUCTS products side by side.
"""

from typing import Any

from storefront.errors import (
    ERROR_ALREADY_IN_COMPARISON,
    ERROR_COMPARISON_FAILED,
    ERROR_COMPARISON_LIMIT,
    ERROR_LOGIN_REQUIRED_COMPARISON,
)
from storefront.logging import get_logger
from storefront.services.models import ComparisonItem, embed_product

logger = get_logger(__name__)

MAX_COMPARISON_PRODUCTS = 4

COMPARISON_SELECT = (
    "id,product_id,created_at,"
    "products:product_id(id,name,price,original_price,image_url,brand,description,specifications,stock)"
)


class ComparisonService:
    """Product comparison domain service."""

    def __init__(self, client) -> None:
        self.client = client

    async def get_items(self, user_id: str | None) -> list[ComparisonItem]:
        """Products being compared, newest first."""
        if not user_id:
            return []
        try:
            result = (
                await self.client.table("product_comparisons")
                .select(COMPARISON_SELECT)
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .limit(MAX_COMPARISON_PRODUCTS)
                .execute()
            )
            return [ComparisonItem(**embed_product(row)) for row in result.data or []]
        except Exception as e:
            logger.error("Failed to get comparison: %s", type(e).__name__, exc_info=True)
            return []

    async def add_item(self, user_id: str | None, product_id: str) -> dict[str, Any]:
        """Add a product unless it is already compared or the list is full."""
        if not user_id:
            return {"success": False, "reason": ERROR_LOGIN_REQUIRED_COMPARISON}

        try:
            existing = (
                await self.client.table("product_comparisons")
                .select("id")
                .eq("user_id", user_id)
                .eq("product_id", product_id)
                .execute()
            )
            if existing.data:
                return {"success": False, "reason": ERROR_ALREADY_IN_COMPARISON}

            counted = (
                await self.client.table("product_comparisons")
                .select("id", count="exact")
                .eq("user_id", user_id)
                .execute()
            )
            if (counted.count or 0) >= MAX_COMPARISON_PRODUCTS:
                return {"success": False, "reason": ERROR_COMPARISON_LIMIT}

            await (
                self.client.table("product_comparisons")
                .insert({"user_id": user_id, "product_id": product_id})
                .execute()
            )
            return {"success": True, "message": "Added to comparison"}
        except Exception as e:
            logger.error("Failed to add to comparison: %s", type(e).__name__, exc_info=True)
            return {"success": False, "reason": ERROR_COMPARISON_FAILED}

    async def remove_item(self, user_id: str | None, product_id: str) -> dict[str, Any]:
        if not user_id:
            return {"success": True, "message": "Removed from comparison"}
        try:
            await (
                self.client.table("product_comparisons")
                .delete()
                .eq("user_id", user_id)
                .eq("product_id", product_id)
                .execute()
            )
            return {"success": True, "message": "Removed from comparison"}
        except Exception as e:
            logger.error("Failed to remove from comparison: %s", type(e).__name__, exc_info=True)
            return {"success": False, "reason": ERROR_COMPARISON_FAILED}

    async def clear(self, user_id: str | None) -> dict[str, Any]:
        if not user_id:
            return {"success": True}
        try:
            await self.client.table("product_comparisons").delete().eq("user_id", user_id).execute()
            return {"success": True}
        except Exception as e:
            logger.error("Failed to clear comparison: %s", type(e).__name__, exc_info=True)
            return {"success": False, "reason": ERROR_COMPARISON_FAILED}

    async def is_in_comparison(self, user_id: str | None, product_id: str) -> bool:
        items = await self.get_items(user_id)
        return any(item.product_id == product_id for item in items)
