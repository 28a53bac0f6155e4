"""Product Reviews Domain Service.

Signed-in shoppers submit reviews; only approved reviews are listed.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from storefront.errors import (
    ERROR_INVALID_RATING,
    ERROR_LOGIN_REQUIRED_REVIEW,
    ERROR_REVIEW_FAILED,
)
from storefront.logging import get_logger
from storefront.services.models import ProductReview

logger = get_logger(__name__)


@dataclass
class RatingSummary:
    """Average rating over approved reviews."""

    average: Decimal
    count: int

    @property
    def stars(self) -> int:
        """Average rounded to whole stars."""
        return int(self.average.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def summarize_ratings(reviews: list[ProductReview]) -> RatingSummary:
    if not reviews:
        return RatingSummary(average=Decimal("0.0"), count=0)
    total = sum(review.rating for review in reviews)
    average = (Decimal(total) / len(reviews)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return RatingSummary(average=average, count=len(reviews))


class ReviewService:
    """Product reviews domain service."""

    def __init__(self, client) -> None:
        self.client = client

    async def get_reviews(self, product_id: str) -> list[ProductReview]:
        """Approved reviews for a product, newest first."""
        try:
            result = (
                await self.client.table("product_reviews")
                .select("*")
                .eq("product_id", product_id)
                .eq("is_approved", True)
                .order("created_at", desc=True)
                .execute()
            )
            return [ProductReview(**row) for row in result.data or []]
        except Exception as e:
            logger.error("Failed to get reviews: %s", type(e).__name__, exc_info=True)
            return []

    async def submit_review(
        self,
        user_id: str | None,
        product_id: str,
        rating: int,
        title: str | None = None,
        comment: str | None = None,
    ) -> dict[str, Any]:
        """Submit a review; it stays hidden until a moderator approves it."""
        if not user_id:
            return {"success": False, "reason": ERROR_LOGIN_REQUIRED_REVIEW}
        if not isinstance(rating, int) or isinstance(rating, bool) or not 1 <= rating <= 5:
            return {"success": False, "reason": ERROR_INVALID_RATING}

        try:
            await (
                self.client.table("product_reviews")
                .insert({
                    "product_id": product_id,
                    "user_id": user_id,
                    "rating": rating,
                    "title": title or None,
                    "comment": comment or None,
                })
                .execute()
            )
            return {
                "success": True,
                "message": "Review submitted! It will appear after approval.",
            }
        except Exception as e:
            logger.error("Failed to submit review: %s", type(e).__name__, exc_info=True)
            return {"success": False, "reason": ERROR_REVIEW_FAILED}
