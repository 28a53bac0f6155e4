"""
Domain Services

- CatalogService: product browsing and search
- ReviewService: product reviews
- WishlistService: saved products
- ComparisonService: side-by-side product comparison
- RecentlyViewedService: product view history
- ShippingService: shipping zone rates
"""
from .catalog import CatalogService
from .comparison import MAX_COMPARISON_PRODUCTS, ComparisonService
from .recently_viewed import RECENTLY_VIEWED_LIMIT, RecentlyViewedService
from .reviews import RatingSummary, ReviewService, summarize_ratings
from .shipping import ShippingQuote, ShippingService, get_shipping_rate_for_city
from .wishlist import WishlistService

__all__ = [
    "MAX_COMPARISON_PRODUCTS",
    "RECENTLY_VIEWED_LIMIT",
    "CatalogService",
    "ComparisonService",
    "RatingSummary",
    "RecentlyViewedService",
    "ReviewService",
    "ShippingQuote",
    "ShippingService",
    "WishlistService",
    "get_shipping_rate_for_city",
    "summarize_ratings",
]
