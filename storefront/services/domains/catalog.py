"""Catalog Domain Service.

Product browsing: featured lists, category pages, parent-category landing
pages and free-text search.
"""

import re

from storefront.logging import get_logger, sanitize_string_for_logging
from storefront.services.models import Category, Product
from storefront.services.repositories import ProductRepository

logger = get_logger(__name__)

# Characters that would break a PostgREST or() filter expression
_FILTER_CHARS = re.compile(r"[,()%*\\]")


def clean_search_term(term: str | None) -> str:
    """Strip filter syntax from a shopper's search input."""
    return _FILTER_CHARS.sub(" ", term or "").strip()


class CatalogService:
    """Catalog domain service."""

    def __init__(self, repo: ProductRepository) -> None:
        self.repo = repo

    async def get_products(
        self,
        featured: bool = False,
        category_slug: str | None = None,
        parent_category: str | None = None,
        search: str | None = None,
        limit: int | None = None,
    ) -> list[Product]:
        """Active products, newest first.

        An unknown `category_slug` or a `parent_category` without children
        leaves that filter off rather than returning nothing.

        Args:
            featured: Only featured products
            category_slug: Category page slug
            parent_category: Parent category name (e.g. "PC Accessories")
            search: Matched against name, description and brand
            limit: Maximum number of products

        Returns:
            List of Product (empty on failure)

        """
        try:
            category_id = None
            if category_slug:
                category_id = await self.repo.get_category_id_by_slug(category_slug)

            category_ids = None
            if parent_category:
                category_ids = await self.repo.get_category_ids_by_parent(parent_category)

            term = clean_search_term(search)
            if search and not term:
                logger.info("Ignoring search term %s", sanitize_string_for_logging(search))

            return await self.repo.list_active(
                featured=featured,
                category_id=category_id,
                category_ids=category_ids or None,
                search=term or None,
                limit=limit,
            )
        except Exception as e:
            logger.error("Failed to load products: %s", type(e).__name__, exc_info=True)
            return []

    async def get_product(self, product_id: str) -> Product | None:
        if not product_id:
            return None
        try:
            return await self.repo.get_by_id(product_id)
        except Exception as e:
            logger.error("Failed to load product: %s", type(e).__name__, exc_info=True)
            return None

    async def get_categories(self, parent_category: str | None = None) -> list[Category]:
        try:
            return await self.repo.get_categories(parent_category)
        except Exception as e:
            logger.error("Failed to load categories: %s", type(e).__name__, exc_info=True)
            return []
