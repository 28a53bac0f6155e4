"""Product Repository - `products` and `categories` tables."""

from storefront.services.models import Category, Product

from .base import BaseRepository

PRODUCT_SELECT = "*,category:categories(id,name,slug,parent_category)"


class ProductRepository(BaseRepository):
    """Catalog reads."""

    async def list_active(
        self,
        featured: bool = False,
        category_id: str | None = None,
        category_ids: list[str] | None = None,
        search: str | None = None,
        limit: int | None = None,
    ) -> list[Product]:
        """Active products, newest first, narrowed by the given filters."""
        query = self.client.table("products").select(PRODUCT_SELECT).eq("is_active", True)

        if featured:
            query = query.eq("is_featured", True)
        if category_id:
            query = query.eq("category_id", category_id)
        if category_ids:
            query = query.in_("category_id", category_ids)
        if search:
            query = query.or_(
                f"name.ilike.%{search}%,description.ilike.%{search}%,brand.ilike.%{search}%"
            )
        if limit:
            query = query.limit(limit)

        result = await query.order("created_at", desc=True).execute()
        return [Product(**row) for row in result.data or []]

    async def get_by_id(self, product_id: str) -> Product | None:
        result = (
            await self.client.table("products")
            .select(PRODUCT_SELECT)
            .eq("id", product_id)
            .maybe_single()
            .execute()
        )
        # maybe_single() yields None or empty data when no row matches
        return Product(**result.data) if result and result.data else None

    async def get_category_id_by_slug(self, slug: str) -> str | None:
        result = (
            await self.client.table("categories")
            .select("id")
            .eq("slug", slug)
            .maybe_single()
            .execute()
        )
        return result.data["id"] if result and result.data else None

    async def get_category_ids_by_parent(self, parent_category: str) -> list[str]:
        result = (
            await self.client.table("categories")
            .select("id")
            .eq("parent_category", parent_category)
            .execute()
        )
        return [row["id"] for row in result.data or []]

    async def get_categories(self, parent_category: str | None = None) -> list[Category]:
        """Categories by name, optionally only the children of `parent_category`."""
        query = self.client.table("categories").select("*")
        if parent_category:
            query = query.eq("parent_category", parent_category)
        result = await query.order("name").execute()
        return [Category(**row) for row in result.data or []]
