"""
Tests for catalog browsing and product reviews
"""

from decimal import Decimal

import pytest

from storefront.services.domains import CatalogService, ReviewService, summarize_ratings
from storefront.services.domains.catalog import clean_search_term
from storefront.services.models import ProductReview
from storefront.services.repositories import ProductRepository


@pytest.fixture
def catalog(fake_supabase, catalog_tables):
    fake_supabase.tables.update(catalog_tables)
    return CatalogService(ProductRepository(fake_supabase))


@pytest.fixture
def reviews(fake_supabase):
    return ReviewService(fake_supabase)


def _ids(products):
    return [p.id for p in products]


class TestCatalog:
    @pytest.mark.asyncio
    async def test_active_products_newest_first(self, catalog):
        products = await catalog.get_products()

        assert _ids(products) == ["prod-kb", "prod-mouse", "prod-phone"]
        assert products[1].price == Decimal("24.50")
        assert products[1].in_stock is False

    @pytest.mark.asyncio
    async def test_featured_with_limit(self, catalog):
        products = await catalog.get_products(featured=True, limit=1)

        assert _ids(products) == ["prod-kb"]

    @pytest.mark.asyncio
    async def test_category_slug(self, catalog):
        products = await catalog.get_products(category_slug="mice")

        assert _ids(products) == ["prod-mouse"]

    @pytest.mark.asyncio
    async def test_unknown_category_slug_is_not_a_filter(self, catalog):
        products = await catalog.get_products(category_slug="does-not-exist")

        assert len(products) == 3

    @pytest.mark.asyncio
    async def test_parent_category_covers_children(self, catalog):
        products = await catalog.get_products(parent_category="PC Accessories")

        assert _ids(products) == ["prod-kb", "prod-mouse"]

    @pytest.mark.asyncio
    async def test_parent_without_children_is_not_a_filter(self, catalog):
        products = await catalog.get_products(parent_category="Kitchen")

        assert len(products) == 3

    @pytest.mark.asyncio
    async def test_search_matches_name_description_brand(self, catalog):
        by_text = await catalog.get_products(search="KEYBOARD")
        by_brand = await catalog.get_products(search="logi")

        assert _ids(by_text) == ["prod-kb", "prod-phone"]
        assert _ids(by_brand) == ["prod-mouse"]

    @pytest.mark.asyncio
    async def test_search_made_only_of_filter_syntax_is_ignored(self, catalog):
        products = await catalog.get_products(search="(),")

        assert len(products) == 3

    @pytest.mark.asyncio
    async def test_read_failure_returns_empty(self, catalog, fake_supabase):
        fake_supabase.fail_on.add("select")

        assert await catalog.get_products() == []
        assert await catalog.get_categories() == []
        assert await catalog.get_product("prod-kb") is None

    @pytest.mark.asyncio
    async def test_get_product(self, catalog):
        product = await catalog.get_product("prod-phone")

        assert product.name == "Budget Phone"
        assert product.price == Decimal("199")
        assert await catalog.get_product("missing") is None
        assert await catalog.get_product("") is None

    @pytest.mark.asyncio
    async def test_categories_by_name(self, catalog):
        all_categories = await catalog.get_categories()
        accessories = await catalog.get_categories("PC Accessories")

        assert [c.name for c in all_categories] == ["Keyboards", "Mice", "Phones"]
        assert [c.slug for c in accessories] == ["keyboards", "mice"]

    def test_clean_search_term(self):
        assert clean_search_term("usb-c, hub (new)") == "usb-c  hub  new"
        assert clean_search_term(None) == ""


class TestReviews:
    @pytest.mark.asyncio
    async def test_only_approved_newest_first(self, reviews, fake_supabase):
        fake_supabase.tables["product_reviews"] = [
            {"id": "r1", "product_id": "prod-kb", "user_id": "u1", "rating": 4,
             "is_approved": True, "created_at": "2025-01-01T00:00:00Z"},
            {"id": "r2", "product_id": "prod-kb", "user_id": "u2", "rating": 1,
             "is_approved": False, "created_at": "2025-01-02T00:00:00Z"},
            {"id": "r3", "product_id": "prod-kb", "user_id": "u3", "rating": 5,
             "is_approved": True, "created_at": "2025-01-03T00:00:00Z"},
            {"id": "r4", "product_id": "prod-mouse", "user_id": "u1", "rating": 3,
             "is_approved": True, "created_at": "2025-01-04T00:00:00Z"},
        ]

        found = await reviews.get_reviews("prod-kb")

        assert [r.id for r in found] == ["r3", "r1"]

    @pytest.mark.asyncio
    async def test_submit_requires_login(self, reviews, fake_supabase):
        result = await reviews.submit_review(None, "prod-kb", 5)

        assert result == {"success": False, "reason": "Please login to submit a review"}
        assert fake_supabase.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6, 4.5, True])
    async def test_submit_rejects_bad_rating(self, reviews, rating):
        result = await reviews.submit_review("u1", "prod-kb", rating)

        assert result["success"] is False

    @pytest.mark.asyncio
    async def test_submit_stores_blank_text_as_null(self, reviews, fake_supabase):
        result = await reviews.submit_review("u1", "prod-kb", 4, title="", comment="Solid")

        assert result["success"] is True
        row = fake_supabase.tables["product_reviews"][0]
        assert row["title"] is None
        assert row["comment"] == "Solid"
        assert row["rating"] == 4

    @pytest.mark.asyncio
    async def test_submit_failure(self, reviews, fake_supabase):
        fake_supabase.fail_on.add("insert")

        result = await reviews.submit_review("u1", "prod-kb", 4)

        assert result == {"success": False, "reason": "Failed to submit review"}

    def test_rating_summary(self):
        found = [
            ProductReview(id=f"r{i}", product_id="p", user_id="u", rating=rating)
            for i, rating in enumerate([5, 4, 4])
        ]

        summary = summarize_ratings(found)

        assert summary.average == Decimal("4.3")
        assert summary.count == 3
        assert summary.stars == 4
        assert summarize_ratings([]).average == 0
