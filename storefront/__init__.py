"""Storefront client: cart, wishlist, comparison and shipping over Supabase."""

__version__ = "0.1.0"
