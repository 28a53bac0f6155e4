"""Shipping Repository - `shipping_zones` table."""

from storefront.services.models import ShippingZone

from .base import BaseRepository


class ShippingRepository(BaseRepository):
    """Shipping zone reads."""

    async def get_active_zones(self) -> list[ShippingZone]:
        """Get active zones, cheapest first."""
        result = (
            await self.client.table("shipping_zones")
            .select("*")
            .eq("is_active", True)
            .order("shipping_rate")
            .execute()
        )
        return [ShippingZone(**row) for row in result.data or []]
