"""Shipping Domain Service.

Resolves a shipping rate for a delivery city from the active zones.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from storefront.logging import get_logger
from storefront.services.models import ShippingZone
from storefront.services.money import compare, to_decimal
from storefront.services.repositories import ShippingRepository

logger = get_logger(__name__)

# Used when no zone matches and there is no "outside" catch-all zone
DEFAULT_SHIPPING_RATE = Decimal("120")


@dataclass
class ShippingQuote:
    """Resolved shipping for one order."""

    rate: Decimal
    zone: Optional[ShippingZone]
    is_free_shipping: bool


def _quote_for_zone(zone: ShippingZone, subtotal: Decimal) -> ShippingQuote:
    threshold = zone.free_shipping_threshold
    # A zero or missing threshold means the zone never ships free
    is_free = bool(threshold) and compare(subtotal, threshold) >= 0
    return ShippingQuote(
        rate=Decimal("0") if is_free else zone.shipping_rate,
        zone=zone,
        is_free_shipping=is_free,
    )


def get_shipping_rate_for_city(city: str, zones: list[ShippingZone], subtotal) -> ShippingQuote:
    """
    Pick the shipping rate for `city`.

    Zones are matched by region name, case-insensitively. Unknown cities fall
    back to the first zone whose name contains "outside", then to
    DEFAULT_SHIPPING_RATE.
    """
    normalized_city = (city or "").lower().strip()
    subtotal = to_decimal(subtotal)

    for zone in zones:
        if any(region.lower() == normalized_city for region in zone.regions):
            return _quote_for_zone(zone, subtotal)

    outside = next((z for z in zones if "outside" in z.name.lower()), None)
    if outside:
        return _quote_for_zone(outside, subtotal)

    return ShippingQuote(rate=DEFAULT_SHIPPING_RATE, zone=None, is_free_shipping=False)


class ShippingService:
    """Shipping domain service."""

    def __init__(self, repo: ShippingRepository) -> None:
        self.repo = repo

    async def get_zones(self) -> list[ShippingZone]:
        """Active zones; empty on failure so checkout falls back to the default rate."""
        try:
            return await self.repo.get_active_zones()
        except Exception as e:
            logger.error("Failed to load shipping zones: %s", type(e).__name__, exc_info=True)
            return []

    async def quote(self, city: str, subtotal) -> ShippingQuote:
        zones = await self.get_zones()
        return get_shipping_rate_for_city(city, zones, subtotal)

    async def quote_cart(self, cart, city: str) -> ShippingQuote:
        """Quote shipping for a CartStore's current total."""
        return await self.quote(city, cart.total_price())
