"""
Service pricing and business information.
"""
import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, Mapping

from garage_booking.models.booking import VehicleCategory

logger = logging.getLogger(__name__)

PRICE_KEYS = {
    VehicleCategory.TWO_WHEELER: "two_wheeler_cost",
    VehicleCategory.THREE_WHEELER: "three_wheeler_cost",
    VehicleCategory.FOUR_WHEELER: "four_wheeler_cost",
}
DISCOUNT_KEY = "premium_discount"
BUSINESS_KEYS = ("business_name", "business_email", "business_phone")


@dataclass
class PriceTable:
    """Base cost per vehicle category plus the premium discount percentage."""

    two_wheeler_cost: float = 500.0
    three_wheeler_cost: float = 750.0
    four_wheeler_cost: float = 1000.0
    premium_discount: float = 10.0

    def base_cost(self, vehicle_category) -> float:
        try:
            category = VehicleCategory(vehicle_category)
        except ValueError:
            return 0.0
        return getattr(self, PRICE_KEYS[category])

    def cost(self, vehicle_category, premium: bool) -> float:
        base = self.base_cost(vehicle_category)
        if premium:
            return base * (1 - self.premium_discount / 100)
        return base


@dataclass
class BusinessInfo:
    business_name: str = "Garage Services"
    business_email: str = "support@garageservices.com"
    business_phone: str = "+91 9876543210"


@dataclass
class PricingConfig:
    """
    Process-wide pricing and business details.

    Loaded once from the Settings table and changed only via :meth:`update`,
    so already stored bookings keep the cost they were created with.
    """

    prices: PriceTable = field(default_factory=PriceTable)
    business: BusinessInfo = field(default_factory=BusinessInfo)

    def cost(self, vehicle_category, premium: bool) -> float:
        return self.prices.cost(vehicle_category, premium)

    def update(self, prices: PriceTable = None, business: BusinessInfo = None):
        if prices is not None:
            self.prices = prices
        if business is not None:
            self.business = business
        logger.info("Pricing updated: %s", self.prices)

    def load(self, stored: Mapping[str, str]):
        """Apply stored setting values, skipping unknown keys and bad numbers."""
        prices = asdict(self.prices)
        for key in list(prices):
            if key not in stored:
                continue
            try:
                prices[key] = float(stored[key])
            except (TypeError, ValueError):
                logger.warning("Ignoring non-numeric setting %s=%r", key, stored[key])

        business = asdict(self.business)
        for key in BUSINESS_KEYS:
            if stored.get(key):
                business[key] = stored[key]

        self.update(PriceTable(**prices), BusinessInfo(**business))

    def as_settings(self) -> Dict[str, str]:
        """Render the current values as Settings rows."""
        values = {key: str(value) for key, value in asdict(self.prices).items()}
        values.update(asdict(self.business))
        return values
