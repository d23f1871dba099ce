"""
Pydantic schema for the settings screen.
"""
from pydantic import BaseModel, ConfigDict

from garage_booking.pricing import BusinessInfo, PriceTable


class SettingsUpdate(BaseModel):
    """Prices must parse as finite numbers; business details are taken as-is."""
    model_config = ConfigDict(str_strip_whitespace=True, allow_inf_nan=False)

    two_wheeler_cost: float
    three_wheeler_cost: float
    four_wheeler_cost: float
    premium_discount: float
    business_name: str = ""
    business_email: str = ""
    business_phone: str = ""

    def price_table(self) -> PriceTable:
        return PriceTable(
            two_wheeler_cost=self.two_wheeler_cost,
            three_wheeler_cost=self.three_wheeler_cost,
            four_wheeler_cost=self.four_wheeler_cost,
            premium_discount=self.premium_discount,
        )

    def business_info(self) -> BusinessInfo:
        return BusinessInfo(
            business_name=self.business_name,
            business_email=self.business_email,
            business_phone=self.business_phone,
        )
