"""
Pydantic schemas for Booking.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from garage_booking.models.booking import BookingStatus, ServiceTier, VehicleCategory


class BookingCreate(BaseModel):
    """Schema for creating a booking."""
    model_config = ConfigDict(validate_default=True)

    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    wheeler_type: str = VehicleCategory.TWO_WHEELER.value
    service_type: ServiceTier = ServiceTier.STANDARD
    appointment_date: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name", "email", mode="before")
    @classmethod
    def _required(cls, value):
        value = str(value or "").strip()
        if not value:
            raise ValueError("Name and Email are required!")
        return value

    @field_validator("phone", "appointment_date", "notes", "wheeler_type", mode="before")
    @classmethod
    def _optional(cls, value):
        if value is None:
            return None
        return str(value).strip()

    @property
    def premium(self) -> bool:
        return self.service_type == ServiceTier.PREMIUM


class StatusUpdate(BaseModel):
    """Schema for changing a booking's status."""
    status: BookingStatus


class BookingStats(BaseModel):
    """Aggregate booking figures shown on the dashboard."""
    total: int = 0
    pending: int = 0
    completed: int = 0
    revenue: float = 0.0
