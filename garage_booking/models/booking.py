"""
Booking model for database.
"""
import enum

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from garage_booking.database import Base


class VehicleCategory(str, enum.Enum):
    """Vehicle category enumeration."""
    TWO_WHEELER = "2 Wheeler"
    THREE_WHEELER = "3 Wheeler"
    FOUR_WHEELER = "4 Wheeler"


class ServiceTier(str, enum.Enum):
    """Service package enumeration."""
    STANDARD = "Standard"
    PREMIUM = "Premium"


class BookingStatus(str, enum.Enum):
    """Booking status enumeration."""
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class Booking(Base):
    """Booking database model."""

    __tablename__ = "GarageServiceBookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("Users.id"), nullable=True)
    name = Column(String(100), nullable=False)
    email = Column(String(120), nullable=False)
    phone = Column(String(20), nullable=True)
    wheeler_type = Column(String(20), nullable=False)
    service_type = Column(String(20), nullable=False, default=ServiceTier.STANDARD.value)
    cost = Column(Float, nullable=False)
    appointment_date = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)
    booking_date = Column(DateTime, server_default=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "wheeler_type": self.wheeler_type,
            "service_type": self.service_type,
            "cost": self.cost,
            "appointment_date": self.appointment_date,
            "notes": self.notes,
            "status": self.status,
            "booking_date": self.booking_date.isoformat() if self.booking_date else None,
        }
