"""
SQLAlchemy database models.
"""
from garage_booking.models.booking import Booking, BookingStatus, ServiceTier, VehicleCategory
from garage_booking.models.feedback import Feedback
from garage_booking.models.setting import Setting
from garage_booking.models.user import User

__all__ = [
    "Booking", "BookingStatus", "ServiceTier", "VehicleCategory",
    "Feedback", "Setting", "User",
]
