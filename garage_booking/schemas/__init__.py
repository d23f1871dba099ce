"""
Pydantic schemas for request/form validation.
"""
from garage_booking.schemas.booking import BookingCreate, BookingStats, StatusUpdate
from garage_booking.schemas.settings import SettingsUpdate
from garage_booking.schemas.user import LoginRequest, UserCreate

__all__ = [
    "BookingCreate", "BookingStats", "StatusUpdate",
    "SettingsUpdate",
    "LoginRequest", "UserCreate",
]
