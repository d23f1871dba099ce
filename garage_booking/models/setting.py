"""
Business setting model for database.
"""
from sqlalchemy import Column, String

from garage_booking.database import Base


class Setting(Base):
    """Key/value business setting."""

    __tablename__ = "Settings"

    setting_key = Column(String(50), primary_key=True)
    setting_value = Column(String(255), nullable=True)
