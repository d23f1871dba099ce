"""
Customer feedback model for database.
"""
from sqlalchemy import Column, DateTime, Integer, Text
from sqlalchemy.sql import func

from garage_booking.database import Base


class Feedback(Base):
    """Free-text feedback left from the quick booking screen."""

    __tablename__ = "CustomerFeedback"

    id = Column(Integer, primary_key=True, index=True)
    feedback_text = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
