"""
User model for database.
"""
from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from garage_booking.database import Base


class User(Base):
    """User database model."""

    __tablename__ = "Users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    # Holds a bcrypt hash, never the plaintext password.
    password_hash = Column("password", String(255), nullable=False)
    full_name = Column(String(100), nullable=False)
    email = Column(String(120), nullable=True)
    phone = Column(String(20), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "full_name": self.full_name,
            "email": self.email,
            "phone": self.phone,
        }
