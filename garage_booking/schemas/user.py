"""
Pydantic schemas for User and Authentication.
"""
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator


class UserCreate(BaseModel):
    """Schema for registering a user."""
    username: str
    password: str
    confirm_password: Optional[str] = None
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("username", "full_name", mode="before")
    @classmethod
    def _required(cls, value, info):
        value = str(value or "").strip()
        if not value:
            raise ValueError(f"{info.field_name} is required")
        return value

    @field_validator("password")
    @classmethod
    def _password_present(cls, value):
        if not value:
            raise ValueError("password is required")
        return value

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match!")
        return self


class LoginRequest(BaseModel):
    """Schema for login request."""
    username: str
    password: str

    @field_validator("username", "password", mode="before")
    @classmethod
    def _required(cls, value, info):
        value = str(value or "")
        if not value.strip():
            raise ValueError("Please enter username and password")
        return value.strip() if info.field_name == "username" else value
