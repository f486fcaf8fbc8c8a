"""Auth schemas for request/response validation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    display_name: str | None = Field(None, max_length=100)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class UserRead(BaseModel):
    id: int
    email: str
    display_name: str | None

    model_config = ConfigDict(from_attributes=True)


class SessionResponse(BaseModel):
    """Returned on register/login; the token is also set as a cookie."""

    user: UserRead
    session_token: str
