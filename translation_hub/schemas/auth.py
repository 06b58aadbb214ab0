"""Request/response schemas for registration, login and session validation."""

import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator

from translation_hub.core.security import EMAIL_MAX_LEN, PASSWORD_MAX_LEN


class Credentials(BaseModel):
    """Email and password pair; both required and non-blank."""

    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN, description="Account email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        # Stored as given; lookups are exact matches.
        if not v.strip():
            raise ValueError("Email is required.")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Password is required.")
        return v


class RegisterRequest(Credentials):
    """Payload for creating an account."""


class LoginRequest(Credentials):
    """Credentials for login."""


class AuthenticatedUser(BaseModel):
    """User projection returned by login and validate (no password hash)."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: uuid.UUID
    email: str
    default_from_lang: str | None = None
    default_to_lang: str | None = None


class LoginResult(BaseModel):
    """Signed session token plus the user it identifies."""

    token: str = Field(..., description="Signed session token")
    token_type: str = Field(default="bearer", description="Token type")
    user: AuthenticatedUser
