"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from pydantic import BaseModel, Field, field_validator

from src.domain.ports import SubscriptionTier

# ASCII word tokens joined by optional dots/hyphens, ending in a 2-3 character suffix.
EMAIL_PATTERN = (
    r"^[A-Za-z0-9_]+([.-]?[A-Za-z0-9_]+)*"
    r"@[A-Za-z0-9_]+([.-]?[A-Za-z0-9_]+)*(\.[A-Za-z0-9_]{2,3})+$"
)
PASSWORD_MIN_LENGTH = 6
# bcrypt rejects inputs longer than 72 bytes
PASSWORD_MAX_BYTES = 72


class CredentialsRequest(BaseModel):
    """Email and password pair shared by registration and login."""

    email: str = Field(..., pattern=EMAIL_PATTERN, description="Account email address")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LENGTH,
        description=(
            f"Account password (min {PASSWORD_MIN_LENGTH} characters, "
            f"max {PASSWORD_MAX_BYTES} bytes UTF-8 encoded)"
        ),
    )

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        """Reject passwords bcrypt cannot hash."""
        if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"password should have a maximum length of {PASSWORD_MAX_BYTES} bytes")
        return value


class RegisterRequest(CredentialsRequest):
    """Request model for user registration."""


class LoginRequest(CredentialsRequest):
    """Request model for login."""


class ResendVerificationRequest(BaseModel):
    """Request model for re-sending the verification email."""

    email: str = Field(..., pattern=EMAIL_PATTERN, description="Registered email address")


class SubscriptionUpdateRequest(BaseModel):
    """Request model for changing the subscription tier."""

    subscription: SubscriptionTier


class UserResponse(BaseModel):
    """Public view of an account."""

    email: str
    subscription: SubscriptionTier


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    user: UserResponse


class LoginResponse(BaseModel):
    """Response model for successful login."""

    token: str
    user: UserResponse


class SubscriptionView(BaseModel):
    """Subscription-only view of an account."""

    subscription: SubscriptionTier


class SubscriptionUpdateResponse(BaseModel):
    """Response model for a subscription change."""

    user: SubscriptionView


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    message: str
