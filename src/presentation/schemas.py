"""
API request/response schemas (DTOs).

These Pydantic models define the API contract for requests and responses.
They are kept separate from the domain entities.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class RegistrationRequest(BaseModel):
    """Request schema for account registration."""

    first_name: str = Field(
        ...,
        min_length=1,
        pattern=r"\S",
        description="Given name (cannot be blank)",
        examples=["Ada"],
    )
    last_name: str = Field(
        ...,
        min_length=1,
        pattern=r"\S",
        description="Family name (cannot be blank)",
        examples=["Lovelace"],
    )
    email: EmailStr = Field(..., description="Email address", examples=["ada@example.com"])
    password: str = Field(
        ...,
        min_length=6,
        max_length=72,
        description="Password (at least 6 characters)",
        examples=["secret1"],
    )


class AuthenticationRequest(BaseModel):
    """Request schema for email/password login."""

    email: EmailStr = Field(..., description="Email address", examples=["ada@example.com"])
    password: str = Field(
        ...,
        min_length=6,
        max_length=72,
        description="Password",
        examples=["secret1"],
    )


class AuthenticationResponse(BaseModel):
    """Response schema carrying the bearer token."""

    token: str = Field(..., description="Signed bearer token (JWT)")


class ResendActivationRequest(BaseModel):
    """Request schema for sending a fresh activation code."""

    email: EmailStr = Field(..., description="Email address of the registered account")


class AccountProfileResponse(BaseModel):
    """The authenticated principal."""

    id: UUID = Field(..., description="Account identifier")
    email: str = Field(..., description="Email address")
    full_name: str = Field(..., description="Display name")
    roles: list[str] = Field(..., description="Granted authorities")
    created_at: datetime = Field(..., description="When the account was created")


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    hint: str | None = Field(None, description="What the caller can do next")


class HealthCheckResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(..., description="Service status", examples=["healthy"])
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    timestamp: datetime = Field(..., description="Current server time")
