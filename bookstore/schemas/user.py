"""
User and Token Pydantic Schemas

Request and response bodies of the auth service, reused by the gateway's
auth facade. Token fields travel as camelCase on the wire
(accessToken/refreshToken); Python code uses snake_case names.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class SignupRequest(BaseModel):
    """
    Schema for signing up.

    A client-supplied role is accepted but ignored: the endpoint decides
    the role.
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Unique login name",
        examples=["alice"],
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["alice@example.com"],
    )

    password: str = Field(
        ...,
        min_length=1,
        max_length=72,  # bcrypt only hashes the first 72 bytes
        description="Plain text password, stored only as a bcrypt hash",
    )

    role: str | None = Field(
        default=None,
        description="Ignored; the endpoint forces the role",
    )

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        """Strip surrounding whitespace and reject blank names."""
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace")
        return v.strip()


class UserCreate(SignupRequest):
    """Schema for POST /users on the auth service (role is honoured here)."""

    role: str = Field(
        default="user",
        pattern="^(user|admin)$",
        description="Role of the new user",
    )


class LoginRequest(BaseModel):
    """Credentials for POST /login."""

    name: str = Field(..., min_length=1, description="Login name")
    password: str = Field(..., min_length=1, description="Plain text password")


class RefreshTokenRequest(BaseModel):
    """Body of POST /refresh-token and POST /logout."""

    refresh_token: str = Field(
        ...,
        min_length=1,
        alias="refreshToken",
        description="Refresh token issued at login or signup",
    )

    model_config = ConfigDict(populate_by_name=True)


class OptionalRefreshTokenRequest(BaseModel):
    """Gateway logout body; the token may come from the cookie instead."""

    refresh_token: str | None = Field(
        default=None,
        alias="refreshToken",
        description="Refresh token; falls back to the refreshToken cookie",
    )

    model_config = ConfigDict(populate_by_name=True)


class TokenPair(BaseModel):
    """Access and refresh token returned by signup and login."""

    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")

    model_config = ConfigDict(populate_by_name=True)


class AccessTokenResponse(BaseModel):
    """New access token returned by POST /refresh-token."""

    access_token: str = Field(..., alias="accessToken")

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    """Plain informational message."""

    message: str


class UserResponse(BaseModel):
    """
    User as exposed by the API.

    SECURITY: the password hash is never part of a response.
    """

    id: int = Field(..., description="Unique user identifier")
    name: str = Field(..., description="Login name")
    email: str = Field(..., description="Email address")
    role: str = Field(..., description="Role name")
    created_at: datetime | None = Field(default=None, description="When the user signed up")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "alice",
                "email": "alice@example.com",
                "role": "user",
                "created_at": "2024-01-15T10:30:00Z",
            }
        },
    )
