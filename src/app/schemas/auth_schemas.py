from pydantic import BaseModel, Field


class TokenRefreshRequest(BaseModel):
    """Refresh token request schema."""

    refresh_token: str = Field(
        ...,
        description="JWT refresh token",
        json_schema_extra={"example": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."},
    )


class UserResponse(BaseModel):
    """User profile response schema."""

    id: int = Field(..., description="User id")
    user_name: str = Field(..., description="Username")
    name: str | None = Field(None, description="Display name")
    email: str | None = Field(None, description="User email address")
    is_admin: bool = Field(..., description="Member of the administrators role")
    roles: list[str] = Field(default_factory=list, description="Assigned role names")


class TokenResponse(BaseModel):
    """JWT token response schema."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field("bearer", description="Token type")
    user: UserResponse | None = Field(None, description="User information (optional)")
