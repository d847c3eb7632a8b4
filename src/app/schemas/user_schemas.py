from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    """User creation schema with masked password."""

    user_name: str = Field(..., min_length=1, max_length=150, json_schema_extra={"example": "new_user"})
    password: str = Field(
        ...,
        min_length=1,
        description="User password",
        json_schema_extra={"format": "password", "example": "secure_password123"},
    )
    name: str | None = Field(None, max_length=128)
    email: str | None = Field(None, max_length=255)


class UserUpdate(BaseModel):
    name: str | None = Field(None, max_length=128)
    email: str | None = Field(None, max_length=255)


class ChangePasswordRequest(BaseModel):
    """Password change request schema with masked new password."""

    new_password: str = Field(
        ...,
        min_length=1,
        description="New password",
        json_schema_extra={"format": "password", "example": "new_secure_password123"},
    )


class UserSchema(BaseModel):
    id: int
    user_name: str
    name: str | None = None
    email: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
