from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RoleCreate(BaseModel):
    """Request model for creating a role."""

    role_name: str = Field(..., min_length=1, max_length=64, json_schema_extra={"example": "Editors"})
    role_comment: str = Field(default="", max_length=256)


class RoleUpdate(BaseModel):
    """Request model for updating a role."""

    role_name: str | None = Field(None, min_length=1, max_length=64)
    role_comment: str | None = Field(None, max_length=256)


class RoleSchema(BaseModel):
    id: int
    role_name: str
    role_comment: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class MenuRoleSchema(BaseModel):
    """Menu/role link with display labels."""

    menu_id: int
    role_id: int
    menu_title: str | None = None
    menu_key: str | None = None
    role_name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserRoleSchema(BaseModel):
    """User/role membership with display labels."""

    user_id: int
    role_id: int
    user_name: str | None = None
    role_name: str | None = None

    model_config = ConfigDict(from_attributes=True)
