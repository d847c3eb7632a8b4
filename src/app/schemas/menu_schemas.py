from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MenuCreate(BaseModel):
    """Request to create a menu node."""

    parent_id: int | None = Field(None, description="Parent menu id; null for a root menu")
    menu_order: int = Field(0, description="Sibling ordering key")
    menu_key: str = Field(..., min_length=1, max_length=100, json_schema_extra={"example": "admin-users"})
    title: str = Field(..., min_length=1, max_length=128, json_schema_extra={"example": "User Management"})
    url: str | None = Field(None, max_length=256, json_schema_extra={"example": "/admin/users"})
    levels: int | None = Field(None, ge=0, description="Cached depth hint (display only)")
    use_new_icon: bool | None = Field(None, description="Defaults to false when omitted")


class MenuUpdate(MenuCreate):
    """Full replacement of a menu node's editable fields."""


class MenuSchema(BaseModel):
    id: int
    parent_id: int | None
    menu_order: int
    menu_key: str
    title: str
    url: str | None
    levels: int | None
    use_new_icon: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class MenuTreeNodeSchema(MenuSchema):
    children: list[MenuTreeNodeSchema] = Field(default_factory=list)


class HierarchicalMenuSchema(MenuSchema):
    path: str = Field(..., description="Ancestor menu_order values joined by '.', root first")
    depth: int = Field(..., description="Computed depth (1 for roots)")


class MenuCreatedResponse(BaseModel):
    id: int


MenuTreeNodeSchema.model_rebuild()
