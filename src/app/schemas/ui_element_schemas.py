from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UIElementCreate(BaseModel):
    element_key: str = Field(..., min_length=1, max_length=100, json_schema_extra={"example": "btn-export-excel"})
    element_name: str = Field(..., min_length=1, max_length=128, json_schema_extra={"example": "Export to Excel"})
    element_type: str = Field("button", min_length=1, max_length=32)
    description: str | None = None


class UIElementUpdate(BaseModel):
    element_key: str | None = Field(None, min_length=1, max_length=100)
    element_name: str | None = Field(None, min_length=1, max_length=128)
    element_type: str | None = Field(None, min_length=1, max_length=32)
    description: str | None = None


class UIElementSchema(BaseModel):
    id: int
    element_key: str
    element_name: str
    element_type: str
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ElementWithPermissionSchema(UIElementSchema):
    is_granted: bool = Field(..., description="True when the user holds a direct grant for this element")


class GrantSchema(BaseModel):
    """A direct user -> element grant with display labels for both sides."""

    element_id: int
    user_id: int
    element_key: str | None = None
    element_name: str | None = None
    user_name: str | None = None
    name: str | None = None
    email: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ReplaceGrantsRequest(BaseModel):
    """Full replacement of a user's grants. An empty list removes every grant."""

    element_ids: list[int] = Field(default_factory=list)
