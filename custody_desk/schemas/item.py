from pydantic import BaseModel, Field, field_validator
from datetime import datetime


def _name_not_blank(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Item name is required")
    return value


class ItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    total_quantity: int = Field(..., gt=0, description="Units held by the desk")
    asset_tag: str | None = Field(None, max_length=255)
    description: str | None = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _name_not_blank(value)


class ItemUpdate(BaseModel):
    # Whole-field replacement: omitted optional fields are cleared
    name: str = Field(..., min_length=1, max_length=255)
    asset_tag: str | None = Field(None, max_length=255)
    description: str | None = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _name_not_blank(value)


class ItemResponse(BaseModel):
    id: int
    name: str
    asset_tag: str | None
    description: str | None
    created_at: datetime | None

    class Config:
        from_attributes = True
