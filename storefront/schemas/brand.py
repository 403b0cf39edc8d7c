# storefront/schemas/brand.py
import uuid

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class BrandCreate(SQLModel):
    """
    Admin payload for a brand or sub-brand lookup entry.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class BrandRead(SQLModel):
    id: uuid.UUID
    name: str


class SubBrandRead(SQLModel):
    id: uuid.UUID
    brand_id: uuid.UUID
    name: str
