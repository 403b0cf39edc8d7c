# storefront/schemas/banner.py
import re
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class BannerUpdate(SQLModel):
    """
    Admin payload for the announcement banner.
    Empty button fields clear the call-to-action.
    """

    model_config = ConfigDict(extra="forbid")

    text: str = Field(min_length=1, max_length=300)
    button_text: str | None = Field(default=None, max_length=50)
    button_link: str | None = Field(default=None, max_length=300)
    is_active: bool = True
    bg_color: str = "#FF6B35"
    text_color: str = "#FFFFFF"

    @field_validator("button_text", "button_link")
    @classmethod
    def empty_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None

    @field_validator("bg_color", "text_color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        if not _HEX_COLOR.match(v):
            raise ValueError("color must be a hex value like #RRGGBB")
        return v.upper()


class BannerRead(SQLModel):
    id: uuid.UUID
    text: str
    button_text: str | None
    button_link: str | None
    is_active: bool
    bg_color: str
    text_color: str
    updated_at: datetime
