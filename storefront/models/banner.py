# storefront/models/banner.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class AnnouncementBanner(SQLModel, table=True):
    """
    Site-wide strip shown above the header (e.g. "Free shipping over ₹500").
    """

    __tablename__ = "announcement_banner"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )

    text: str = Field(max_length=300)
    button_text: str | None = Field(default=None, max_length=50)
    button_link: str | None = Field(default=None, max_length=300)

    is_active: bool = Field(default=True)

    bg_color: str = Field(default="#FF6B35", max_length=7)
    text_color: str = Field(default="#FFFFFF", max_length=7)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
