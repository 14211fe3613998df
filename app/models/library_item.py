"""
Library item and highlight models.

Library items are the articles, pages and documents a user saved. The export
worker only reads them; the API owns their lifecycle.
"""
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Column, DateTime, ForeignKey, Text, Enum as SAEnum
from sqlmodel import Field, Relationship, Index

from app.core.time_utils import utc_now
from app.models.base import BaseModel
from app.models.enums import HighlightType


class LibraryItem(BaseModel, table=True):
    """
    A saved article, page or document owned by a user.
    """
    __tablename__ = "library_item"

    user_id: uuid.UUID = Field(
        sa_column=Column(
            ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
            index=True
        )
    )
    title: str = Field(max_length=500)
    slug: str = Field(max_length=500)
    original_url: str = Field(sa_column=Column(Text, nullable=False))
    author: Optional[str] = Field(default=None, max_length=255)
    site_name: Optional[str] = Field(default=None, max_length=255)
    thumbnail: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    saved_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

    # Relations
    highlights: List["Highlight"] = Relationship(
        back_populates="library_item",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )

    __table_args__ = (
        Index("idx_library_item_user_saved_at", "user_id", "saved_at"),
    )


class Highlight(BaseModel, table=True):
    """
    A highlight, note or redaction a user made on a library item.
    """
    __tablename__ = "highlight"

    user_id: uuid.UUID = Field(
        sa_column=Column(
            ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
            index=True
        )
    )
    library_item_id: uuid.UUID = Field(
        sa_column=Column(
            ForeignKey("library_item.id", ondelete="CASCADE"),
            nullable=False,
            index=True
        )
    )
    highlight_type: HighlightType = Field(
        default=HighlightType.HIGHLIGHT,
        sa_column=Column(
            SAEnum(HighlightType, name="highlight_type_enum"),
            nullable=False
        )
    )
    quote: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    annotation: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    # Relations
    library_item: Optional[LibraryItem] = Relationship(back_populates="highlights")
