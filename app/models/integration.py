"""
Database model for third-party integrations.

An Integration is a user's connection to an external service that library
items can be exported to (Readwise, Pocket) or imported from. Tokens are
encrypted using Fernet before storage and decrypted right before an export
client call.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Enum as SAEnum
from sqlmodel import Field, Index

from app.models.base import BaseModel
from app.models.enums import IntegrationType


class Integration(BaseModel, table=True):
    """
    User's connection to a third-party integration.

    Fields:
        user_id: The user who owns this integration
        name: Integration name used to look up the export client (e.g. READWISE).
            Stored as free text; unknown names are rejected by the client registry.
        type: Whether items flow out (EXPORT) or in (IMPORT)
        token_encrypted: Encrypted access token for the external API
        enabled: Whether this integration is active (false = paused)
        synced_at: When items were last exported successfully

    Security:
        - Tokens are encrypted using Fernet (core/encryption.py)
        - Changing SECRET_KEY invalidates all encrypted tokens
    """
    __tablename__ = "integration"

    user_id: uuid.UUID = Field(
        sa_column=Column(
            ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
            index=True
        )
    )

    name: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Integration name (e.g. READWISE, POCKET)"
    )

    type: IntegrationType = Field(
        default=IntegrationType.EXPORT,
        sa_column=Column(
            SAEnum(IntegrationType, name="integration_type_enum"),
            nullable=False
        )
    )

    token_encrypted: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Encrypted access token"
    )

    enabled: bool = Field(
        default=True,
        description="Whether this integration is currently enabled"
    )

    synced_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
        description="Last successful export timestamp"
    )

    __table_args__ = (
        # Lookup path of the export job: user's enabled integrations of a type
        Index("idx_integration_user_enabled_type", "user_id", "enabled", "type"),
    )
