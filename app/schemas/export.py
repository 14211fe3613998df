"""
Export job schemas.
"""
import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExportJobRequest(BaseModel):
    """
    Payload of the export-item job.

    Ids arrive as strings from the queue and are validated into UUIDs.
    Library item ids keep their order and are not deduplicated.
    """
    model_config = ConfigDict(frozen=True)

    user_id: uuid.UUID
    library_item_ids: List[uuid.UUID] = Field(default_factory=list)
    integration_id: Optional[uuid.UUID] = None


class ExportStatus(str, Enum):
    """How one integration's export attempt ended."""
    SUCCESS = "success"
    REJECTED = "rejected"  # client answered False
    FAULT = "fault"  # client or store raised


class ExportOutcome(BaseModel):
    """Result of exporting to a single integration."""
    model_config = ConfigDict(frozen=True)

    integration_id: uuid.UUID
    integration_name: str
    status: ExportStatus
    synced_at: Optional[datetime] = None
    error: Optional[str] = None
