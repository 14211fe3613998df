"""
User-related models.
"""
from typing import Optional

from pydantic import EmailStr
from sqlalchemy import Column
from sqlmodel import Field, String

from .base import BaseModel


class User(BaseModel, table=True):
    """
    User model

    Only the columns the export worker reads; accounts are managed by the API.
    """
    __tablename__ = "user"

    email: EmailStr = Field(
        sa_column=Column(String(255), unique=True, nullable=False)
    )
    name: Optional[str] = Field(default=None, max_length=100)
    is_active: bool = Field(default=True)
