# Import all models for easy access
from .base import BaseModel
from .integration import Integration
from .library_item import Highlight, LibraryItem
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "LibraryItem",
    "Highlight",
    "Integration",
]
