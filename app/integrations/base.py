"""
Export client interface.
"""
from abc import ABC, abstractmethod
from typing import Sequence

from app.models.library_item import LibraryItem


class IntegrationClient(ABC):
    """
    Pushes library items to one third-party service.

    Implementations return False when the service declines the export
    (bad token, rejected payload) and let unexpected faults (network,
    protocol) raise.
    """

    name: str

    @abstractmethod
    async def export(self, token: str, items: Sequence[LibraryItem]) -> bool:
        """Export items using the integration's decrypted access token."""
