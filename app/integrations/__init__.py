"""
Integrations module for exporting library items to third-party services.

Architecture:
- app/models/integration.py: Database model for a user's integration
- base.py: IntegrationClient interface every export client implements
- {name}.py: Client implementations (readwise, pocket)
- service.py: Integration store queries and the client registry

Extension Points:
- Add a client by creating a {name}.py module with an IntegrationClient subclass
- Register it in CLIENT_REGISTRY in service.py
- No changes to the export dispatcher required
"""

from app.integrations.base import IntegrationClient
from app.models.integration import Integration

__all__ = [
    "Integration",
    "IntegrationClient",
]
