"""
Integration store and export client registry.

Architecture:
- CLIENT_REGISTRY: Maps integration name → export client class
- Store functions: Query and update Integration rows for a user
- Client modules: Handle service-specific API calls

Design Principles:
- Store functions accept either a sync Session or an AsyncSession
- Every query is scoped to the owning user
- Unknown integration names are a configuration error and always raise
"""
import uuid
from typing import Dict, List, Optional, Type

from sqlmodel import Session, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.db_compat import commit, exec_statement, refresh
from app.core.exceptions import IntegrationNotFoundError, UnsupportedIntegrationError
from app.core.logging_config import log_debug
from app.core.time_utils import utc_now
from app.integrations.base import IntegrationClient
from app.integrations.pocket import PocketClient
from app.integrations.readwise import ReadwiseClient
from app.models.enums import IntegrationType
from app.models.integration import Integration


# ================================================================================
# CLIENT REGISTRY
# ================================================================================

# Maps integration name → IntegrationClient subclass
CLIENT_REGISTRY: Dict[str, Type[IntegrationClient]] = {
    ReadwiseClient.name: ReadwiseClient,
    PocketClient.name: PocketClient,
}


def get_integration_client(name: str) -> IntegrationClient:
    """
    Get an export client for an integration name.

    Names are matched case-insensitively (stored rows may say "readwise").

    Raises:
        UnsupportedIntegrationError: no client is registered for the name.
    """
    client_class = CLIENT_REGISTRY.get((name or "").strip().upper())
    if client_class is None:
        raise UnsupportedIntegrationError(name, sorted(CLIENT_REGISTRY.keys()))
    return client_class()


# ================================================================================
# STORE FUNCTIONS
# ================================================================================

async def find_integrations(
    session: Session | AsyncSession,
    user_id: uuid.UUID,
    *,
    id: Optional[uuid.UUID] = None,
    enabled: Optional[bool] = None,
    type: Optional[IntegrationType] = None,
) -> List[Integration]:
    """
    Find a user's integrations, optionally narrowed by id, enabled flag and type.

    Filters left as None are not applied.
    """
    statement = select(Integration).where(Integration.user_id == user_id)
    if id is not None:
        statement = statement.where(Integration.id == id)
    if enabled is not None:
        statement = statement.where(Integration.enabled == enabled)
    if type is not None:
        statement = statement.where(Integration.type == type)

    integrations = list((await exec_statement(session, statement.order_by(Integration.created_at))).all())
    log_debug(
        f"Found {len(integrations)} integrations",
        user_id=user_id,
        integration_id=id,
        enabled=enabled,
        type=type.value if type else None,
    )
    return integrations


async def update_integration(
    session: Session | AsyncSession,
    integration_id: uuid.UUID,
    user_id: uuid.UUID,
    **fields,
) -> Integration:
    """
    Update fields of a user's integration and return the refreshed row.

    Raises:
        IntegrationNotFoundError: the integration does not exist or belongs
            to another user.
        AttributeError: a field name is not an Integration column.
    """
    integration = (await exec_statement(
        session,
        select(Integration)
        .where(Integration.id == integration_id)
        .where(Integration.user_id == user_id)
    )).first()

    if not integration:
        raise IntegrationNotFoundError(
            f"Integration {integration_id} not found for user {user_id}"
        )

    for key, value in fields.items():
        if key not in Integration.model_fields:
            raise AttributeError(f"Integration has no field '{key}'")
        setattr(integration, key, value)
    integration.updated_at = utc_now()

    session.add(integration)
    await commit(session)
    await refresh(session, integration)
    return integration
