"""
Library item store queries used by background jobs.
"""
import uuid
from typing import List, Sequence

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.logging_config import log_debug
from app.core.db_compat import exec_statement
from app.models.library_item import LibraryItem


async def find_library_items_by_ids(
    session: Session | AsyncSession,
    library_item_ids: Sequence[uuid.UUID],
    user_id: uuid.UUID,
) -> List[LibraryItem]:
    """
    Load the user's library items with the given ids, highlights included.

    Ids that do not exist or belong to another user are skipped. Items come
    back in the order their ids were requested.
    """
    if not library_item_ids:
        return []

    statement = (
        select(LibraryItem)
        .where(LibraryItem.user_id == user_id)
        .where(LibraryItem.id.in_(library_item_ids))
        .options(selectinload(LibraryItem.highlights))
    )
    items = list((await exec_statement(session, statement)).all())

    position = {}
    for index, item_id in enumerate(library_item_ids):
        position.setdefault(item_id, index)
    items.sort(key=lambda item: position.get(item.id, len(position)))

    log_debug(
        f"Resolved {len(items)} of {len(library_item_ids)} library items",
        user_id=user_id,
    )
    return items
