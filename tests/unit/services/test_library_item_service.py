"""
Unit tests for library item lookups.
"""
import uuid

import pytest

from app.models import User
from app.services.library_item_service import find_library_items_by_ids


class TestFindLibraryItemsByIds:

    @pytest.mark.asyncio
    async def test_returns_items_in_requested_order_with_highlights(
        self, db_session, user, item_factory
    ):
        first = item_factory(title="First", highlights=["one", "two"])
        second = item_factory(title="Second")

        items = await find_library_items_by_ids(db_session, [second.id, first.id], user.id)

        assert [item.id for item in items] == [second.id, first.id]
        assert sorted(h.quote for h in items[1].highlights) == ["one", "two"]

    @pytest.mark.asyncio
    async def test_unknown_ids_are_skipped(self, db_session, user, item_factory):
        item = item_factory()

        items = await find_library_items_by_ids(db_session, [uuid.uuid4(), item.id], user.id)

        assert [found.id for found in items] == [item.id]

    @pytest.mark.asyncio
    async def test_items_of_other_users_are_skipped(self, db_session, user, item_factory):
        stranger = User(email="stranger@example.com")
        db_session.add(stranger)
        db_session.commit()
        foreign = item_factory(owner=stranger)

        assert await find_library_items_by_ids(db_session, [foreign.id], user.id) == []

    @pytest.mark.asyncio
    async def test_empty_id_list_returns_nothing(self, db_session, user):
        assert await find_library_items_by_ids(db_session, [], user.id) == []
