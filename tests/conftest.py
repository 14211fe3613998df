"""
Pytest fixtures shared across the unit suites.

Store functions accept sync sessions, so the suites run against an in-memory
SQLite database without an async driver.
"""
from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from typing import Callable, Iterator, List, Optional

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.encryption import encrypt_token
from app.models import Highlight, Integration, LibraryItem, User
from app.models.enums import HighlightType, IntegrationType


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Iterator[Session]:
    with Session(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def session_factory(engine) -> Callable:
    """
    Factory with the shape ExportDispatcher expects: each call yields a new
    session inside an async context manager.
    """

    @asynccontextmanager
    async def _factory():
        with Session(engine, expire_on_commit=False) as session:
            yield session

    return _factory


@pytest.fixture
def user(db_session: Session) -> User:
    user = User(email=f"reader-{uuid.uuid4().hex[:8]}@example.com", name="Reader")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def item_factory(db_session: Session, user: User) -> Callable[..., LibraryItem]:
    """
    Factory that creates library items, optionally with highlight quotes.
    """

    def _create(
        title: str = "Saved article",
        highlights: Optional[List[str]] = None,
        owner: Optional[User] = None,
        **overrides,
    ) -> LibraryItem:
        owner = owner or user
        slug = overrides.pop("slug", f"saved-article-{uuid.uuid4().hex[:6]}")
        item = LibraryItem(
            user_id=owner.id,
            title=title,
            slug=slug,
            original_url=overrides.pop("original_url", f"https://example.com/{slug}"),
            **overrides,
        )
        db_session.add(item)
        db_session.commit()
        for quote in highlights or []:
            db_session.add(Highlight(
                user_id=owner.id,
                library_item_id=item.id,
                highlight_type=HighlightType.HIGHLIGHT,
                quote=quote,
            ))
        db_session.commit()
        db_session.refresh(item)
        return item

    return _create


@pytest.fixture
def integration_factory(db_session: Session, user: User) -> Callable[..., Integration]:
    """
    Factory that creates integrations with an encrypted token.
    """

    def _create(
        name: str = "READWISE",
        token: str = "FAKE_TOKEN_FOR_TESTS",  # noqa: S107
        owner: Optional[User] = None,
        **overrides,
    ) -> Integration:
        owner = owner or user
        integration = Integration(
            user_id=owner.id,
            name=name,
            type=overrides.pop("type", IntegrationType.EXPORT),
            enabled=overrides.pop("enabled", True),
            token_encrypted=encrypt_token(token),
            **overrides,
        )
        db_session.add(integration)
        db_session.commit()
        db_session.refresh(integration)
        return integration

    return _create
