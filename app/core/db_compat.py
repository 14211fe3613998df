"""
Helpers that run a statement on either a sync Session or an AsyncSession.

Store functions use these so they work from async jobs and from sync code
(scripts, tests) alike.
"""
from inspect import isawaitable

from sqlmodel import Session
from sqlmodel.ext.asyncio.session import AsyncSession


async def exec_statement(session: Session | AsyncSession, statement):
    result = session.exec(statement)
    if isawaitable(result):
        return await result
    return result


async def commit(session: Session | AsyncSession) -> None:
    result = session.commit()
    if isawaitable(result):
        await result


async def refresh(session: Session | AsyncSession, instance) -> None:
    result = session.refresh(instance)
    if isawaitable(result):
        await result
