"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from payforeman.calculators.clock import Clock
from payforeman.database import Database
from payforeman.upstream.llm import LlmClient


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db_session(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with database.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_llm_client(request: Request) -> LlmClient:
    return request.app.state.llm


async def get_auth_token(
    authorization: Annotated[str | None, Header()] = None,
) -> str | None:
    """Bearer token forwarded to the platform services, if the caller sent one."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token.strip()
    return None


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
DatabaseDep = Annotated[Database, Depends(get_database)]
ClockDep = Annotated[Clock, Depends(get_clock)]
LlmDep = Annotated[LlmClient, Depends(get_llm_client)]
AuthToken = Annotated[str | None, Depends(get_auth_token)]
UserId = Annotated[UUID, Query(alias="userId")]
