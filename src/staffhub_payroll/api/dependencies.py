"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub_payroll.config import Settings, get_settings
from staffhub_payroll.database import init_db


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None
) -> UUID | None:
    """Extract the caller's user ID from header.

    A missing header yields None; the services reject it as unauthenticated.
    """
    if not x_user_id:
        return None
    try:
        return UUID(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid X-User-ID format",
        )


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
CurrentUserId = Annotated[UUID | None, Depends(get_current_user_id)]
AppSettings = Annotated[Settings, Depends(get_settings)]
