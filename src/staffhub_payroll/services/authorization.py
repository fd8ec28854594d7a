"""Role checks for payroll generation and approval."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub_payroll.errors import AuthenticationError, AuthorizationError
from staffhub_payroll.models import AppUser

# Roles allowed to generate, preview and approve payroll.
ELEVATED_ROLES = frozenset({"admin", "hr"})


class AuthorizationService:
    """Resolves a caller's role and enforces the elevated-role precondition."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_role(self, user_id: UUID) -> str | None:
        """Look up the role of an application user."""
        result = await self.session.execute(
            select(AppUser.role).where(AppUser.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def require_elevated_role(self, user_id: UUID | None) -> str:
        """Return the caller's role, raising unless it is admin or hr."""
        if user_id is None:
            raise AuthenticationError("No caller identity provided")

        role = await self.get_role(user_id)
        if role is None:
            raise AuthenticationError(f"Unknown user {user_id}")
        if role not in ELEVATED_ROLES:
            raise AuthorizationError("Insufficient permissions", role=role)
        return role
