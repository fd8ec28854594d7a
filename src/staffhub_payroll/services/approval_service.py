"""Payroll approval - the one-way draft → approved transition."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from staffhub_payroll.errors import InvalidRequestError
from staffhub_payroll.models import PayrollRecord
from staffhub_payroll.services.authorization import AuthorizationService
from staffhub_payroll.services.payroll_store import PayrollStore

logger = logging.getLogger(__name__)


@dataclass
class ApprovalResult:
    """Records approved by one request."""

    requested: int
    approved: list[PayrollRecord] = field(default_factory=list)

    @property
    def message(self) -> str:
        return f"Approved {len(self.approved)} payroll records"


class PayrollApprovalService:
    """Approves draft payroll records in batch.

    Ids that are already approved or do not exist are left out of the
    result; they are not errors.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.store = PayrollStore(session)
        self.authorization = AuthorizationService(session)

    async def approve(
        self,
        payroll_ids: Sequence[UUID],
        approver_user_id: UUID | None,
    ) -> ApprovalResult:
        """Approve the draft records among payroll_ids.

        Raises:
            AuthenticationError / AuthorizationError: caller is not admin or hr
            InvalidRequestError: no ids given
            PayrollPersistenceError: the store failed
        """
        await self.authorization.require_elevated_role(approver_user_id)
        if not payroll_ids:
            raise InvalidRequestError("No payroll IDs provided")

        approved = await self.store.approve_drafts(
            payroll_ids,
            approver_user_id,
            approved_at=datetime.now(timezone.utc),
        )

        logger.info(
            "Approved %d of %d payroll records (approver %s)",
            len(approved),
            len(payroll_ids),
            approver_user_id,
        )
        return ApprovalResult(requested=len(payroll_ids), approved=approved)
