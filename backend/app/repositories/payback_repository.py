"""Repositories for payback plans and paybacks."""

from datetime import date
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import PaybackPlanStatus
from app.models.domain.payback import Payback, PaybackPlan
from app.repositories.base import BaseRepository


class PaybackPlanRepository(BaseRepository[PaybackPlan]):
    """Repository for PaybackPlan with schedule-driven queries."""

    def __init__(self, db: AsyncSession):
        """
        Initialize the payback plan repository.

        Args:
            db: Async database session
        """
        super().__init__(PaybackPlan, db)

    async def get_by_funding(self, funding_id: UUID) -> List[PaybackPlan]:
        """
        Retrieve all plans of a funding in start date order.

        Args:
            funding_id: UUID of the funding

        Returns:
            List of payback plans
        """
        stmt = (
            select(PaybackPlan)
            .where(PaybackPlan.funding_id == funding_id)
            .order_by(PaybackPlan.start_date, PaybackPlan.created_at)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_due_plans(
        self,
        as_of: date,
        skip: int = 0,
        limit: int = 100,
    ) -> List[PaybackPlan]:
        """
        Retrieve ACTIVE plans whose next payback is due on or before a date.

        Args:
            as_of: Cut-off date
            skip: Number of records to skip (offset)
            limit: Maximum number of records to return

        Returns:
            List of due payback plans ordered by next payback date
        """
        stmt = (
            select(PaybackPlan)
            .where(PaybackPlan.status == PaybackPlanStatus.ACTIVE)
            .where(PaybackPlan.next_payback_date.is_not(None))
            .where(PaybackPlan.next_payback_date <= as_of)
            .order_by(PaybackPlan.next_payback_date, PaybackPlan.id)
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())


class PaybackRepository(BaseRepository[Payback]):
    """Repository for individual paybacks."""

    def __init__(self, db: AsyncSession):
        """
        Initialize the payback repository.

        Args:
            db: Async database session
        """
        super().__init__(Payback, db)

    async def get_by_plan(self, payback_plan_id: UUID) -> List[Payback]:
        """
        Retrieve the paybacks of a plan in due date order.

        Args:
            payback_plan_id: UUID of the payback plan

        Returns:
            List of paybacks
        """
        stmt = (
            select(Payback)
            .where(Payback.payback_plan_id == payback_plan_id)
            .order_by(Payback.due_date, Payback.created_at)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
