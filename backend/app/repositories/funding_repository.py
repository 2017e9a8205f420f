"""Repository for funding data access with fee, expense and credit loading."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.domain.funding import Funding
from app.repositories.base import BaseRepository


class FundingRepository(BaseRepository[Funding]):
    """
    Repository for Funding with specialized queries.

    Adjustment rows (fees, expenses, credits) are eagerly loaded so the
    statistics calculators can read them without lazy loads.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the funding repository.

        Args:
            db: Async database session
        """
        super().__init__(Funding, db)

    async def get_by_id_with_adjustments(self, id: UUID) -> Optional[Funding]:
        """
        Retrieve a funding by ID with fees, expenses and credits loaded.

        Args:
            id: The UUID of the funding

        Returns:
            The funding with adjustments loaded, or None if not found
        """
        stmt = (
            select(Funding)
            .where(Funding.id == id)
            .options(
                selectinload(Funding.fees),
                selectinload(Funding.expenses),
                selectinload(Funding.credits),
            )
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_merchant(
        self,
        merchant_id: UUID,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Funding]:
        """
        Retrieve active fundings for a merchant, newest first.

        Args:
            merchant_id: UUID of the merchant
            skip: Number of records to skip (offset)
            limit: Maximum number of records to return

        Returns:
            List of fundings for the merchant
        """
        stmt = (
            select(Funding)
            .where(Funding.merchant_id == merchant_id)
            .where(Funding.inactive.is_(False))
            .order_by(Funding.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_funder(
        self,
        funder_id: UUID,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Funding]:
        """
        Retrieve active fundings issued by a funder, newest first.

        Args:
            funder_id: UUID of the funder
            skip: Number of records to skip (offset)
            limit: Maximum number of records to return

        Returns:
            List of fundings for the funder
        """
        stmt = (
            select(Funding)
            .where(Funding.funder_id == funder_id)
            .where(Funding.inactive.is_(False))
            .order_by(Funding.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
