"""Funding service for CRUD operations with embedded counterparty snapshots."""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.domain.funding import Funding, FundingCredit, FundingExpense, FundingFee
from app.models.domain.party import Funder, Lender, Merchant
from app.models.schemas.funding import FundingCreate, FundingResponse, FundingUpdate
from app.repositories.base import BaseRepository
from app.repositories.denormalization import EMBEDDED_FIELDS, EmbeddedCopySync, embed
from app.repositories.funding_repository import FundingRepository
from app.services.statistics import FundingStatistics, StatisticsEngine

logger = logging.getLogger(__name__)


class FundingService:
    """
    Funding service for managing fundings.

    Fundings embed snapshots of their funder, lender and merchant; their
    own name and identifier are in turn embedded in syndication offers and
    syndications, which are kept in step on update.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the funding service.

        Args:
            db: Async database session
        """
        self.db = db
        self.repo = FundingRepository(db)
        self.statistics = StatisticsEngine(db)
        self.embedded = EmbeddedCopySync(db)

    async def create_funding(self, data: Dict[str, Any]) -> Funding:
        """
        Create a funding with its fees, expenses and credits.

        Args:
            data: Funding fields (see FundingCreate)

        Returns:
            Created funding with adjustments loaded

        Raises:
            ValueError: If validation fails, a counterparty does not exist or
                the lender belongs to another funder
        """
        payload = FundingCreate.model_validate(data)

        funder = await BaseRepository(Funder, self.db).get_by_id(payload.funder_id)
        if not funder:
            raise ValueError(f"Funder {payload.funder_id} not found")

        merchant = await BaseRepository(Merchant, self.db).get_by_id(payload.merchant_id)
        if not merchant:
            raise ValueError(f"Merchant {payload.merchant_id} not found")

        lender = None
        if payload.lender_id:
            lender = await BaseRepository(Lender, self.db).get_by_id(payload.lender_id)
            if not lender:
                raise ValueError(f"Lender {payload.lender_id} not found")
            if lender.funder_id != funder.id:
                raise ValueError("Lender does not belong to the funding's funder")

        funding = Funding(
            name=payload.name,
            identifier=payload.identifier,
            type=payload.type,
            application_id=payload.application_id,
            funded_amount=payload.funded_amount,
            payback_amount=payload.payback_amount,
            position=payload.position,
            internal=payload.internal,
            **embed("funder", funder),
            **embed("lender", lender),
            **embed("merchant", merchant),
        )
        funding.fees = [FundingFee(**fee.model_dump()) for fee in payload.fees]
        funding.expenses = [FundingExpense(**expense.model_dump()) for expense in payload.expenses]
        funding.credits = [FundingCredit(**credit.model_dump()) for credit in payload.credits]

        self.db.add(funding)
        await self.db.commit()

        logger.info(
            f"Created funding {funding.id} ({funding.name}) for merchant {merchant.name}: "
            f"funded {funding.funded_amount}, payback {funding.payback_amount}"
        )
        return await self.repo.get_by_id_with_adjustments(funding.id)

    async def get_funding(
        self, funding_id: UUID, calculate: bool = False
    ) -> Optional[FundingResponse]:
        """
        Retrieve a funding by ID.

        Args:
            funding_id: UUID of the funding
            calculate: Include the funding's statistics

        Returns:
            Funding response, or None if not found
        """
        funding = await self.repo.get_by_id(funding_id)
        if not funding:
            return None

        responses = await self._to_responses([funding], calculate)
        return responses[0]

    async def get_statistics(self, funding_id: UUID) -> Optional[FundingStatistics]:
        """
        Compute a funding's statistics.

        Args:
            funding_id: UUID of the funding

        Returns:
            Funding statistics, or None if the funding is not found
        """
        funding = await self.repo.get_by_id(funding_id)
        if not funding:
            return None
        return (await self.statistics.fundings([funding]))[funding.id]

    async def list_fundings(
        self,
        merchant_id: Optional[UUID] = None,
        funder_id: Optional[UUID] = None,
        calculate: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> List[FundingResponse]:
        """
        Retrieve fundings of a merchant or of a funder.

        Args:
            merchant_id: Filter by merchant
            funder_id: Filter by funder (used when no merchant is given)
            calculate: Include each funding's statistics
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of funding responses, newest first

        Raises:
            ValueError: If neither merchant_id nor funder_id is given
        """
        if merchant_id:
            fundings = await self.repo.get_by_merchant(merchant_id, skip=skip, limit=limit)
        elif funder_id:
            fundings = await self.repo.get_by_funder(funder_id, skip=skip, limit=limit)
        else:
            raise ValueError("Either merchant_id or funder_id is required")

        return await self._to_responses(fundings, calculate)

    async def update_funding(
        self, funding_id: UUID, data: Dict[str, Any]
    ) -> Optional[Funding]:
        """
        Update a funding and its embedded snapshots.

        Args:
            funding_id: UUID of the funding
            data: Fields to update (see FundingUpdate)

        Returns:
            Updated funding, or None if not found

        Raises:
            ValueError: If validation fails or the payback amount would fall
                below the funded amount
        """
        payload = FundingUpdate.model_validate(data)
        changes = payload.model_dump(exclude_unset=True)

        funding = await self.repo.get_by_id(funding_id)
        if not funding:
            return None

        funded_amount = changes.get("funded_amount", funding.funded_amount)
        payback_amount = changes.get("payback_amount", funding.payback_amount)
        if payback_amount < funded_amount:
            raise ValueError("payback_amount cannot be less than funded_amount")

        embedded_changes = {
            field: value
            for field, value in changes.items()
            if field in EMBEDDED_FIELDS["funding"] and getattr(funding, field) != value
        }

        for field, value in changes.items():
            setattr(funding, field, value)

        if embedded_changes:
            counts = await self.embedded.sync("funding", [funding.id], embedded_changes)
            logger.info(f"Synced funding {funding.id} snapshots: {counts}")

        await self.db.commit()
        await self.db.refresh(funding)
        return funding

    async def _to_responses(
        self, fundings: List[Funding], calculate: bool
    ) -> List[FundingResponse]:
        statistics = await self.statistics.fundings(fundings) if calculate else {}
        responses = []
        for funding in fundings:
            response = FundingResponse.model_validate(funding)
            if funding.id in statistics:
                response.statistics = statistics[funding.id].to_dict()
            responses.append(response)
        return responses
