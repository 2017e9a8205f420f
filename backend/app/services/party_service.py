"""Counterparty service keeping embedded snapshots coherent on update."""

import logging
from typing import Any, Dict, Optional, Type
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import BaseModel
from app.models.domain.party import ISO, Funder, Lender, Merchant, Syndicator
from app.models.schemas.party import PartyResponse, PartyUpdate
from app.repositories.base import BaseRepository
from app.repositories.denormalization import EMBEDDED_FIELDS, EmbeddedCopySync
from app.services.statistics import StatisticsEngine

logger = logging.getLogger(__name__)


PARTY_MODELS: Dict[str, Type[BaseModel]] = {
    "merchant": Merchant,
    "funder": Funder,
    "lender": Lender,
    "iso": ISO,
    "syndicator": Syndicator,
}


class PartyService:
    """
    Counterparty service for merchants, funders, lenders, ISOs and syndicators.

    Name, email and phone changes are propagated to every row that embeds
    a copy of the counterparty in the same transaction.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the counterparty service.

        Args:
            db: Async database session
        """
        self.db = db
        self.statistics = StatisticsEngine(db)
        self.embedded = EmbeddedCopySync(db)

    def _repo(self, kind: str) -> BaseRepository:
        if kind not in PARTY_MODELS:
            raise ValueError(f"Unknown counterparty kind: {kind}")
        return BaseRepository(PARTY_MODELS[kind], self.db)

    async def update_party(
        self, kind: str, party_id: UUID, data: Dict[str, Any]
    ) -> Optional[BaseModel]:
        """
        Update a counterparty and its embedded copies.

        Args:
            kind: Counterparty kind (merchant, funder, lender, iso, syndicator)
            party_id: UUID of the counterparty
            data: Fields to update (see PartyUpdate)

        Returns:
            Updated counterparty, or None if not found

        Raises:
            ValueError: If the kind is unknown or validation fails
        """
        repo = self._repo(kind)
        payload = PartyUpdate.model_validate(data)
        changes = payload.model_dump(exclude_unset=True)

        party = await repo.get_by_id(party_id)
        if not party:
            return None

        changed = {
            field: value for field, value in changes.items() if getattr(party, field) != value
        }
        for field, value in changed.items():
            setattr(party, field, value)

        # Syndicators are referenced by ID only
        if kind in EMBEDDED_FIELDS and changed:
            counts = await self.embedded.sync(kind, [party.id], changed)
            if counts:
                logger.info(f"Synced {kind} {party.id} snapshots: {counts}")

        await self.db.commit()
        await self.db.refresh(party)

        logger.info(f"Updated {kind} {party.id}: {sorted(changed)}")
        return party

    async def get_merchant(self, merchant_id: UUID) -> Optional[PartyResponse]:
        """
        Retrieve a merchant with its statistics.

        Args:
            merchant_id: UUID of the merchant

        Returns:
            Merchant response, or None if not found
        """
        merchant = await self._repo("merchant").get_by_id(merchant_id)
        if not merchant:
            return None
        statistics = await self.statistics.merchants([merchant])
        return self._to_response(merchant, statistics[merchant.id])

    async def get_funder(self, funder_id: UUID) -> Optional[PartyResponse]:
        """Retrieve a funder with its statistics, or None if not found."""
        funder = await self._repo("funder").get_by_id(funder_id)
        if not funder:
            return None
        statistics = await self.statistics.funders([funder])
        return self._to_response(funder, statistics[funder.id])

    async def get_syndicator(self, syndicator_id: UUID) -> Optional[PartyResponse]:
        """Retrieve a syndicator with its statistics, or None if not found."""
        syndicator = await self._repo("syndicator").get_by_id(syndicator_id)
        if not syndicator:
            return None
        statistics = await self.statistics.syndicators([syndicator])
        return self._to_response(syndicator, statistics[syndicator.id])

    @staticmethod
    def _to_response(party: BaseModel, statistics: Any) -> PartyResponse:
        response = PartyResponse.model_validate(party)
        response.statistics = statistics.to_dict()
        return response
