"""Keeps embedded counterparty and funding snapshots coherent with their source."""

import logging
from typing import Any, Dict, Iterable, Mapping, Tuple, Type
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import BaseModel
from app.models.domain.application import Application
from app.models.domain.funding import Funding
from app.models.domain.syndication import Syndication, SyndicationOffer

logger = logging.getLogger(__name__)


# Source fields copied under "<prefix>_<field>" columns
EMBEDDED_FIELDS: Dict[str, Tuple[str, ...]] = {
    "merchant": ("name", "email", "phone"),
    "funder": ("name", "email", "phone"),
    "lender": ("name", "email", "phone"),
    "iso": ("name", "email", "phone"),
    "funding": ("name", "identifier"),
}

# Tables carrying an embedded copy, per prefix
EMBEDDING_MODELS: Dict[str, Tuple[Type[BaseModel], ...]] = {
    "merchant": (Application, Funding),
    "funder": (Application, Funding),
    "lender": (Funding,),
    "iso": (Application,),
    "funding": (SyndicationOffer, Syndication),
}


def _fields_for(prefix: str) -> Tuple[str, ...]:
    if prefix not in EMBEDDED_FIELDS:
        raise ValueError(f"Unknown embedded prefix: {prefix}")
    return EMBEDDED_FIELDS[prefix]


def embed(prefix: str, record: Any) -> Dict[str, Any]:
    """
    Build the embedded column values for a new row referencing a record.

    Args:
        prefix: Embedding prefix (e.g., "merchant")
        record: Source record, or None for an empty optional reference

    Returns:
        Mapping of ``<prefix>_id`` and ``<prefix>_<field>`` to values

    Raises:
        ValueError: If the prefix is unknown
    """
    fields = _fields_for(prefix)
    if record is None:
        values = {f"{prefix}_id": None}
        values.update({f"{prefix}_{field}": None for field in fields})
        return values

    values = {f"{prefix}_id": record.id}
    values.update({f"{prefix}_{field}": getattr(record, field) for field in fields})
    return values


class EmbeddedCopySync:
    """
    Propagates source field changes into every embedding table.

    One bulk UPDATE is issued per embedding table; the matched row count
    of each is reported back to the caller.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the sync helper.

        Args:
            db: Async database session
        """
        self.db = db

    async def sync(
        self,
        prefix: str,
        ids: Iterable[UUID],
        changes: Mapping[str, Any],
    ) -> Dict[str, int]:
        """
        Update embedded copies of the given source records.

        Args:
            prefix: Embedding prefix (e.g., "funder")
            ids: IDs of the changed source records
            changes: Changed source fields; fields that are not embedded are ignored

        Returns:
            Matched row count per embedding table name, empty when nothing
            embedded changed

        Raises:
            ValueError: If the prefix is unknown or no IDs are given
        """
        fields = _fields_for(prefix)
        values = {
            f"{prefix}_{field}": value
            for field, value in changes.items()
            if field in fields
        }
        if not values:
            return {}

        ids = list(ids)
        if not ids:
            raise ValueError(f"No {prefix} ids given for embedded copy sync")

        counts: Dict[str, int] = {}
        for model in EMBEDDING_MODELS[prefix]:
            column = getattr(model, f"{prefix}_id")
            stmt = (
                update(model)
                .where(column.in_(ids))
                .values(**values)
                .execution_options(synchronize_session="evaluate")
            )
            result = await self.db.execute(stmt)
            counts[model.__tablename__] = result.rowcount

        await self.db.flush()
        logger.debug(f"Synced embedded {prefix} copies: {counts}")
        return counts
