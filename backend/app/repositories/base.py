from typing import Any, Generic, Iterable, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import BaseModel

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations.

    Domain repositories extend it with their specialized queries; the
    statistics engine uses it directly for batch lookups of related rows.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Initialize the repository.

        Args:
            model: The SQLAlchemy model class
            db: Async database session
        """
        self.model = model
        self.db = db

    async def create(self, **kwargs: Any) -> ModelType:
        """
        Create a new entity.

        Args:
            **kwargs: Field values for the new entity

        Returns:
            The created entity with generated ID
        """
        instance = self.model(**kwargs)
        self.db.add(instance)
        await self.db.flush()
        await self.db.refresh(instance)
        return instance

    async def get_by_id(self, id: UUID) -> Optional[ModelType]:
        """
        Retrieve an entity by its ID.

        Args:
            id: The UUID of the entity

        Returns:
            The entity if found, None otherwise
        """
        stmt = select(self.model).where(self.model.id == id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, id: UUID, **kwargs: Any) -> Optional[ModelType]:
        """
        Update an entity by ID.

        Args:
            id: The UUID of the entity to update
            **kwargs: Fields to update with new values

        Returns:
            The updated entity if found, None otherwise
        """
        instance = await self.get_by_id(id)
        if instance is None:
            return None

        for field, value in kwargs.items():
            setattr(instance, field, value)

        await self.db.flush()
        await self.db.refresh(instance)
        return instance

    async def delete(self, id: UUID) -> bool:
        """
        Delete an entity by ID.

        Args:
            id: The UUID of the entity to delete

        Returns:
            True if entity was deleted, False if not found
        """
        stmt = delete(self.model).where(self.model.id == id)
        result = await self.db.execute(stmt)
        await self.db.flush()
        return result.rowcount > 0

    async def count(self, **filters: Any) -> int:
        """
        Count entities matching the given filters.

        Args:
            **filters: Field equality filters

        Returns:
            Count of matching entities
        """
        stmt = select(func.count()).select_from(self.model)

        for field, value in filters.items():
            if hasattr(self.model, field):
                stmt = stmt.where(getattr(self.model, field) == value)

        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def find_by(self, **filters: Any) -> List[ModelType]:
        """
        Find entities matching the given field filters.

        Args:
            **filters: Field equality filters (e.g., status=PaybackPlanStatus.ACTIVE)

        Returns:
            List of matching entities
        """
        stmt = select(self.model)

        for field, value in filters.items():
            if hasattr(self.model, field):
                stmt = stmt.where(getattr(self.model, field) == value)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def find_in(
        self,
        field: str,
        values: Iterable[Any],
        exclude_inactive: bool = True,
    ) -> List[ModelType]:
        """
        Find entities whose field matches any of the given values.

        One ``IN`` query regardless of how many values are passed, so
        callers can load related rows for a whole page of subjects at once.

        Args:
            field: Column name to match (e.g., "funding_id")
            values: Candidate values
            exclude_inactive: Skip rows flagged inactive when the model has the flag

        Returns:
            List of matching entities, empty when no values are given
        """
        values = list(values)
        if not values:
            return []

        stmt = select(self.model).where(getattr(self.model, field).in_(values))
        if exclude_inactive and hasattr(self.model, "inactive"):
            stmt = stmt.where(self.model.inactive.is_(False))

        result = await self.db.execute(stmt)
        return list(result.scalars().all())
