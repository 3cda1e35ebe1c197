"""
Base repository.

Generic data access operations shared by all repositories.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.models.base import Base

# Generic type for model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with generic operations.

    Provides async database operations for any SQLAlchemy model.
    Repositories only flush; committing is the caller's decision.

    Type Parameters:
        ModelType: SQLAlchemy model class

    Example:
        class LevelRepository(BaseRepository[Level]):
            def __init__(self, session: AsyncSession):
                super().__init__(Level, session)
    """

    def __init__(
        self, model: Type[ModelType], session: AsyncSession
    ) -> None:
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def get_by_id(self, id: Any) -> Optional[ModelType]:
        """
        Get entity by primary key.

        Args:
            id: Primary key value (tuple for composite keys)

        Returns:
            Entity or None if not found
        """
        return await self.session.get(self.model, id)

    async def get_by(
        self, **filters: Any
    ) -> Optional[ModelType]:
        """
        Get single entity by filters.

        Args:
            **filters: Column filters

        Returns:
            First matching entity or None
        """
        stmt = select(self.model).filter_by(**filters).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create(self, **data: Any) -> ModelType:
        """
        Create new entity.

        Args:
            **data: Entity data

        Returns:
            Created entity
        """
        entity = self.model(**data)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def count(self, **filters: Any) -> int:
        """
        Count entities matching filters.

        Args:
            **filters: Column filters

        Returns:
            Count of matching entities
        """
        stmt = select(func.count()).select_from(self.model)

        if filters:
            stmt = stmt.filter_by(**filters)

        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def bulk_create(
        self, items: List[Dict[str, Any]]
    ) -> List[ModelType]:
        """
        Create multiple entities in one flush.

        Args:
            items: List of entity data dicts

        Returns:
            List of created entities
        """
        entities = [self.model(**item) for item in items]
        self.session.add_all(entities)
        await self.session.flush()
        return entities
