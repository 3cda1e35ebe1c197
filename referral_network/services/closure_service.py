"""
Closure service.

Maintains and queries the transitive closure of the referral tree.
"""

from typing import Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.models.user_closure import UserClosure
from referral_network.repositories.user_closure_repository import (
    UserClosureRepository,
)
from referral_network.utils.exceptions import ConflictError


def resolve_root_child_id(
    new_user_id: int,
    parent_row_depth: int,
    parent_row_root_child_id: Optional[int],
) -> Optional[int]:
    """
    Branch marker for a new (ancestor -> new user) row.

    The new row is derived from an existing (ancestor -> parent) row. When
    that row is the parent's self row, the ancestor is the parent and the
    new user is its immediate child. Otherwise the path from the ancestor
    to the new user passes through the same child as the path to the
    parent, so the marker is inherited.

    Args:
        new_user_id: User being attached
        parent_row_depth: Depth of the (ancestor -> parent) row
        parent_row_root_child_id: Branch marker of that row

    Returns:
        Immediate child of the ancestor on the path to the new user
    """
    if parent_row_depth == 0:
        return new_user_id
    return parent_row_root_child_id


class ClosureService:
    """Closure service for the referral tree."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize closure service."""
        self.session = session
        self.closure_repo = UserClosureRepository(session)

    async def create_user_closure_entry(
        self,
        ancestor_id: int,
        descendant_id: int,
        depth: int,
        root_child_id: Optional[int] = None,
    ) -> UserClosure:
        """
        Create a single closure row.

        Args:
            ancestor_id: Ancestor user ID
            descendant_id: Descendant user ID
            depth: Distance between them
            root_child_id: Branch marker

        Returns:
            Created closure row

        Raises:
            ValueError: If IDs are missing
            ConflictError: If the pair already exists
        """
        if not ancestor_id or not descendant_id:
            raise ValueError("ancestor_id and descendant_id are required")

        existing = await self.closure_repo.get_by_pair(ancestor_id, descendant_id)
        if existing:
            raise ConflictError(
                f"User closure entry ({ancestor_id} -> {descendant_id}) "
                "already exists"
            )

        return await self.closure_repo.create(
            ancestor_id=ancestor_id,
            descendant_id=descendant_id,
            depth=depth,
            root_child_id=root_child_id,
        )

    async def create_closures_for_user(
        self, user_id: int, parent_id: Optional[int] = None
    ) -> list[UserClosure]:
        """
        Create all closure rows for a newly attached user.

        Always creates the self row. With a parent, copies every row of the
        parent's ancestor chain one level deeper.

        Args:
            user_id: New user ID
            parent_id: Referrer user ID (None for roots)

        Returns:
            Created closure rows (self row first)

        Raises:
            ValueError: If user_id is missing or equals parent_id
            ConflictError: If the user already has closure rows
        """
        if not user_id:
            raise ValueError("user_id is required")
        if parent_id is not None and parent_id == user_id:
            raise ValueError("User cannot be their own referrer")

        if await self.closure_repo.get_by_pair(user_id, user_id):
            raise ConflictError(
                f"User closure entry ({user_id} -> {user_id}) already exists"
            )

        rows = [
            {
                "ancestor_id": user_id,
                "descendant_id": user_id,
                "depth": 0,
                "root_child_id": None,
            }
        ]

        if parent_id:
            parent_rows = await self.closure_repo.get_ancestor_rows(parent_id)

            if not parent_rows:
                logger.warning(
                    "Parent has no closure rows, creating direct edge only",
                    extra={"user_id": user_id, "parent_id": parent_id},
                )
                rows.append({
                    "ancestor_id": parent_id,
                    "descendant_id": user_id,
                    "depth": 1,
                    "root_child_id": user_id,
                })
            else:
                for parent_row in parent_rows:
                    rows.append({
                        "ancestor_id": parent_row.ancestor_id,
                        "descendant_id": user_id,
                        "depth": parent_row.depth + 1,
                        "root_child_id": resolve_root_child_id(
                            user_id,
                            parent_row.depth,
                            parent_row.root_child_id,
                        ),
                    })

        try:
            created = await self.closure_repo.bulk_create(rows)
        except IntegrityError as e:
            raise ConflictError(
                f"Closure rows for user {user_id} conflict with existing rows"
            ) from e

        logger.info(
            "Closure rows created",
            extra={
                "user_id": user_id,
                "parent_id": parent_id,
                "rows": len(created),
            },
        )

        return created

    async def get_all_descendants_of_user(
        self, user_id: int, exclude_self: bool = False
    ) -> list[UserClosure]:
        """
        Get all descendants of a user (self row first unless excluded).

        Args:
            user_id: User ID
            exclude_self: Skip the depth-0 row

        Returns:
            Closure rows ordered by depth ascending
        """
        if not user_id:
            raise ValueError("user_id is required")
        return await self.closure_repo.get_descendant_rows(user_id, exclude_self)

    async def get_all_ascendants_of_user(
        self, user_id: int, exclude_self: bool = False
    ) -> list[UserClosure]:
        """
        Get all ancestors of a user, closest first.

        Args:
            user_id: User ID
            exclude_self: Skip the depth-0 row

        Returns:
            Closure rows ordered by depth ascending
        """
        if not user_id:
            raise ValueError("user_id is required")
        return await self.closure_repo.get_ancestor_rows(user_id, exclude_self)

    async def get_all_direct_descendants_of_user(
        self, user_id: int
    ) -> list[UserClosure]:
        """
        Get immediate children of a user (depth = 1).

        Args:
            user_id: User ID

        Returns:
            Closure rows ordered by descendant ID
        """
        if not user_id:
            raise ValueError("user_id is required")
        return await self.closure_repo.get_direct_descendant_rows(user_id)

    async def is_descendant(
        self, ancestor_id: int, descendant_id: int
    ) -> bool:
        """Check if descendant_id is strictly below ancestor_id."""
        return await self.closure_repo.is_descendant(ancestor_id, descendant_id)
