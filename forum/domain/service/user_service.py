"""User domain service."""

from typing import Iterable, Optional

import logfire

from forum.domain.error import NotFoundError
from forum.domain.model import User
from forum.domain.repository import UserRepository
from forum.domain.value import PreferenceChannel, UserId

from .base import Service


class UserService(Service):
    """Domain service for reading user profiles."""

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
        """
        self.user_repository = user_repository

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Get user by ID, or None if unknown."""
        return await self.user_repository.find_by_id(user_id)

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User entity

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span("user_service.get_by_id", user_id=str(user_id)):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                logfire.warn("User not found", user_id=str(user_id))
                raise NotFoundError("User", str(user_id))
            return user

    async def get_by_ids(self, user_ids: Iterable[UserId]) -> dict[UserId, User]:
        """Batch-fetch users by ID.

        Args:
            user_ids: IDs to fetch (duplicates are collapsed)

        Returns:
            Mapping of ID to user for every ID that exists
        """
        unique_ids = list(dict.fromkeys(user_ids))
        if not unique_ids:
            return {}
        users = await self.user_repository.find_by_ids(unique_ids)
        return {user.id: user for user in users}

    async def accepts(self, user_id: UserId, channel: PreferenceChannel) -> bool:
        """Check a user's notification preference, read fresh every time.

        Args:
            user_id: User whose preference to read
            channel: Preference flag to check

        Returns:
            True if the user exists and has the channel enabled
        """
        user = await self.user_repository.find_by_id(user_id)
        if user is None:
            return False
        return user.notification_prefs.allows(channel)
