"""PostgreSQL implementation of Notification repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from forum.domain.model import Notification
from forum.domain.repository import NotificationRepository
from forum.domain.value import NotificationId, UserId
from forum.persistence.mappers import notification_to_dict, row_to_notification
from forum.persistence.tables import notifications_table


class PostgresNotificationRepository(NotificationRepository):
    """PostgreSQL implementation of NotificationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, notification_id: NotificationId) -> Optional[Notification]:
        """Find a notification by ID."""
        stmt = select(notifications_table).where(
            notifications_table.c.id == notification_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_notification(dict(row)) if row else None

    async def find_by_recipient(
        self,
        recipient_id: UserId,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Notification]:
        """List a recipient's notifications, newest first."""
        stmt = select(notifications_table).where(
            notifications_table.c.recipient_id == recipient_id
        )
        if unread_only:
            stmt = stmt.where(notifications_table.c.read.is_(False))
        stmt = (
            stmt.order_by(notifications_table.c.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [row_to_notification(dict(row)) for row in result.mappings().all()]

    async def count_by_recipient(
        self, recipient_id: UserId, unread_only: bool = False
    ) -> int:
        """Count a recipient's notifications."""
        stmt = (
            select(func.count())
            .select_from(notifications_table)
            .where(notifications_table.c.recipient_id == recipient_id)
        )
        if unread_only:
            stmt = stmt.where(notifications_table.c.read.is_(False))
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def save(self, notification: Notification) -> Notification:
        """Insert a notification.

        Runs in a SAVEPOINT: a failed insert rolls back only itself and
        leaves the caller's transaction (e.g. the message it follows)
        intact.
        """
        async with self.session.begin_nested():
            await self.session.execute(
                insert(notifications_table).values(**notification_to_dict(notification))
            )
        return notification

    async def mark_read(
        self,
        notification_id: NotificationId,
        recipient_id: UserId,
        read_at: datetime,
    ) -> Optional[Notification]:
        """Mark one notification read, scoped to its recipient."""
        stmt = (
            update(notifications_table)
            .where(
                and_(
                    notifications_table.c.id == notification_id,
                    notifications_table.c.recipient_id == recipient_id,
                )
            )
            .values(
                read=True,
                read_at=func.coalesce(notifications_table.c.read_at, read_at),
            )
            .returning(*notifications_table.c)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        await self.session.flush()
        return row_to_notification(dict(row)) if row else None

    async def mark_all_read(self, recipient_id: UserId, read_at: datetime) -> int:
        """Mark every unread notification of a recipient read."""
        stmt = (
            update(notifications_table)
            .where(
                and_(
                    notifications_table.c.recipient_id == recipient_id,
                    notifications_table.c.read.is_(False),
                )
            )
            .values(read=True, read_at=read_at)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount  # type: ignore[attr-defined]

    async def delete_created_before(self, cutoff: datetime) -> int:
        """Delete notifications older than the cutoff."""
        stmt = delete(notifications_table).where(
            notifications_table.c.created_at < cutoff
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount  # type: ignore[attr-defined]
