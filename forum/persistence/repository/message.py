"""PostgreSQL implementation of Message repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, any_, case, func, literal, not_, or_, select, update
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from forum.domain.model import ConversationSummary, Message
from forum.domain.repository import MessageRepository
from forum.domain.value import MessageId, UserId
from forum.persistence.mappers import message_to_dict, row_to_message
from forum.persistence.tables import messages_table

m = messages_table


def _visible_to(viewer_id: UserId):
    return and_(
        m.c.is_deleted.is_(False),
        not_(m.c.deleted_by.contains([viewer_id])),
    )


def _between(a: UserId, b: UserId):
    return or_(
        and_(m.c.sender_id == a, m.c.receiver_id == b),
        and_(m.c.sender_id == b, m.c.receiver_id == a),
    )


class PostgresMessageRepository(MessageRepository):
    """PostgreSQL implementation of MessageRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, message_id: MessageId) -> Optional[Message]:
        """Find a message by ID."""
        stmt = select(m).where(m.c.id == message_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_message(dict(row)) if row else None

    async def save(self, message: Message) -> Message:
        """Save a message (create or update)."""
        existing = await self.find_by_id(message.id)

        message_dict = message_to_dict(message)
        if existing:
            stmt = m.update().where(m.c.id == message.id).values(**message_dict)
        else:
            stmt = m.insert().values(**message_dict)
        await self.session.execute(stmt)

        await self.session.flush()
        return message

    async def hide_for(
        self, message_id: MessageId, user_id: UserId
    ) -> Optional[Message]:
        """Append the user to ``deleted_by`` with a single UPDATE.

        Right-hand column references read the row being updated, so two
        parties hiding concurrently both land and the second sets
        ``is_deleted``.
        """
        marked_sender = or_(
            m.c.sender_id == user_id, m.c.sender_id == any_(m.c.deleted_by)
        )
        marked_receiver = or_(
            m.c.receiver_id == user_id, m.c.receiver_id == any_(m.c.deleted_by)
        )
        stmt = (
            update(m)
            .where(
                and_(
                    m.c.id == message_id,
                    or_(m.c.sender_id == user_id, m.c.receiver_id == user_id),
                    not_(m.c.deleted_by.contains([user_id])),
                )
            )
            .values(
                deleted_by=func.array_append(
                    m.c.deleted_by,
                    literal(user_id, UUID),
                    type_=m.c.deleted_by.type,
                ),
                is_deleted=and_(marked_sender, marked_receiver),
            )
            .returning(*m.c)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        await self.session.flush()
        return row_to_message(dict(row)) if row else None

    async def find_conversation(
        self,
        viewer_id: UserId,
        counterpart_id: UserId,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Message]:
        """List messages between two users, newest first."""
        stmt = (
            select(m)
            .where(and_(_between(viewer_id, counterpart_id), _visible_to(viewer_id)))
            .order_by(m.c.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [row_to_message(dict(row)) for row in result.mappings().all()]

    async def count_conversation(
        self, viewer_id: UserId, counterpart_id: UserId
    ) -> int:
        """Count messages between two users visible to the viewer."""
        stmt = (
            select(func.count())
            .select_from(m)
            .where(and_(_between(viewer_id, counterpart_id), _visible_to(viewer_id)))
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def mark_conversation_read(
        self, sender_id: UserId, receiver_id: UserId, read_at: datetime
    ) -> int:
        """Mark every unread message from sender to receiver read."""
        stmt = (
            update(m)
            .where(
                and_(
                    m.c.sender_id == sender_id,
                    m.c.receiver_id == receiver_id,
                    m.c.read.is_(False),
                    m.c.is_deleted.is_(False),
                )
            )
            .values(read=True, read_at=read_at)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount  # type: ignore[attr-defined]

    async def mark_read(
        self, message_id: MessageId, receiver_id: UserId, read_at: datetime
    ) -> Optional[Message]:
        """Mark one message read, scoped to its receiver."""
        stmt = (
            update(m)
            .where(
                and_(
                    m.c.id == message_id,
                    m.c.receiver_id == receiver_id,
                    _visible_to(receiver_id),
                )
            )
            .values(read=True, read_at=func.coalesce(m.c.read_at, read_at))
            .returning(*m.c)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        await self.session.flush()
        return row_to_message(dict(row)) if row else None

    async def count_unread(self, receiver_id: UserId) -> int:
        """Count unread, non-deleted messages addressed to a user."""
        stmt = (
            select(func.count())
            .select_from(m)
            .where(
                and_(
                    m.c.receiver_id == receiver_id,
                    m.c.read.is_(False),
                    _visible_to(receiver_id),
                )
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def find_conversations(self, viewer_id: UserId) -> list[ConversationSummary]:
        """Latest message per counterpart (DISTINCT ON) plus unread tallies."""
        counterpart = case(
            (m.c.sender_id == viewer_id, m.c.receiver_id), else_=m.c.sender_id
        ).label("counterpart_id")

        latest = (
            select(m, counterpart)
            .where(
                and_(
                    or_(m.c.sender_id == viewer_id, m.c.receiver_id == viewer_id),
                    _visible_to(viewer_id),
                )
            )
            .order_by(counterpart, m.c.created_at.desc())
            .distinct(counterpart)
        )
        latest_rows = (await self.session.execute(latest)).mappings().all()

        unread = (
            select(m.c.sender_id, func.count().label("unread_count"))
            .where(
                and_(
                    m.c.receiver_id == viewer_id,
                    m.c.read.is_(False),
                    _visible_to(viewer_id),
                )
            )
            .group_by(m.c.sender_id)
        )
        unread_by_sender = {
            row.sender_id: row.unread_count
            for row in (await self.session.execute(unread)).all()
        }

        summaries = [
            ConversationSummary(
                counterpart_id=UserId(row["counterpart_id"]),
                last_message=row_to_message(dict(row)),
                unread_count=unread_by_sender.get(row["counterpart_id"], 0),
            )
            for row in latest_rows
        ]
        summaries.sort(key=lambda s: s.last_message.created_at, reverse=True)
        return summaries
