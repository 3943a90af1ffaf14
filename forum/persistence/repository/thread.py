"""PostgreSQL implementation of Thread repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from forum.domain.model import Thread
from forum.domain.repository import ThreadRepository
from forum.domain.value import ThreadId
from forum.persistence.mappers import row_to_thread, thread_to_dict
from forum.persistence.tables import threads_table


class PostgresThreadRepository(ThreadRepository):
    """PostgreSQL implementation of ThreadRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, thread_id: ThreadId) -> Optional[Thread]:
        """Find a thread by ID."""
        stmt = select(threads_table).where(threads_table.c.id == thread_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_thread(row._asdict()) if row else None

    async def save(self, thread: Thread) -> Thread:
        """Save a thread (create or update).

        Counters and version are left alone on update; they only move
        through the vote ledger.
        """
        thread_dict = thread_to_dict(thread)
        existing = await self.find_by_id(thread.id)

        if existing:
            values = {
                k: v
                for k, v in thread_dict.items()
                if k not in ("id", "upvote_count", "downvote_count", "version")
            }
            stmt = (
                threads_table.update()
                .where(threads_table.c.id == thread.id)
                .values(**values)
            )
        else:
            stmt = threads_table.insert().values(**thread_dict)
        await self.session.execute(stmt)
        await self.session.flush()
        return thread
