"""PostgreSQL implementation of Vote repository."""

from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import Table, and_, delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from forum.domain.model import Vote, VoteLedger, VoteTransition
from forum.domain.repository import VoteRepository
from forum.domain.value import UserId, VotableType, VoteTransitionKind
from forum.persistence.mappers import row_to_vote, vote_to_dict
from forum.persistence.tables import comments_table, threads_table, votes_table


def _entity_table(votable_type: VotableType) -> Table:
    return threads_table if votable_type == VotableType.THREAD else comments_table


class PostgresVoteRepository(VoteRepository):
    """PostgreSQL implementation of VoteRepository.

    Counters live on the thread/comment row next to a ``version``
    column. ``commit`` bumps the version with a conditional UPDATE and
    applies the vote record change inside the same SAVEPOINT, so a lost
    race leaves nothing behind.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_user_and_votable(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_id: UUID,
    ) -> Optional[Vote]:
        """Find a user's vote on a specific item."""
        stmt = select(votes_table).where(
            and_(
                votes_table.c.user_id == user_id,
                votes_table.c.votable_type == votable_type.value,
                votes_table.c.votable_id == votable_id,
            )
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_vote(row._asdict()) if row else None

    async def find_by_votable(
        self,
        votable_type: VotableType,
        votable_id: UUID,
    ) -> list[Vote]:
        """Find all votes on a specific item."""
        stmt = select(votes_table).where(
            and_(
                votes_table.c.votable_type == votable_type.value,
                votes_table.c.votable_id == votable_id,
            )
        )
        result = await self.session.execute(stmt)
        return [row_to_vote(row._asdict()) for row in result.fetchall()]

    async def find_by_user_and_votables(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_ids: Sequence[UUID],
    ) -> list[Vote]:
        """Find a user's votes on multiple items (batch query)."""
        if not votable_ids:
            return []

        stmt = select(votes_table).where(
            and_(
                votes_table.c.user_id == user_id,
                votes_table.c.votable_type == votable_type.value,
                votes_table.c.votable_id.in_(votable_ids),
            )
        )
        result = await self.session.execute(stmt)
        rows = result.fetchall()
        return [row_to_vote(row._asdict()) for row in rows]

    async def load_ledger(
        self,
        votable_type: VotableType,
        votable_id: UUID,
        user_id: UserId,
    ) -> Optional[VoteLedger]:
        """Read counters, version and the user's vote in two queries."""
        if votable_type == VotableType.THREAD:
            stmt = select(
                threads_table.c.owner_id,
                threads_table.c.id.label("thread_id"),
                threads_table.c.title,
                threads_table.c.upvote_count,
                threads_table.c.downvote_count,
                threads_table.c.version,
            ).where(threads_table.c.id == votable_id)
        else:
            stmt = select(
                comments_table.c.owner_id,
                comments_table.c.thread_id,
                comments_table.c.upvote_count,
                comments_table.c.downvote_count,
                comments_table.c.version,
            ).where(comments_table.c.id == votable_id)

        result = await self.session.execute(stmt)
        row = result.mappings().first()
        if row is None:
            return None

        current = await self.find_by_user_and_votable(user_id, votable_type, votable_id)
        return VoteLedger(
            votable_type=votable_type,
            votable_id=votable_id,
            owner_id=UserId(row["owner_id"]),
            thread_id=row["thread_id"],
            title=row.get("title"),
            upvote_count=row["upvote_count"],
            downvote_count=row["downvote_count"],
            version=row["version"],
            current_vote=current,
        )

    async def commit(self, ledger: VoteLedger, transition: VoteTransition) -> bool:
        """Apply the transition under an optimistic version check."""
        entity = _entity_table(ledger.votable_type)
        vote = transition.vote

        try:
            async with self.session.begin_nested():
                bumped = await self.session.execute(
                    update(entity)
                    .where(
                        and_(
                            entity.c.id == ledger.votable_id,
                            entity.c.version == ledger.version,
                        )
                    )
                    .values(
                        upvote_count=entity.c.upvote_count + transition.upvote_delta,
                        downvote_count=entity.c.downvote_count
                        + transition.downvote_delta,
                        version=entity.c.version + 1,
                    )
                )
                if bumped.rowcount == 0:  # type: ignore[attr-defined]
                    return False

                if transition.kind == VoteTransitionKind.CAST:
                    await self.session.execute(
                        insert(votes_table).values(**vote_to_dict(vote))
                    )
                elif transition.kind == VoteTransitionKind.RETRACT:
                    await self.session.execute(
                        delete(votes_table).where(votes_table.c.id == vote.id)
                    )
                else:
                    await self.session.execute(
                        update(votes_table)
                        .where(votes_table.c.id == vote.id)
                        .values(
                            direction=vote.direction.value,
                            updated_at=vote.updated_at,
                        )
                    )
        except IntegrityError:
            # Duplicate (user, votable) from a concurrent first vote
            return False

        await self.session.flush()
        return True
