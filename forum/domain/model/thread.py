"""Thread entity.

Threads are the top-level discussion items (job posts, questions, ...).
Their CRUD lifecycle is owned elsewhere; the core reads ownership and
title, and maintains the vote counters.
"""

from datetime import datetime

from pydantic import Field

from forum.domain.model.common import DomainModel
from forum.domain.value import ThreadId, UserId


class Thread(DomainModel):
    """Thread entity.

    ``upvote_count``/``downvote_count`` are a cached derivation of the
    thread's vote records. ``version`` is bumped on every counter change
    and guards concurrent vote application.
    """

    id: ThreadId
    title: str = Field(min_length=1, max_length=100)
    owner_id: UserId
    upvote_count: int = Field(default=0, ge=0)
    downvote_count: int = Field(default=0, ge=0)
    comment_count: int = Field(default=0, ge=0)
    is_locked: bool = False
    version: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=datetime.now)
