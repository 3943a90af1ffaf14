"""Comment entity.

Comments belong to a thread and may reply to another comment
(``parent_id``). Like threads, they carry denormalized vote counters.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from forum.domain.model.common import DomainModel
from forum.domain.value import CommentId, ThreadId, UserId


class Comment(DomainModel):
    """Comment entity."""

    id: CommentId
    thread_id: ThreadId
    owner_id: UserId
    body: str = Field(min_length=1, max_length=1000)
    parent_id: Optional[CommentId] = None
    mentions: list[UserId] = Field(default_factory=list)
    upvote_count: int = Field(default=0, ge=0)
    downvote_count: int = Field(default=0, ge=0)
    version: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None
