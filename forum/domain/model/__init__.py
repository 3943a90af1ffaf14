"""Domain model entities for the forum."""

from forum.domain.model.comment import Comment
from forum.domain.model.event import (
    CommentedEvent,
    DomainEvent,
    MentionedEvent,
    MessageSentEvent,
    UpvotedEvent,
)
from forum.domain.model.message import ConversationSummary, Message
from forum.domain.model.notification import Notification
from forum.domain.model.thread import Thread
from forum.domain.model.user import User
from forum.domain.model.vote import Vote, VoteLedger, VoteOutcome, VoteTransition

__all__ = [
    "User",
    "Thread",
    "Comment",
    "Vote",
    "VoteLedger",
    "VoteTransition",
    "VoteOutcome",
    "Notification",
    "Message",
    "ConversationSummary",
    "DomainEvent",
    "UpvotedEvent",
    "CommentedEvent",
    "MentionedEvent",
    "MessageSentEvent",
]
