"""SQLAlchemy table definitions for the forum core.

Tables are used through SQLAlchemy Core with manual mappers.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Enum,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import ARRAY, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

VOTABLE_TYPES = ("thread", "comment")
VOTE_DIRECTIONS = ("up", "down")
NOTIFICATION_TYPES = (
    "thread_reply",
    "comment_reply",
    "thread_upvote",
    "comment_upvote",
    "thread_bookmark",
    "new_message",
    "thread_mention",
    "comment_mention",
    "system",
    "newsletter",
)
MESSAGE_TYPES = ("text", "file", "image")

# ============================================================================
# USERS TABLE (profile and notification preferences)
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("username", String(50), nullable=False),
    Column("name", String(50), nullable=False),
    Column("email", String(255), nullable=True),
    Column("avatar_url", Text, nullable=True),
    Column("pref_newsletter", Boolean, nullable=False, server_default="true"),
    Column("pref_chat", Boolean, nullable=False, server_default="true"),
    Column("pref_replies", Boolean, nullable=False, server_default="true"),
    Column("pref_mentions", Boolean, nullable=False, server_default="true"),
    Column("is_active", Boolean, nullable=False, server_default="true"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_users_username", users_table.c.username, unique=True)

# ============================================================================
# THREADS TABLE
# ============================================================================
threads_table = Table(
    "threads",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("title", String(100), nullable=False),
    Column(
        "owner_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    Column("upvote_count", Integer, nullable=False, server_default="0"),
    Column("downvote_count", Integer, nullable=False, server_default="0"),
    Column("comment_count", Integer, nullable=False, server_default="0"),
    Column("is_locked", Boolean, nullable=False, server_default="false"),
    # Bumped on every counter change; guards concurrent vote application
    Column("version", Integer, nullable=False, server_default="0"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("upvote_count >= 0", name="threads_upvote_count_non_negative"),
    CheckConstraint("downvote_count >= 0", name="threads_downvote_count_non_negative"),
)

Index("idx_threads_owner_id", threads_table.c.owner_id)
Index("idx_threads_created_at", threads_table.c.created_at.desc())

# ============================================================================
# COMMENTS TABLE
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "thread_id", UUID, ForeignKey("threads.id", ondelete="CASCADE"), nullable=False
    ),
    Column(
        "owner_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    Column("body", Text, nullable=False),
    Column(
        "parent_id", UUID, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    ),
    Column("mentions", ARRAY(UUID), nullable=False, server_default="{}"),
    Column("upvote_count", Integer, nullable=False, server_default="0"),
    Column("downvote_count", Integer, nullable=False, server_default="0"),
    Column("version", Integer, nullable=False, server_default="0"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("upvote_count >= 0", name="comments_upvote_count_non_negative"),
    CheckConstraint(
        "downvote_count >= 0", name="comments_downvote_count_non_negative"
    ),
)

Index("idx_comments_thread_id", comments_table.c.thread_id)
Index("idx_comments_parent_id", comments_table.c.parent_id)
Index("idx_comments_owner_id", comments_table.c.owner_id)

# ============================================================================
# VOTES TABLE (one record per user per votable)
# ============================================================================
votes_table = Table(
    "votes",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column(
        "votable_type",
        Enum(*VOTABLE_TYPES, name="votable_type", create_type=False),
        nullable=False,
    ),
    Column("votable_id", UUID, nullable=False),
    Column(
        "direction",
        Enum(*VOTE_DIRECTIONS, name="vote_direction", create_type=False),
        nullable=False,
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("user_id", "votable_type", "votable_id", name="unique_vote"),
)

Index("idx_votes_user_id", votes_table.c.user_id)
Index("idx_votes_votable", votes_table.c.votable_type, votes_table.c.votable_id)

# ============================================================================
# NOTIFICATIONS TABLE
# ============================================================================
notifications_table = Table(
    "notifications",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "recipient_id",
        UUID,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "type",
        Enum(*NOTIFICATION_TYPES, name="notification_type", create_type=False),
        nullable=False,
    ),
    Column("title", String(100), nullable=False),
    Column("body", String(500), nullable=False),
    Column("thread_id", UUID, nullable=True),
    Column("comment_id", UUID, nullable=True),
    Column("message_id", UUID, nullable=True),
    Column("actor_id", UUID, nullable=True),
    Column("action_url", Text, nullable=True),
    Column("read", Boolean, nullable=False, server_default="false"),
    Column("read_at", TIMESTAMP(timezone=True), nullable=True),
    Column("email_sent", Boolean, nullable=False, server_default="false"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index(
    "idx_notifications_recipient_created",
    notifications_table.c.recipient_id,
    notifications_table.c.created_at.desc(),
)
Index(
    "idx_notifications_recipient_read",
    notifications_table.c.recipient_id,
    notifications_table.c.read,
)
# Retention sweep
Index("idx_notifications_created_at", notifications_table.c.created_at)

# ============================================================================
# MESSAGES TABLE
# ============================================================================
messages_table = Table(
    "messages",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "sender_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    Column(
        "receiver_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    Column("content", Text, nullable=False),
    Column(
        "thread_id", UUID, ForeignKey("threads.id", ondelete="SET NULL"), nullable=True
    ),
    Column(
        "message_type",
        Enum(*MESSAGE_TYPES, name="message_type", create_type=False),
        nullable=False,
        server_default="text",
    ),
    Column("read", Boolean, nullable=False, server_default="false"),
    Column("read_at", TIMESTAMP(timezone=True), nullable=True),
    Column("deleted_by", ARRAY(UUID), nullable=False, server_default="{}"),
    Column("is_deleted", Boolean, nullable=False, server_default="false"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index(
    "idx_messages_pair_created",
    messages_table.c.sender_id,
    messages_table.c.receiver_id,
    messages_table.c.created_at.desc(),
)
Index(
    "idx_messages_receiver_read",
    messages_table.c.receiver_id,
    messages_table.c.read,
)
