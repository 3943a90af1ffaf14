"""In-memory thread repository for testing."""

from typing import Optional

from forum.domain.model.thread import Thread
from forum.domain.repository.thread import ThreadRepository
from forum.domain.value import ThreadId


class InMemoryThreadRepository(ThreadRepository):
    """In-memory implementation of ThreadRepository for testing."""

    def __init__(self) -> None:
        self._threads: dict[ThreadId, Thread] = {}

    async def find_by_id(self, thread_id: ThreadId) -> Optional[Thread]:
        """Find a thread by ID."""
        return self._threads.get(thread_id)

    async def save(self, thread: Thread) -> Thread:
        """Save or update a thread."""
        self._threads[thread.id] = thread
        return thread

    def get(self, thread_id: ThreadId) -> Optional[Thread]:
        return self._threads.get(thread_id)

    def put(self, thread: Thread) -> None:
        self._threads[thread.id] = thread
