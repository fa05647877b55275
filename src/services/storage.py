"""
In-memory message storage shared by every request handler.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Dict, List

from src.core.message import Message

logger = logging.getLogger(__name__)


class MessageNotFoundError(LookupError):
    """Raised when no live message has the requested id."""

    def __init__(self, message_id: int):
        super().__init__("message not found")
        self.message_id = message_id


class MessageStorage:
    """
    Keeps messages in memory, keyed by id.

    One lock guards both the id counter and the map, so ids are handed out
    strictly in order and readers never see a half-applied write. Stored
    messages are frozen, so whatever a caller gets back is a snapshot.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        # dicts keep insertion order, which is also ascending id order
        self._messages: Dict[int, Message] = {}
        self._next_id = 1

    def get_all(self) -> List[Message]:
        """Returns all live messages in creation order."""
        with self._lock:
            return list(self._messages.values())

    def create(self, username: str, content: str) -> Message:
        """Stores a new message and returns it with its id and timestamps."""
        now = datetime.now(timezone.utc)
        with self._lock:
            message = Message(
                id=self._next_id,
                username=username,
                content=content,
                created_at=now,
                updated_at=now,
            )
            self._messages[message.id] = message
            self._next_id += 1

        logger.info("Created message %d from %s", message.id, username)
        return message

    def update(self, message_id: int, content: str) -> Message:
        """Replaces the content of a message and refreshes `updated_at`."""
        with self._lock:
            current = self._messages.get(message_id)
            if current is None:
                raise MessageNotFoundError(message_id)

            # wall clock may step back; updated_at never precedes created_at
            updated_at = max(datetime.now(timezone.utc), current.created_at)
            updated = current.model_copy(update={"content": content, "updated_at": updated_at})
            self._messages[message_id] = updated

        logger.info("Updated message %d", message_id)
        return updated

    def delete(self, message_id: int) -> None:
        with self._lock:
            if self._messages.pop(message_id, None) is None:
                raise MessageNotFoundError(message_id)

        logger.info("Deleted message %d", message_id)

    def count(self) -> int:
        with self._lock:
            return len(self._messages)


# Create a singleton for the running app
message_storage = MessageStorage()
