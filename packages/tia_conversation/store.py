from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Tuple

from packages.tia_core.logging import get_logger
from .dto import ConversationState

logger = get_logger("tia.conversation.store")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversationStore(ABC):
    """
    Token -> ConversationState mapping owned by the caller.
    """
    @abstractmethod
    def get(self, token: str) -> Optional[ConversationState]:
        pass

    @abstractmethod
    def save(self, token: str, state: ConversationState) -> None:
        pass

    @abstractmethod
    def delete(self, token: str) -> None:
        pass

    @abstractmethod
    def purge_expired(self) -> int:
        """Evict expired entries. Returns the number removed."""
        pass


class MemoryConversationStore(ConversationStore):
    """
    Process-local store.
    With ttl_sec=None entries live for the life of the process; otherwise an
    entry idle longer than ttl_sec is evicted on read and by purge_expired().
    """

    def __init__(self, ttl_sec: Optional[int] = None, clock: Callable[[], datetime] = _utcnow):
        self.ttl_sec = ttl_sec
        self.clock = clock
        self._store: Dict[str, Tuple[ConversationState, datetime]] = {}

    def _expired(self, touched_at: datetime, now: datetime) -> bool:
        return self.ttl_sec is not None and now - touched_at > timedelta(seconds=self.ttl_sec)

    def get(self, token: str) -> Optional[ConversationState]:
        entry = self._store.get(token)
        if entry is None:
            return None
        state, touched_at = entry
        if self._expired(touched_at, self.clock()):
            del self._store[token]
            logger.debug(f"Conversation {token} expired")
            return None
        return state

    def save(self, token: str, state: ConversationState) -> None:
        self._store[token] = (state, self.clock())

    def delete(self, token: str) -> None:
        self._store.pop(token, None)

    def purge_expired(self) -> int:
        now = self.clock()
        expired = [t for t, (_, touched_at) in self._store.items() if self._expired(touched_at, now)]
        for token in expired:
            del self._store[token]
        if expired:
            logger.info(f"Purged {len(expired)} expired conversations")
        return len(expired)

    def __len__(self) -> int:
        return len(self._store)
