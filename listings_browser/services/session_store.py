"""In-memory browsing sessions for the listings page."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..core.config import settings
from .carousel import CarouselRegistry
from .storage import SessionStorage
from .window import ViewWindowController


@dataclass
class BrowsingSession:
    """State owned by one visitor tab: storage, window controller and card carousels."""

    session_id: str
    storage: SessionStorage = field(default_factory=SessionStorage)
    carousels: CarouselRegistry = field(default_factory=CarouselRegistry)
    window: ViewWindowController = field(init=False)

    def __post_init__(self) -> None:
        self.window = ViewWindowController(self.storage)

    def close(self) -> None:
        self.carousels.close()


@dataclass
class _SessionEntry:
    session: BrowsingSession
    last_seen: float


class SessionStore:
    """Very small in-memory session registry with TTL eviction."""

    def __init__(self, ttl_seconds: int | None = None) -> None:
        self._ttl = ttl_seconds if ttl_seconds is not None else settings.session_ttl_seconds
        self._sessions: Dict[str, _SessionEntry] = {}

    def get(self, session_id: str) -> Optional[BrowsingSession]:
        self._evict_expired()
        entry = self._sessions.get(session_id)
        if not entry:
            return None
        entry.last_seen = time.time()
        return entry.session

    def get_or_create(self, session_id: str) -> BrowsingSession:
        session = self.get(session_id)
        if session is None:
            session = BrowsingSession(session_id=session_id)
            self.save(session)
        return session

    def save(self, session: BrowsingSession) -> None:
        self._evict_expired()
        self._sessions[session.session_id] = _SessionEntry(session=session, last_seen=time.time())

    def clear(self, session_id: str) -> None:
        entry = self._sessions.pop(session_id, None)
        if entry is not None:
            entry.session.close()

    def _evict_expired(self) -> None:
        now = time.time()
        expired = [key for key, entry in self._sessions.items() if now - entry.last_seen > self._ttl]
        for key in expired:
            self.clear(key)

    def __len__(self) -> int:
        return len(self._sessions)


session_store = SessionStore()
