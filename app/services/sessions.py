"""Client session registry."""

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import uuid4

from app.domain.state import AppState
from app.ports.store import DocumentStore
from app.services.library import LibrarySync
from app.services.view import ViewController

logger = logging.getLogger(__name__)


@dataclass
class ClientSession:
    """State, view controller and sync layer of one browser."""

    id: str
    state: AppState
    view: ViewController
    library: LibrarySync
    oauth_state: str | None = field(default=None, repr=False)
    last_seen: float = field(default=0.0, repr=False)


class SessionRegistry:
    """
    Maps session ids to live client sessions.

    A new session fetches the book collection once; later requests reuse the
    loaded books. Sessions live in process memory only. The registry holds at
    most ``max_sessions`` entries, dropping the least recently used first, and
    forgets sessions idle for longer than ``idle_seconds``.
    """

    def __init__(
        self,
        store: DocumentStore,
        max_sessions: int = 1000,
        idle_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._max_sessions = max_sessions
        self._idle_seconds = idle_seconds
        self._clock = clock
        self._sessions: OrderedDict[str, ClientSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    async def open(self, session_id: str | None) -> ClientSession:
        """Return the session for ``session_id``, creating and loading a new one if unknown."""
        now = self._clock()
        self._expire(now)

        session = self._sessions.get(session_id) if session_id else None
        if session is not None:
            self._sessions.move_to_end(session.id)
            session.last_seen = now
            return session

        state = AppState()
        session = ClientSession(
            id=uuid4().hex,
            state=state,
            view=ViewController(state),
            library=LibrarySync(self._store, state),
            last_seen=now,
        )
        await session.library.fetch_all_books()
        self._sessions[session.id] = session
        while len(self._sessions) > self._max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info("Evicted client session %s", evicted)
        logger.info("Opened client session %s", session.id)
        return session

    def close(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is not None:
            logger.info("Closed client session %s", session_id)

    def _expire(self, now: float) -> None:
        # Oldest entries sit first, so stop at the first live one.
        while self._sessions:
            session = next(iter(self._sessions.values()))
            if now - session.last_seen <= self._idle_seconds:
                break
            self._sessions.popitem(last=False)
            logger.info("Expired idle client session %s", session.id)
