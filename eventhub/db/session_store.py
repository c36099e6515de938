# eventhub/db/session_store.py
import logging
import secrets
import threading
import time
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class SessionStore:
    """
    In-process login sessions keyed by an opaque session id.

    Owned by the event store and handed to the auth layer, which only needs to
    create, look up and destroy sessions. Expired entries are dropped lazily on
    lookup, and a full sweep runs at most once per ``check_period`` seconds.
    """

    def __init__(
        self,
        ttl_seconds: int,
        check_period: int = 86400,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self.check_period = check_period
        self._clock = clock
        self._sessions: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()
        self._last_prune = clock()

    def create(self, user_id: int) -> str:
        sid = secrets.token_urlsafe(24)
        with self._lock:
            self._sessions[sid] = (user_id, self._clock() + self.ttl_seconds)
        self._maybe_prune()
        return sid

    def get(self, sid: str) -> Optional[int]:
        self._maybe_prune()
        with self._lock:
            entry = self._sessions.get(sid)
            if entry is None:
                return None
            user_id, expires_at = entry
            if expires_at <= self._clock():
                del self._sessions[sid]
                return None
            return user_id

    def destroy(self, sid: str) -> bool:
        with self._lock:
            return self._sessions.pop(sid, None) is not None

    def prune(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [sid for sid, (_, exp) in self._sessions.items() if exp <= now]
            for sid in expired:
                del self._sessions[sid]
            self._last_prune = now
        if expired:
            logger.debug(f"Pruned {len(expired)} expired sessions")
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def _maybe_prune(self) -> None:
        if self._clock() - self._last_prune >= self.check_period:
            self.prune()

    def __len__(self) -> int:
        return len(self._sessions)
