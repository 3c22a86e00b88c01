"""In-memory store for enrichment sessions with idle expiry."""

import asyncio
import logging
import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from proposal_engine.core.config import Settings, get_settings
from proposal_engine.models import (
    ConversationTurn,
    EnrichmentSession,
    MissingOrWeakItem,
    ProposalDraft,
    SessionStats,
)

logger = logging.getLogger(__name__)

SESSION_ID_PREFIX = "enrich_"

_SESSION_ID_PATTERN = re.compile(rf"^{SESSION_ID_PREFIX}\S+\Z")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """
    Holds in-flight enrichment conversations keyed by session id.

    Sessions expire after ``ttl`` without a successful lookup. Expiry is
    enforced lazily on ``get`` and eagerly by a background sweep task.
    All mutation happens on the event loop, so no thread lock is needed;
    ``lock()`` hands out a per-session ``asyncio.Lock`` for callers that
    must serialize a read-modify-write across an await.
    """

    def __init__(
        self,
        ttl: timedelta = timedelta(minutes=30),
        cleanup_interval: timedelta = timedelta(minutes=5),
        clock: Clock = utc_now
    ):
        self.ttl = ttl
        self.cleanup_interval = cleanup_interval
        self._clock = clock
        self._sessions: Dict[str, EnrichmentSession] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._sweeper: Optional[asyncio.Task] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SessionStore":
        settings = settings or get_settings()
        return cls(
            ttl=timedelta(minutes=settings.SESSION_TTL_MINUTES),
            cleanup_interval=timedelta(minutes=settings.SESSION_CLEANUP_INTERVAL_MINUTES),
        )

    @property
    def ttl_minutes(self) -> float:
        return self.ttl.total_seconds() / 60

    def __len__(self) -> int:
        return len(self._sessions)

    # ===========================================
    # Session lifecycle
    # ===========================================

    @staticmethod
    def is_valid_session_id(value: str) -> bool:
        """Check that a caller-supplied id has the shape this store issues."""
        return isinstance(value, str) and bool(_SESSION_ID_PATTERN.match(value))

    def create(
        self,
        partial_content: ProposalDraft,
        gaps: List[MissingOrWeakItem],
        first_assistant_message: str
    ) -> str:
        """
        Create a session seeded with the first assistant reply.

        Returns:
            New session id
        """
        session_id = f"{SESSION_ID_PREFIX}{secrets.token_urlsafe(16)}"
        now = self._clock()
        self._sessions[session_id] = EnrichmentSession(
            session_id=session_id,
            partial_content=partial_content,
            gaps=list(gaps),
            transcript=[ConversationTurn.assistant(first_assistant_message)],
            created_at=now,
            last_accessed_at=now,
        )
        logger.info(f"Created enrichment session {session_id} ({len(self._sessions)} active)")
        return session_id

    def _is_expired(self, session: EnrichmentSession, now: datetime) -> bool:
        return now - session.last_accessed_at > self.ttl

    def get(self, session_id: str) -> Optional[EnrichmentSession]:
        """
        Look up a session and refresh its idle timer.

        Returns a copy, so callers cannot change stored state except through
        ``append_turns``. Expired sessions are deleted and reported as absent.
        """
        session = self._sessions.get(session_id)
        if session is None:
            self._locks.pop(session_id, None)
            return None

        now = self._clock()
        if self._is_expired(session, now):
            logger.info(f"Enrichment session {session_id} expired")
            self.delete(session_id)
            return None

        session.last_accessed_at = now
        return session.model_copy(deep=True)

    def append_turns(self, session_id: str, *turns: ConversationTurn) -> None:
        """Extend a session's transcript. Raises KeyError for unknown ids."""
        session = self._sessions[session_id]
        session.transcript.extend(turns)
        session.last_accessed_at = self._clock()

    def delete(self, session_id: str) -> bool:
        self._locks.pop(session_id, None)
        removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info(f"Deleted enrichment session {session_id}")
        return removed

    def clear(self) -> None:
        self._sessions.clear()
        self._locks.clear()

    def lock(self, session_id: str) -> asyncio.Lock:
        """Per-session lock serializing concurrent continuations."""
        if session_id not in self._locks:
            self._locks[session_id] = asyncio.Lock()
        return self._locks[session_id]

    # ===========================================
    # Expiry and stats
    # ===========================================

    def sweep_expired(self) -> int:
        """Delete every expired session and return how many were removed."""
        now = self._clock()
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if self._is_expired(session, now)
        ]
        for session_id in expired:
            self.delete(session_id)

        if expired:
            logger.info(f"Swept {len(expired)} expired session(s), {len(self._sessions)} active")
        return len(expired)

    def stats(self) -> SessionStats:
        return SessionStats(
            active_sessions=len(self._sessions),
            session_ttl_minutes=self.ttl_minutes,
        )

    async def _sweep_forever(self) -> None:
        interval = self.cleanup_interval.total_seconds()
        while True:
            await asyncio.sleep(interval)
            try:
                self.sweep_expired()
            except Exception as e:
                logger.error(f"Session sweep failed: {e}")

    def start_sweeper(self) -> None:
        """Start the periodic sweep task on the running event loop."""
        if self._sweeper is not None and not self._sweeper.done():
            return
        self._sweeper = asyncio.create_task(self._sweep_forever())
        logger.info(
            f"Session sweeper started (every {self.cleanup_interval.total_seconds() / 60:g} min, "
            f"TTL {self.ttl_minutes:g} min)"
        )

    async def stop_sweeper(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None
        logger.info("Session sweeper stopped")
