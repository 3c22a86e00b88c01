"""Tests for the enrichment session store."""

import asyncio
import pytest
from datetime import timedelta

from proposal_engine.models import ConversationTurn, MissingOrWeakItem, ProposalDraft, TurnRole
from proposal_engine.services.session_store import SESSION_ID_PREFIX, SessionStore


@pytest.fixture
def draft(incomplete_content) -> ProposalDraft:
    return ProposalDraft.model_validate(incomplete_content)


@pytest.fixture
def gaps():
    return [MissingOrWeakItem(section="pricing", status="missing", reason="No budget discussed")]


class TestSessionLifecycle:
    """Tests for create / get / append / delete."""

    def test_create_seeds_transcript(self, store, draft, gaps):
        """A new session holds the first assistant message."""
        session_id = store.create(draft, gaps, "Which budget range?")

        session = store.get(session_id)
        assert session.session_id == session_id
        assert session.partial_content == draft
        assert session.gaps == gaps
        assert [turn.role for turn in session.transcript] == [TurnRole.ASSISTANT]
        assert session.transcript[0].content == "Which budget range?"

    def test_session_id_format(self, store, draft, gaps):
        session_id = store.create(draft, gaps, "Hi")

        assert session_id.startswith(SESSION_ID_PREFIX)
        assert len(session_id) == len(SESSION_ID_PREFIX) + 22
        assert store.is_valid_session_id(session_id)

    def test_session_ids_are_unique(self, store, draft, gaps):
        ids = {store.create(draft, gaps, "Hi") for _ in range(50)}
        assert len(ids) == 50

    @pytest.mark.parametrize("value", ["", "session_123", "enrich_", "enrich_abc def", "enrich_abc\n", None])
    def test_invalid_session_ids(self, value):
        assert not SessionStore.is_valid_session_id(value)

    @pytest.mark.parametrize("value", ["enrich_abc", "enrich_a.b", "enrich_A-b_9"])
    def test_prefixed_ids_are_well_formed(self, value):
        assert SessionStore.is_valid_session_id(value)

    def test_get_unknown(self, store):
        assert store.get("enrich_unknown") is None

    def test_get_returns_copy(self, store, draft, gaps):
        """Mutating a returned session does not change stored state."""
        session_id = store.create(draft, gaps, "Hi")

        session = store.get(session_id)
        session.transcript.append(ConversationTurn.user("sneaky"))

        assert len(store.get(session_id).transcript) == 1

    def test_append_turns(self, store, draft, gaps):
        session_id = store.create(draft, gaps, "Which budget range?")

        store.append_turns(
            session_id,
            ConversationTurn.user("Around $12k"),
            ConversationTurn.assistant("Thanks, and the timeline?")
        )

        transcript = store.get(session_id).transcript
        assert [turn.role for turn in transcript] == [
            TurnRole.ASSISTANT, TurnRole.USER, TurnRole.ASSISTANT
        ]
        assert transcript[1].content == "Around $12k"

    def test_append_to_unknown_session(self, store):
        with pytest.raises(KeyError):
            store.append_turns("enrich_missing", ConversationTurn.user("hello"))

    def test_delete(self, store, draft, gaps):
        session_id = store.create(draft, gaps, "Hi")

        assert store.delete(session_id)
        assert store.get(session_id) is None
        assert not store.delete(session_id)

    def test_clear(self, store, draft, gaps):
        store.create(draft, gaps, "Hi")
        store.create(draft, gaps, "Hi")

        store.clear()

        assert len(store) == 0


class TestSessionExpiry:
    """Tests for idle TTL enforcement."""

    def test_alive_just_before_ttl(self, store, clock, draft, gaps):
        session_id = store.create(draft, gaps, "Hi")

        clock.advance(minutes=30, seconds=-1)

        assert store.get(session_id) is not None

    def test_alive_exactly_at_ttl(self, store, clock, draft, gaps):
        session_id = store.create(draft, gaps, "Hi")

        clock.advance(minutes=30)

        assert store.get(session_id) is not None

    def test_expired_just_after_ttl(self, store, clock, draft, gaps):
        """An expired session is deleted on lookup."""
        session_id = store.create(draft, gaps, "Hi")

        clock.advance(minutes=30, seconds=1)

        assert store.get(session_id) is None
        assert len(store) == 0

    def test_get_refreshes_idle_timer(self, store, clock, draft, gaps):
        session_id = store.create(draft, gaps, "Hi")

        clock.advance(minutes=20)
        assert store.get(session_id) is not None
        clock.advance(minutes=20)

        assert store.get(session_id) is not None

    def test_sweep_removes_only_expired(self, store, clock, draft, gaps):
        old_id = store.create(draft, gaps, "Old")
        clock.advance(minutes=20)
        new_id = store.create(draft, gaps, "New")
        clock.advance(minutes=11)

        removed = store.sweep_expired()

        assert removed == 1
        assert store.get(old_id) is None
        assert store.get(new_id) is not None

    def test_sweep_with_nothing_expired(self, store, draft, gaps):
        store.create(draft, gaps, "Hi")
        assert store.sweep_expired() == 0


class TestSessionStats:
    """Tests for stats()."""

    def test_stats(self, store, draft, gaps):
        store.create(draft, gaps, "Hi")
        store.create(draft, gaps, "Hi")

        stats = store.stats()

        assert stats.active_sessions == 2
        assert stats.session_ttl_minutes == 30
        assert stats.to_payload() == {"activeSessions": 2, "sessionTtlMinutes": 30}

    def test_from_settings(self, settings):
        store = SessionStore.from_settings(settings)

        assert store.ttl == timedelta(minutes=settings.SESSION_TTL_MINUTES)
        assert store.cleanup_interval == timedelta(minutes=settings.SESSION_CLEANUP_INTERVAL_MINUTES)


class TestSweeper:
    """Tests for the background sweep task."""

    def test_sweeper_removes_expired_sessions(self, clock, draft, gaps):
        store = SessionStore(
            ttl=timedelta(minutes=30),
            cleanup_interval=timedelta(milliseconds=10),
            clock=clock,
        )
        store.create(draft, gaps, "Hi")
        clock.advance(hours=1)

        async def scenario():
            store.start_sweeper()
            await asyncio.sleep(0.05)
            await store.stop_sweeper()

        asyncio.run(scenario())

        assert len(store) == 0

    def test_stop_without_start(self, store):
        asyncio.run(store.stop_sweeper())


class TestSessionLocks:
    """Tests for per-session locks."""

    def test_same_lock_per_session(self, store):
        assert store.lock("enrich_a") is store.lock("enrich_a")
        assert store.lock("enrich_a") is not store.lock("enrich_b")

    def test_delete_drops_lock(self, store, draft, gaps):
        session_id = store.create(draft, gaps, "Hi")
        lock = store.lock(session_id)

        store.delete(session_id)

        assert store.lock(session_id) is not lock
