"""
Unit Tests for SessionRegistry and SessionAnnouncer

Tests for:
- One manager per session id
- delete / release semantics
- stop_all on shutdown
- Announcer message formatting
"""

from unittest.mock import MagicMock

import pytest

from discord_music_queue.application.interfaces.notifier import Notifier
from discord_music_queue.application.services.announcer import SessionAnnouncer
from discord_music_queue.domain.music.events import TrackQueued, TrackStarted
from discord_music_queue.domain.shared.messages import DiscordUIMessages

GUILD_ID = 987654321
OTHER_GUILD_ID = 123456789
VOICE_CHANNEL_ID = 111222333


class TestSessionRegistry:
    """Tests for the session registry."""

    def test_registers_track_end_callback(self, registry, audio_engine):
        audio_engine.set_on_track_end.assert_called_once()

    def test_get_or_create_returns_same_manager(self, registry):
        first = registry.get_or_create(GUILD_ID)
        assert registry.get_or_create(GUILD_ID) is first
        assert len(registry) == 1
        assert GUILD_ID in registry

    def test_get_unknown_returns_none(self, registry):
        assert registry.get(GUILD_ID) is None

    def test_sessions_are_independent(self, registry):
        first = registry.get_or_create(GUILD_ID)
        second = registry.get_or_create(OTHER_GUILD_ID)

        assert first is not second
        assert sorted(registry.session_ids()) == sorted([GUILD_ID, OTHER_GUILD_ID])
        assert set(registry) == {first, second}

    def test_observers_only_attach_on_creation(self, registry):
        observer = MagicMock()
        manager = registry.get_or_create(GUILD_ID, observers=[observer])
        registry.get_or_create(GUILD_ID, observers=[MagicMock()])

        assert manager.observers == (observer,)

    def test_delete(self, registry):
        manager = registry.get_or_create(GUILD_ID)

        assert registry.delete(GUILD_ID) is True
        assert registry.delete(GUILD_ID) is False
        assert manager.is_detached
        assert GUILD_ID not in registry

    def test_recreated_session_shares_lock(self, registry):
        old = registry.get_or_create(GUILD_ID)
        registry.delete(GUILD_ID)
        new = registry.get_or_create(GUILD_ID)

        assert new is not old
        assert new._lock is old._lock

    def test_release_ignores_replaced_manager(self, registry):
        old = registry.get_or_create(GUILD_ID)
        registry.delete(GUILD_ID)
        new = registry.get_or_create(GUILD_ID)

        registry.release(old)

        assert registry.get(GUILD_ID) is new
        assert not new.is_detached

    @pytest.mark.asyncio
    async def test_stop_all_disconnects_every_session(self, registry, audio_engine, make_track):
        for guild_id in (GUILD_ID, OTHER_GUILD_ID):
            await registry.get_or_create(guild_id).enqueue_track(make_track(), VOICE_CHANNEL_ID)

        stopped = await registry.stop_all()

        assert stopped == 2
        assert len(registry) == 0
        assert audio_engine.disconnect.await_count == 2

    @pytest.mark.asyncio
    async def test_stop_all_continues_after_failure(self, registry, audio_engine, make_track):
        for guild_id in (GUILD_ID, OTHER_GUILD_ID):
            await registry.get_or_create(guild_id).enqueue_track(make_track(), VOICE_CHANNEL_ID)
        audio_engine.disconnect.side_effect = [RuntimeError("gone"), None]

        await registry.stop_all()

        assert len(registry) == 0


class TestSessionAnnouncer:
    """Tests for turning session events into channel messages."""

    @pytest.fixture
    def notifier(self):
        return MagicMock(spec=Notifier)

    def test_track_started(self, notifier, sample_track):
        SessionAnnouncer(notifier)(TrackStarted(session_id=GUILD_ID, track=sample_track))

        notifier.send.assert_called_once_with(
            DiscordUIMessages.NOW_PLAYING.format(
                title="Test Track", duration="3:00", url=sample_track.url
            )
        )

    def test_track_queued(self, notifier, sample_track):
        SessionAnnouncer(notifier)(TrackQueued(session_id=GUILD_ID, track=sample_track, position=2))

        notifier.send.assert_called_once_with("⏱ | **Test Track** queued at index #2")
