from unittest.mock import MagicMock

import pytest

# ============================================================================
# Domain Fixtures
# ============================================================================


@pytest.fixture
def make_track():
    """Factory for tracks with sensible defaults."""
    from discord_music_queue.domain.music.entities import Track

    def _make(title: str = "Song", duration: int | None = 180, **kwargs) -> Track:
        slug = title.lower().replace(" ", "-")
        kwargs.setdefault("url", f"https://youtube.com/watch?v={slug}")
        kwargs.setdefault("stream_url", f"https://stream.url/{slug}")
        return Track(title=title, duration_seconds=duration, **kwargs)

    return _make


@pytest.fixture
def sample_track(make_track):
    """A single sample track."""
    return make_track("Test Track", requested_by="tester")


# ============================================================================
# Application Fixtures
# ============================================================================

@pytest.fixture
def audio_engine():
    """AudioEngine double: async methods are AsyncMocks, sync ones plain mocks."""
    from discord_music_queue.application.interfaces.audio_engine import AudioEngine

    engine = MagicMock(spec=AudioEngine)
    engine.current_channel_id.return_value = None
    return engine


@pytest.fixture
def music_settings():
    from discord_music_queue.config.settings import MusicSettings

    return MusicSettings()


@pytest.fixture
def registry(audio_engine, music_settings):
    """Session registry wired to the fake audio engine."""
    from discord_music_queue.application.services.session_registry import SessionRegistry

    return SessionRegistry(audio_engine=audio_engine, settings=music_settings)


@pytest.fixture
def track_end(audio_engine, registry):
    """The callback the registry handed to the audio engine."""
    return audio_engine.set_on_track_end.call_args.args[0]
