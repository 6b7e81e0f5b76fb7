"""Tests for the yt-dlp + discord.py AudioEngine composition."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from discord_music_queue.domain.music.entities import SearchResult
from discord_music_queue.infrastructure.audio.ytdlp_engine import YtDlpDiscordAudioEngine
from discord_music_queue.infrastructure.audio.ytdlp_resolver import YtDlpResolver
from discord_music_queue.infrastructure.discord.adapters.voice_adapter import DiscordVoiceAdapter

GUILD_ID = 111111111111111111
CHANNEL_ID = 222222222222222222


@pytest.fixture
def resolver():
    mock = MagicMock(spec=YtDlpResolver)
    mock.resolve = AsyncMock(return_value=SearchResult())
    mock.stream_url_for = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def voice():
    mock = MagicMock(spec=DiscordVoiceAdapter)
    mock.connect = AsyncMock()
    mock.disconnect = AsyncMock()
    return mock


@pytest.fixture
def engine(resolver, voice):
    return YtDlpDiscordAudioEngine(MagicMock(), resolver=resolver, voice=voice)


class TestYtDlpDiscordAudioEngine:
    @pytest.mark.asyncio
    async def test_search_delegates_to_resolver(self, engine, resolver, sample_track):
        resolver.resolve.return_value = SearchResult(tracks=(sample_track,))

        result = await engine.search("query", requested_by="alice")

        resolver.resolve.assert_awaited_once_with("query", requested_by="alice")
        assert result.first == sample_track

    @pytest.mark.asyncio
    async def test_connect_and_disconnect(self, engine, voice):
        await engine.connect(GUILD_ID, CHANNEL_ID)
        await engine.disconnect(GUILD_ID)

        voice.connect.assert_awaited_once_with(GUILD_ID, CHANNEL_ID)
        voice.disconnect.assert_awaited_once_with(GUILD_ID)

    @pytest.mark.asyncio
    async def test_play_with_stream(self, engine, resolver, voice, sample_track):
        resolver.stream_url_for.return_value = "https://stream.url/x"

        await engine.play(GUILD_ID, sample_track)

        voice.play.assert_called_once_with(GUILD_ID, sample_track, "https://stream.url/x")
        voice.skip_unplayable.assert_not_called()

    @pytest.mark.asyncio
    async def test_play_without_stream_skips(self, engine, resolver, voice, sample_track):
        resolver.stream_url_for.return_value = None

        await engine.play(GUILD_ID, sample_track)

        voice.skip_unplayable.assert_called_once_with(GUILD_ID, sample_track)
        voice.play.assert_not_called()

    @pytest.mark.asyncio
    async def test_stop(self, engine, voice):
        await engine.stop(GUILD_ID)
        voice.stop.assert_called_once_with(GUILD_ID)

    def test_current_channel_and_callback(self, engine, voice):
        voice.current_channel_id.return_value = CHANNEL_ID
        callback = AsyncMock()

        assert engine.current_channel_id(GUILD_ID) == CHANNEL_ID
        engine.set_on_track_end(callback)

        voice.set_on_track_end.assert_called_once_with(callback)

    def test_builds_default_collaborators(self):
        engine = YtDlpDiscordAudioEngine(MagicMock(), search_limit=2)

        assert isinstance(engine._resolver, YtDlpResolver)
        assert isinstance(engine._voice, DiscordVoiceAdapter)
