"""AudioEngine backed by yt-dlp for lookups and discord.py voice for playback."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from discord_music_queue.application.interfaces.audio_engine import AudioEngine
from discord_music_queue.config.settings import AudioSettings
from discord_music_queue.infrastructure.audio.ytdlp_resolver import DEFAULT_SEARCH_LIMIT, YtDlpResolver
from discord_music_queue.infrastructure.discord.adapters.voice_adapter import DiscordVoiceAdapter

if TYPE_CHECKING:
    import discord

    from ...domain.music.entities import SearchResult, Track

logger = logging.getLogger(__name__)


class YtDlpDiscordAudioEngine(AudioEngine):
    def __init__(
        self,
        bot: discord.Client,
        settings: AudioSettings | None = None,
        *,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
        resolver: YtDlpResolver | None = None,
        voice: DiscordVoiceAdapter | None = None,
    ) -> None:
        settings = settings or AudioSettings()
        self._resolver = resolver or YtDlpResolver(settings, search_limit=search_limit)
        self._voice = voice or DiscordVoiceAdapter(bot, settings)

    async def search(self, query: str, *, requested_by: str | None = None) -> SearchResult:
        return await self._resolver.resolve(query, requested_by=requested_by)

    async def connect(self, session_id: int, voice_target: int) -> None:
        await self._voice.connect(session_id, voice_target)

    async def play(self, session_id: int, track: Track) -> None:
        stream_url = await self._resolver.stream_url_for(track)
        if stream_url is None:
            self._voice.skip_unplayable(session_id, track)
            return
        self._voice.play(session_id, track, stream_url)

    async def stop(self, session_id: int) -> None:
        self._voice.stop(session_id)

    async def disconnect(self, session_id: int) -> None:
        await self._voice.disconnect(session_id)

    def current_channel_id(self, session_id: int) -> int | None:
        return self._voice.current_channel_id(session_id)

    def set_on_track_end(self, callback: Callable[[int], Awaitable[None]]) -> None:
        self._voice.set_on_track_end(callback)
