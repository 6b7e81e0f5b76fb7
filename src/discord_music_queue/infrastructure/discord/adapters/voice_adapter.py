"""Discord voice connections and FFmpeg playback, keyed by guild id."""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import discord

from discord_music_queue.config.settings import AudioSettings
from discord_music_queue.domain.shared.exceptions import ConnectionFailureError
from discord_music_queue.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....domain.music.entities import Track

logger = logging.getLogger(__name__)

TrackEndCallback = Callable[[int], Awaitable[None]]


class DiscordVoiceAdapter:
    """Owns the bot's voice clients.

    Every ``play`` is tagged with a token; FFmpeg's end-of-stream callback only
    reaches ``on_track_end`` when its token is still the guild's current one,
    so intentional stops and replacements never look like a natural track end.
    """

    def __init__(self, bot: discord.Client, settings: AudioSettings | None = None) -> None:
        self._bot = bot
        self._settings = settings or AudioSettings()
        self._volume = self._settings.default_volume
        self._ffmpeg_options = self._settings.ffmpeg_options
        self._connect_timeout = self._settings.connect_timeout_seconds
        self._on_track_end: TrackEndCallback | None = None
        self._tokens = itertools.count(1)
        self._play_tokens: dict[int, int] = {}
        self._pending_ends: set[asyncio.Task[None]] = set()

    def _get_voice_client(self, guild_id: int) -> discord.VoiceClient | None:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            return None

        vc = guild.voice_client
        return vc if isinstance(vc, discord.VoiceClient) else None

    # === Connection ===

    async def connect(self, guild_id: int, channel_id: int) -> None:
        """Join ``channel_id``, reusing or moving an existing connection.

        Raises:
            ConnectionFailureError: If the guild or channel cannot be joined.
        """
        guild = self._bot.get_guild(guild_id)
        if not guild:
            logger.warning(LogTemplates.GUILD_NOT_FOUND, guild_id)
            raise ConnectionFailureError(channel_id)

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            logger.warning(LogTemplates.CHANNEL_NOT_VOICE, channel_id)
            raise ConnectionFailureError(channel_id)

        vc = self._get_voice_client(guild_id)
        if vc and not vc.is_connected():
            logger.warning(LogTemplates.VOICE_STALE_CLEANUP, guild_id)
            await self.disconnect(guild_id)
            vc = None

        try:
            async with asyncio.timeout(self._connect_timeout):
                if vc is None:
                    await channel.connect(self_deaf=True)
                elif vc.channel is None or vc.channel.id != channel_id:
                    await vc.move_to(channel)
        except TimeoutError as exc:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_id)
            raise ConnectionFailureError(channel_id) from exc
        except discord.Forbidden as exc:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel_id)
            raise ConnectionFailureError(channel_id) from exc
        except discord.ClientException as exc:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, exc)
            raise ConnectionFailureError(channel_id) from exc

        logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild.name)

    async def disconnect(self, guild_id: int) -> None:
        self._play_tokens.pop(guild_id, None)
        vc = self._get_voice_client(guild_id)
        if not vc:
            return

        try:
            await vc.disconnect(force=True)
            logger.info(LogTemplates.VOICE_DISCONNECTED, guild_id)
        except Exception:
            logger.exception(LogTemplates.VOICE_DISCONNECT_FAILED, guild_id)

    def current_channel_id(self, guild_id: int) -> int | None:
        vc = self._get_voice_client(guild_id)
        if vc and vc.is_connected() and vc.channel:
            return vc.channel.id
        return None

    # === Playback ===

    def play(self, guild_id: int, track: Track, stream_url: str) -> None:
        """Replace whatever is playing with ``stream_url``."""
        vc = self._get_voice_client(guild_id)
        if not vc:
            logger.warning(LogTemplates.VOICE_NOT_CONNECTED, guild_id)
            raise ConnectionFailureError(message=ErrorMessages.NOT_CONNECTED.format(guild_id=guild_id))

        token = next(self._tokens)
        self._play_tokens[guild_id] = token

        if vc.is_playing() or vc.is_paused():
            vc.stop()

        source = discord.FFmpegPCMAudio(
            stream_url,
            before_options=self._ffmpeg_options.get("before_options", ""),
            options=self._ffmpeg_options.get("options", ""),
        )
        volume_source = discord.PCMVolumeTransformer(source, volume=self._volume)

        def after_callback(error: Exception | None = None) -> None:
            logger.debug(LogTemplates.TRACK_ENDED, guild_id, error)
            if error:
                logger.warning(LogTemplates.PLAYBACK_ERROR, guild_id, error)

            asyncio.run_coroutine_threadsafe(
                self._handle_track_end(guild_id, token),
                self._bot.loop,
            )

        vc.play(volume_source, after=after_callback)
        logger.debug(LogTemplates.PLAYBACK_STARTED, track.title, guild_id)

    def skip_unplayable(self, guild_id: int, track: Track) -> None:
        """Report an immediate end for a track that cannot be streamed."""
        logger.warning(LogTemplates.TRACK_UNPLAYABLE, track.title, guild_id)
        token = next(self._tokens)
        self._play_tokens[guild_id] = token
        vc = self._get_voice_client(guild_id)
        if vc and (vc.is_playing() or vc.is_paused()):
            vc.stop()
        task = asyncio.get_running_loop().create_task(self._handle_track_end(guild_id, token))
        self._pending_ends.add(task)
        task.add_done_callback(self._pending_ends.discard)

    def stop(self, guild_id: int) -> None:
        self._play_tokens.pop(guild_id, None)
        vc = self._get_voice_client(guild_id)
        if vc and (vc.is_playing() or vc.is_paused()):
            vc.stop()
            logger.info(LogTemplates.PLAYBACK_STOPPED, guild_id)

    def set_on_track_end(self, callback: TrackEndCallback) -> None:
        self._on_track_end = callback

    async def _handle_track_end(self, guild_id: int, token: int) -> None:
        """Runs on the bot loop, scheduled from FFmpeg's player thread."""
        if self._play_tokens.get(guild_id) != token:
            logger.debug(LogTemplates.TRACK_END_SUPERSEDED, guild_id)
            return
        del self._play_tokens[guild_id]

        if self._on_track_end is None:
            logger.warning(LogTemplates.TRACK_END_NO_CALLBACK, guild_id)
            return

        try:
            await self._on_track_end(guild_id)
        except Exception:
            logger.exception(LogTemplates.TRACK_END_CALLBACK_ERROR, guild_id)
