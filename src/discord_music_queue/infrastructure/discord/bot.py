"""discord.py client hosting the music cog and owning the container lifecycle."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from discord_music_queue.domain.music.value_objects import ConnectionState
from discord_music_queue.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...config.container import Container
    from ...config.settings import Settings

logger = logging.getLogger(__name__)

MUSIC_COG = "discord_music_queue.infrastructure.discord.cogs.music_cog"
SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def build_intents() -> discord.Intents:
    """Guild text messages with content, plus voice states; no privileged member intent."""
    intents = discord.Intents.none()
    intents.guilds = True
    intents.guild_messages = True
    intents.message_content = True
    intents.voice_states = True
    return intents


class MusicBot(commands.Bot):
    """Bot whose only command surface is the music cog's message listener.

    Prefix-command processing is switched off, so ``!music ...`` never reaches
    the discord.py command parser.
    """

    def __init__(self, container: Container, settings: Settings, **kwargs) -> None:
        discord_settings = settings.discord
        super().__init__(
            command_prefix=discord_settings.command_prefix,
            intents=build_intents(),
            help_command=None,
            owner_ids=set(discord_settings.owner_ids) or None,
            activity=discord.Activity(
                type=discord.ActivityType.listening,
                name=f"{discord_settings.command_prefix}{discord_settings.music_command}",
            ),
            **kwargs,
        )

        self.container = container
        self.settings = settings
        self._stop_requested = asyncio.Event()
        container.set_bot(self)

    async def setup_hook(self) -> None:
        await self.container.initialize()
        await self.load_extension(MUSIC_COG)
        logger.info(LogTemplates.BOT_SETUP_COMPLETE)

    async def on_ready(self) -> None:
        user = self.user
        logger.info(LogTemplates.BOT_READY, user, user.id if user else None)
        logger.info(LogTemplates.BOT_CONNECTED_GUILDS, len(self.guilds))

    async def on_message(self, message: discord.Message) -> None:
        """Listeners still receive every message; only command parsing is skipped."""

    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> None:
        """End a guild's session when the bot is disconnected from voice by someone else."""
        if self.user is None or member.id != self.user.id:
            return
        if before.channel is None or after.channel is not None:
            return

        guild_id = member.guild.id
        manager = self.container.session_registry.get(guild_id)
        if manager is None or manager.get_state().connection_state != ConnectionState.CONNECTED:
            return
        if self.container.audio_engine.current_channel_id(guild_id) is not None:
            return

        logger.info(LogTemplates.BOT_VOICE_REMOVED, guild_id)
        await manager.stop()

    async def close(self) -> None:
        logger.info(LogTemplates.BOT_SHUTTING_DOWN)
        try:
            await self.container.shutdown()
        except Exception:
            logger.exception(LogTemplates.BOT_CONTAINER_SHUTDOWN_ERROR)
        await super().close()

    # === Process lifecycle ===

    def request_shutdown(self) -> None:
        self._stop_requested.set()

    def run_with_graceful_shutdown(self, token: str, *, shutdown_timeout: float = 30.0) -> None:
        """Run until the gateway stops or SIGINT/SIGTERM arrives, then close cleanly."""
        asyncio.run(self.serve(token, shutdown_timeout=shutdown_timeout))

    async def serve(self, token: str, *, shutdown_timeout: float = 30.0) -> None:
        loop = asyncio.get_running_loop()
        installed = []
        for sig in SHUTDOWN_SIGNALS:
            with contextlib.suppress(NotImplementedError):
                loop.add_signal_handler(sig, self.request_shutdown)
                installed.append(sig)

        try:
            async with self:
                await self._run_until_stopped(token, shutdown_timeout)
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)

    async def _run_until_stopped(self, token: str, shutdown_timeout: float) -> None:
        runner = asyncio.create_task(self.start(token), name="discord-gateway")
        stopper = asyncio.create_task(self._stop_requested.wait(), name="shutdown-signal")
        await asyncio.wait({runner, stopper}, return_when=asyncio.FIRST_COMPLETED)
        stopper.cancel()

        if not runner.done():
            try:
                await asyncio.wait_for(self.close(), timeout=shutdown_timeout)
            except TimeoutError:
                logger.warning(LogTemplates.BOT_SHUTDOWN_TIMEOUT, shutdown_timeout)
                runner.cancel()

        with contextlib.suppress(asyncio.CancelledError):
            await runner


def create_bot(container: Container, settings: Settings) -> MusicBot:
    return MusicBot(container=container, settings=settings)
