"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the work queue, audio engine, session registry
and command router. Components are created on-demand and cached for reuse
throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import discord
    from discord.ext.commands import Bot

    from ..application.commands.router import CommandRouter
    from ..application.interfaces.audio_engine import AudioEngine
    from ..application.interfaces.notifier import Notifier
    from ..application.interfaces.permissions import PermissionChecker
    from ..application.services.session_registry import SessionRegistry
    from ..application.services.work_queue import WorkQueue
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed.
    """

    settings: Settings
    _bot: Bot | None = None

    # Executor
    _work_queue: WorkQueue | None = None

    # Infrastructure adapters
    _audio_engine: AudioEngine | None = None
    _permission_checker: PermissionChecker | None = None

    # Application services
    _session_registry: SessionRegistry | None = None
    _command_router: CommandRouter | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Executor ===

    @property
    def work_queue(self) -> WorkQueue:
        """Get the shared work queue that paces outbound channel messages."""
        if self._work_queue is None:
            from ..application.services.work_queue import WorkQueue

            self._work_queue = WorkQueue(self.settings.music.work_queue_interval_seconds)
        return self._work_queue

    # === Infrastructure Adapters ===

    @property
    def audio_engine(self) -> AudioEngine:
        """Get the yt-dlp backed Discord audio engine."""
        if self._audio_engine is None:
            from ..infrastructure.audio.ytdlp_engine import YtDlpDiscordAudioEngine

            self._audio_engine = YtDlpDiscordAudioEngine(
                self.bot,
                self.settings.audio,
                search_limit=self.settings.music.search_limit,
            )
        return self._audio_engine

    @property
    def permission_checker(self) -> PermissionChecker:
        """Get the role-based permission checker."""
        if self._permission_checker is None:
            from ..infrastructure.discord.permissions import DiscordRolePermissionChecker

            self._permission_checker = DiscordRolePermissionChecker()
        return self._permission_checker

    def notifier_for(self, channel: discord.abc.Messageable) -> Notifier:
        """Build a notifier that posts to ``channel`` through the work queue."""
        from ..infrastructure.discord.adapters.channel_notifier import DiscordChannelNotifier

        return DiscordChannelNotifier(channel, self.work_queue)

    # === Application Services ===

    @property
    def session_registry(self) -> SessionRegistry:
        """Get the process-wide session registry."""
        if self._session_registry is None:
            from ..application.services.session_registry import SessionRegistry

            self._session_registry = SessionRegistry(
                audio_engine=self.audio_engine,
                settings=self.settings.music,
            )
        return self._session_registry

    @property
    def command_router(self) -> CommandRouter:
        """Get the music command router."""
        if self._command_router is None:
            from ..application.commands.router import CommandRouter

            self._command_router = CommandRouter(
                audio_engine=self.audio_engine,
                registry=self.session_registry,
                permission_checker=self.permission_checker,
                dj_role=self.settings.music.dj_role,
                queue_command=self.settings.discord.queue_command,
            )
        return self._command_router

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Build the components that must exist before the first command."""
        _ = self.command_router

    async def shutdown(self) -> None:
        """Stop every session, then drain and close the work queue."""
        if self._session_registry is not None:
            try:
                stopped = await self._session_registry.stop_all()
                logger.info(LogTemplates.CONTAINER_SESSIONS_STOPPED, stopped)
            except Exception as exc:
                logger.warning(LogTemplates.CONTAINER_STEP_FAILED, "stopping sessions", exc)

        if self._work_queue is not None:
            try:
                await self._work_queue.close()
            except Exception as exc:
                logger.warning(LogTemplates.CONTAINER_STEP_FAILED, "closing work queue", exc)


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
