"""
Command Router

Tokenizes the text after the music command, checks the caller and dispatches
to the matching queue operation. Every handler answers with a CommandReply;
no exception escapes ``CommandRouter.handle``.
"""

from __future__ import annotations

import logging
from enum import Enum, StrEnum
from typing import TYPE_CHECKING, assert_never

from discord_music_queue.application.commands.replies import CommandReply, QueueView
from discord_music_queue.application.interfaces.permissions import WILDCARD_ROLE
from discord_music_queue.application.services.announcer import SessionAnnouncer
from discord_music_queue.domain.music.entities import PlaybackSnapshot
from discord_music_queue.domain.shared.exceptions import (
    ChannelOccupiedError,
    ConnectionFailureError,
    DomainError,
    EmptyQueueError,
    IndexOutOfRangeError,
    InvalidCommandContextError,
    NoResultsFoundError,
    NoVoiceChannelError,
    PermissionDeniedError,
    QueueFullError,
)
from discord_music_queue.domain.shared.messages import DiscordUIMessages, LogTemplates

if TYPE_CHECKING:
    from ..interfaces.audio_engine import AudioEngine
    from ..interfaces.permissions import PermissionChecker
    from ..services.playback_queue import PlaybackQueueManager
    from ..services.session_registry import SessionRegistry
    from .context import CommandContext

logger = logging.getLogger(__name__)


class CommandAction(Enum):
    """What a music sub-command does."""

    PLAY = "play"
    SKIP = "skip"
    STOP = "stop"
    REMOVE = "remove"
    SHOW_QUEUE = "show_queue"


class MusicCommand(StrEnum):
    """Sub-command names accepted after the music command."""

    ADD = "add"
    PLAY = "play"
    SKIP = "skip"
    STOP = "stop"
    DISCONNECT = "disconnect"
    DC = "dc"
    CLEAR = "clear"
    REMOVE = "remove"
    QUEUE = "queue"

    @property
    def action(self) -> CommandAction:
        match self:
            case MusicCommand.ADD | MusicCommand.PLAY:
                return CommandAction.PLAY
            case MusicCommand.SKIP:
                return CommandAction.SKIP
            case MusicCommand.STOP | MusicCommand.DISCONNECT | MusicCommand.DC | MusicCommand.CLEAR:
                return CommandAction.STOP
            case MusicCommand.REMOVE:
                return CommandAction.REMOVE
            case MusicCommand.QUEUE:
                return CommandAction.SHOW_QUEUE
            case _:
                assert_never(self)

    @classmethod
    def parse(cls, content: str) -> tuple[MusicCommand, str]:
        """Split ``content`` into a command and its argument text.

        Unknown or missing command names fall back to showing the queue.
        """
        parts = content.strip().split(maxsplit=1)
        if not parts:
            return cls.QUEUE, ""

        argument = parts[1].strip() if len(parts) > 1 else ""
        try:
            return cls(parts[0].lower()), argument
        except ValueError:
            return cls.QUEUE, argument


class CommandRouter:
    """Entry point for ``<prefix><music_command> <sub-command> <args>`` messages."""

    def __init__(
        self,
        *,
        audio_engine: AudioEngine,
        registry: SessionRegistry,
        permission_checker: PermissionChecker,
        dj_role: str = WILDCARD_ROLE,
        queue_command: str = "!music queue",
    ) -> None:
        self._audio_engine = audio_engine
        self._registry = registry
        self._permission_checker = permission_checker
        self._dj_role = dj_role
        self._queue_command = queue_command

    async def handle(self, content: str, context: CommandContext) -> CommandReply:
        try:
            self._check_caller(context)
            command, argument = MusicCommand.parse(content)
            logger.info(LogTemplates.COMMAND_RECEIVED, command.value, context.member_name, context.guild_id)

            match command.action:
                case CommandAction.PLAY:
                    return await self._play(argument, context)
                case CommandAction.SKIP:
                    return await self._skip(context)
                case CommandAction.STOP:
                    return await self._stop(context)
                case CommandAction.REMOVE:
                    return await self._remove(argument, context)
                case CommandAction.SHOW_QUEUE:
                    return self._show_queue(context)
                case _:
                    assert_never(command.action)
        except DomainError as exc:
            logger.info(LogTemplates.COMMAND_REJECTED, context.guild_id, exc.message)
            return CommandReply.message(self._describe(exc))
        except Exception:
            logger.exception(LogTemplates.COMMAND_FAILED, content)
            return CommandReply.message(DiscordUIMessages.TERRIBLY_WRONG)

    # === Handlers ===

    async def _play(self, query: str, context: CommandContext) -> CommandReply:
        assert context.guild_id is not None
        voice_target = context.member_voice_channel_id
        if voice_target is None:
            raise NoVoiceChannelError()

        bot_channel = self._audio_engine.current_channel_id(context.guild_id)
        if bot_channel is not None and bot_channel != voice_target:
            raise ChannelOccupiedError(bot_channel)

        if not query:
            raise NoResultsFoundError(query)

        result = await self._audio_engine.search(query, requested_by=context.member_name)
        if result.is_empty:
            raise NoResultsFoundError(query)

        tracks = list(result.tracks) if result.playlist else [result.tracks[0]]
        observers = [SessionAnnouncer(context.notifier)] if context.notifier is not None else []
        manager = self._registry.get_or_create(context.guild_id, observers=observers)
        await manager.enqueue_track(tracks, voice_target)

        return CommandReply.message(
            DiscordUIMessages.LOADING_PLAYLIST if result.playlist else DiscordUIMessages.LOADING_TRACK
        )

    async def _skip(self, context: CommandContext) -> CommandReply:
        manager, snapshot = self._lookup(context)
        current = snapshot.current_track
        if manager is None or not snapshot.playing or current is None:
            return CommandReply.message(DiscordUIMessages.NOTHING_PLAYING)

        if not await manager.skip():
            return CommandReply.message(DiscordUIMessages.SKIP_FAILED)
        return CommandReply.message(DiscordUIMessages.SKIPPED.format(title=current.title))

    async def _stop(self, context: CommandContext) -> CommandReply:
        manager, _ = self._lookup(context)
        if manager is None or not await manager.stop():
            return CommandReply.message(DiscordUIMessages.NOTHING_PLAYING)
        return CommandReply.message(DiscordUIMessages.STOPPED)

    async def _remove(self, argument: str, context: CommandContext) -> CommandReply:
        manager, snapshot = self._lookup(context)
        if manager is None or snapshot.is_empty:
            raise EmptyQueueError()

        words = argument.split()
        try:
            index = int(words[0]) - 1
        except (IndexError, ValueError):
            raise IndexOutOfRangeError(-1, snapshot.length) from None

        track = await manager.remove(index)
        return CommandReply.message(DiscordUIMessages.REMOVED.format(title=track.title))

    def _show_queue(self, context: CommandContext) -> CommandReply:
        _, snapshot = self._lookup(context)
        if snapshot.is_empty:
            raise EmptyQueueError()
        return CommandReply.queue_listing(QueueView.from_snapshot(snapshot))

    # === Helpers ===

    def _check_caller(self, context: CommandContext) -> None:
        if not context.is_complete:
            raise InvalidCommandContextError()

        if not self._permission_checker.is_allowed(context.member, self._dj_role):
            logger.info(
                LogTemplates.COMMAND_PERMISSION_DENIED,
                context.member_name,
                self._dj_role,
                context.guild_id,
            )
            raise PermissionDeniedError(self._dj_role)

    def _lookup(self, context: CommandContext) -> tuple[PlaybackQueueManager | None, PlaybackSnapshot]:
        assert context.guild_id is not None
        manager = self._registry.get(context.guild_id)
        if manager is None:
            return None, PlaybackSnapshot.empty(context.guild_id)
        return manager, manager.get_state()

    def _describe(self, exc: DomainError) -> str:
        match exc:
            case InvalidCommandContextError():
                return DiscordUIMessages.INVALID_CONTEXT
            case PermissionDeniedError(role=role):
                return DiscordUIMessages.PERMISSION_DENIED.format(role=role)
            case NoVoiceChannelError():
                return DiscordUIMessages.NEED_TO_BE_IN_VOICE
            case ChannelOccupiedError():
                return DiscordUIMessages.CHANNEL_OCCUPIED
            case ConnectionFailureError():
                return DiscordUIMessages.COULD_NOT_JOIN_VOICE
            case NoResultsFoundError():
                return DiscordUIMessages.NO_RESULTS
            case EmptyQueueError():
                return DiscordUIMessages.QUEUE_EMPTY
            case QueueFullError():
                return DiscordUIMessages.QUEUE_FULL
            case IndexOutOfRangeError():
                return DiscordUIMessages.NO_SUCH_INDEX.format(queue_command=self._queue_command)
            case _:
                return DiscordUIMessages.TERRIBLY_WRONG
