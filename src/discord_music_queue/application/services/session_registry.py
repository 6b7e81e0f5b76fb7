"""Process-wide map from guild id to its playback queue manager."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from discord_music_queue.application.services.playback_queue import (
    PlaybackQueueManager,
    SessionObserver,
)
from discord_music_queue.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...config.settings import MusicSettings
    from ..interfaces.audio_engine import AudioEngine

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Sole owner of live playback sessions; at most one manager per session id.

    Each session id gets one ``asyncio.Lock`` for the lifetime of the registry,
    shared by every manager ever created for that id, so creation and mutation
    of a guild's session are serialized even across teardown and re-creation.
    Locks are never dropped, since a session is usually deleted while its lock
    is held; the map grows to one entry per guild the bot has played in.
    """

    def __init__(
        self,
        *,
        audio_engine: AudioEngine,
        settings: MusicSettings | None = None,
    ) -> None:
        self._audio_engine = audio_engine
        self._max_queue_size = settings.max_queue_size if settings else 200
        self._leave_on_empty = settings.leave_on_empty if settings else False
        self._sessions: dict[int, PlaybackQueueManager] = {}
        self._locks: dict[int, asyncio.Lock] = {}

        audio_engine.set_on_track_end(self._on_track_end)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[PlaybackQueueManager]:
        return iter(list(self._sessions.values()))

    def session_ids(self) -> list[int]:
        return list(self._sessions)

    def get(self, session_id: int) -> PlaybackQueueManager | None:
        return self._sessions.get(session_id)

    def get_or_create(
        self,
        session_id: int,
        *,
        observers: Iterable[SessionObserver] = (),
    ) -> PlaybackQueueManager:
        """Return the manager for ``session_id``, creating it on first use.

        ``observers`` are only attached to a newly created manager.
        """
        manager = self._sessions.get(session_id)
        if manager is not None:
            return manager

        manager = PlaybackQueueManager(
            session_id,
            audio_engine=self._audio_engine,
            registry=self,
            lock=self._locks.setdefault(session_id, asyncio.Lock()),
            max_queue_size=self._max_queue_size,
            leave_on_empty=self._leave_on_empty,
            observers=tuple(observers),
        )
        self._sessions[session_id] = manager
        logger.debug(LogTemplates.SESSION_CREATED, session_id)
        return manager

    def delete(self, session_id: int) -> bool:
        """Forget the session for ``session_id``. Returns False if there was none."""
        manager = self._sessions.pop(session_id, None)
        if manager is None:
            return False

        manager.detach()
        logger.debug(LogTemplates.SESSION_DELETED, session_id)
        return True

    def release(self, manager: PlaybackQueueManager) -> None:
        """Delete ``manager``'s entry only if it is still the registered one."""
        if self._sessions.get(manager.session_id) is manager:
            self.delete(manager.session_id)
        else:
            manager.detach()

    async def stop_all(self) -> int:
        """Tear down every session, returning how many were registered."""
        managers = list(self._sessions.values())
        for manager in managers:
            try:
                await manager.shutdown()
            except Exception:
                logger.exception(LogTemplates.SESSION_SHUTDOWN_FAILED, manager.session_id)
        return len(managers)

    async def _on_track_end(self, session_id: int) -> None:
        manager = self._sessions.get(session_id)
        if manager is None:
            return
        await manager.handle_track_end()
