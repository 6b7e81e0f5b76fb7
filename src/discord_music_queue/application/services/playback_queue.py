"""Per-guild playback queue: track ordering, connection lifecycle and mutations."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from discord_music_queue.domain.music.entities import PlaybackSnapshot, Track
from discord_music_queue.domain.music.events import SessionEvent, TrackQueued, TrackStarted
from discord_music_queue.domain.music.value_objects import ConnectionState, SessionState, StopReason
from discord_music_queue.domain.shared.exceptions import (
    ConnectionFailureError,
    EmptyQueueError,
    IndexOutOfRangeError,
    InvalidOperationError,
    NoVoiceChannelError,
    QueueFullError,
)
from discord_music_queue.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    import asyncio

    from ..interfaces.audio_engine import AudioEngine
    from .session_registry import SessionRegistry

logger = logging.getLogger(__name__)

SessionObserver = Callable[[SessionEvent], None]


class PlaybackQueueManager:
    """Owns one session's track list, current-track pointer and connection state.

    The current track stays in the track list until it is skipped, ends, is
    removed or fails to start; positions reported to observers are 1-based
    indices into that list. Every mutation runs under the session lock handed
    out by the registry, so concurrent commands for the same guild are
    serialized.

    Once torn down, a manager is detached from the registry and forwards any
    further call to whatever manager currently owns the session id.
    """

    def __init__(
        self,
        session_id: int,
        *,
        audio_engine: AudioEngine,
        registry: SessionRegistry,
        lock: asyncio.Lock,
        max_queue_size: int = 200,
        leave_on_empty: bool = False,
        observers: Sequence[SessionObserver] = (),
    ) -> None:
        self.session_id = session_id
        self._audio_engine = audio_engine
        self._registry = registry
        self._lock = lock
        self._max_queue_size = max_queue_size
        self._leave_on_empty = leave_on_empty
        self._observers: list[SessionObserver] = list(observers)

        self._tracks: list[Track] = []
        self._current_index: int | None = None
        self._state = SessionState.NO_SESSION
        self._connection_state = ConnectionState.DISCONNECTED
        self._playing = False
        self._detached = False

    # === Observers ===

    @property
    def observers(self) -> tuple[SessionObserver, ...]:
        return tuple(self._observers)

    def subscribe(self, observer: SessionObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: SessionObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    # === Queries ===

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_detached(self) -> bool:
        return self._detached

    def get_state(self) -> PlaybackSnapshot:
        """Read-only snapshot of the session for display."""
        return PlaybackSnapshot(
            session_id=self.session_id,
            state=self._state,
            connection_state=self._connection_state,
            tracks=tuple(self._tracks),
            current_index=self._current_index,
            playing=self._playing,
        )

    # === Mutations ===

    async def enqueue_track(
        self,
        tracks: Track | Sequence[Track],
        voice_target: int | None = None,
    ) -> int:
        """Append one track or an ordered batch and return the new queue length.

        On a session with no live connection, ``voice_target`` is connected
        first; a failed connection tears the session down and re-raises
        ``ConnectionFailureError``.
        """
        batch = [tracks] if isinstance(tracks, Track) else list(tracks)
        if not batch:
            raise EmptyQueueError(ErrorMessages.EMPTY_BATCH)

        async with self._lock:
            if not self._detached:
                try:
                    return await self._enqueue_locked(batch, voice_target)
                except Exception:
                    # A session only exists after a successful enqueue-and-connect.
                    if not self._state.is_live and not self._detached:
                        self._registry.release(self)
                    raise

        successor = self._registry.get_or_create(self.session_id, observers=self._observers)
        return await successor.enqueue_track(batch, voice_target)

    async def skip(self) -> bool:
        """Advance past the current track. Returns False when nothing is playing."""
        async with self._lock:
            if not self._detached:
                if not self._playing or self._current_index is None:
                    return False

                skipped = self._tracks[self._current_index]
                logger.info(LogTemplates.QUEUE_SKIPPED, skipped.title, self.session_id)
                await self._advance()
                return True

        successor = self._successor()
        return await successor.skip() if successor else False

    async def remove(self, index: int) -> Track:
        """Remove the track at a 0-based index; removing the current track advances."""
        async with self._lock:
            if not self._detached:
                return await self._remove_locked(index)

        successor = self._successor()
        if successor is None:
            raise IndexOutOfRangeError(index, 0)
        return await successor.remove(index)

    async def stop(self) -> bool:
        """Disconnect and destroy the session. Returns False if there was nothing to stop."""
        async with self._lock:
            if not self._detached:
                if not self._state.is_live:
                    return False
                await self._close(StopReason.USER_REQUEST)
                return True

        successor = self._successor()
        return await successor.stop() if successor else False

    async def handle_track_end(self) -> None:
        """Called by the audio engine when the current track finished on its own."""
        async with self._lock:
            if self._detached or not self._playing or self._current_index is None:
                return
            await self._advance()

    async def shutdown(self) -> None:
        """Tear down regardless of state, used when the bot is closing."""
        async with self._lock:
            if self._detached:
                return
            await self._close(StopReason.SHUTDOWN)

    def detach(self) -> None:
        """Mark this manager as no longer owning its session id."""
        self._detached = True

    # === Internals (session lock held) ===

    async def _enqueue_locked(self, batch: list[Track], voice_target: int | None) -> int:
        if len(self._tracks) + len(batch) > self._max_queue_size:
            raise QueueFullError(self._max_queue_size)

        if self._state == SessionState.NO_SESSION:
            if voice_target is None:
                raise NoVoiceChannelError()
            await self._open(voice_target)

        first_new = len(self._tracks)
        for track in batch:
            self._tracks.append(track)
            position = len(self._tracks)
            logger.info(LogTemplates.QUEUE_ENQUEUED, track.title, position, self.session_id)
            self._publish(TrackQueued(session_id=self.session_id, track=track, position=position))

        if not self._playing:
            await self._start(first_new)

        return len(self._tracks)

    async def _remove_locked(self, index: int) -> Track:
        length = len(self._tracks)
        if index < 0 or index >= length:
            raise IndexOutOfRangeError(index, length)

        track = self._tracks[index]
        logger.info(LogTemplates.QUEUE_REMOVED, track.title, self.session_id)

        if index == self._current_index:
            await self._advance()
            return track

        # Played tracks leave the list, so nothing precedes the current track.
        del self._tracks[index]
        return track

    async def _open(self, voice_target: int) -> None:
        self._transition(SessionState.CONNECTING)
        self._connection_state = ConnectionState.CONNECTING
        logger.info(LogTemplates.VOICE_CONNECTING, voice_target, self.session_id)

        try:
            await self._audio_engine.connect(self.session_id, voice_target)
        except ConnectionFailureError:
            logger.warning(LogTemplates.VOICE_CONNECTION_FAILED, voice_target, self.session_id)
            self._teardown(StopReason.CONNECTION_FAILED)
            raise
        except Exception as exc:
            logger.exception(LogTemplates.VOICE_CONNECTION_FAILED, voice_target, self.session_id)
            self._teardown(StopReason.CONNECTION_FAILED)
            raise ConnectionFailureError(voice_target) from exc

        self._connection_state = ConnectionState.CONNECTED

    async def _start(self, index: int) -> None:
        """Play the track at ``index``, dropping tracks that fail to start.

        A track that cannot be played is removed like a skip and the next one
        is tried. A lost voice connection tears the session down instead.
        """
        while index < len(self._tracks):
            track = self._tracks[index]
            self._current_index = index
            self._transition(SessionState.PLAYING)
            self._playing = True

            try:
                await self._audio_engine.play(self.session_id, track)
            except ConnectionFailureError:
                logger.warning(LogTemplates.PLAYBACK_FAILED_START, track.title)
                await self._close(StopReason.CONNECTION_FAILED)
                raise
            except Exception:
                logger.exception(LogTemplates.PLAYBACK_FAILED_START, track.title)
                del self._tracks[index]
                continue

            logger.info(LogTemplates.PLAYBACK_STARTED, track.title, self.session_id)
            self._publish(TrackStarted(session_id=self.session_id, track=track))
            return

        await self._exhausted()

    async def _advance(self) -> None:
        """Drop the current track and start the one that slides into its place."""
        assert self._current_index is not None
        index = self._current_index
        del self._tracks[index]
        await self._start(index)

    async def _exhausted(self) -> None:
        self._current_index = None
        self._playing = False
        logger.info(LogTemplates.QUEUE_EXHAUSTED, self.session_id)

        if self._leave_on_empty:
            await self._close(StopReason.QUEUE_EXHAUSTED)
            return

        await self._audio_engine.stop(self.session_id)
        self._transition(SessionState.IDLE)

    async def _close(self, reason: StopReason) -> None:
        try:
            await self._audio_engine.disconnect(self.session_id)
        finally:
            self._teardown(reason)

    def _teardown(self, reason: StopReason) -> None:
        self._tracks.clear()
        self._current_index = None
        self._playing = False
        self._connection_state = ConnectionState.DISCONNECTED
        self._state = SessionState.NO_SESSION
        logger.info(LogTemplates.SESSION_TORN_DOWN, self.session_id, reason.value)
        self._registry.release(self)

    def _transition(self, target: SessionState) -> None:
        if not self._state.can_transition_to(target):
            raise InvalidOperationError(
                operation=f"transition to {target.value}",
                current_state=self._state.value,
            )
        self._state = target

    def _publish(self, event: SessionEvent) -> None:
        for observer in list(self._observers):
            try:
                observer(event)
            except Exception:
                logger.exception(LogTemplates.OBSERVER_FAILED, event.event_type, self.session_id)

    def _successor(self) -> PlaybackQueueManager | None:
        current = self._registry.get(self.session_id)
        return current if current is not None and current is not self else None
