"""Port interface for searching, connecting and playing audio."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from discord_music_queue.domain.shared.types import DiscordSnowflake, NonEmptyStr

if TYPE_CHECKING:
    from ...domain.music.entities import SearchResult, Track


class AudioEngine(ABC):
    """Interface for the audio backend that owns voice connections."""

    @abstractmethod
    async def search(self, query: NonEmptyStr, *, requested_by: str | None = None) -> "SearchResult":
        """Resolve a URL, playlist URL or free-text query to tracks.

        Returns an empty result when nothing is found.
        """
        ...

    @abstractmethod
    async def connect(self, session_id: DiscordSnowflake, voice_target: DiscordSnowflake) -> None:
        """Connect the session to a voice channel.

        Raises:
            ConnectionFailureError: If the connection cannot be established.
        """
        ...

    @abstractmethod
    async def play(self, session_id: DiscordSnowflake, track: "Track") -> None:
        """Start playing a track, replacing whatever is currently playing."""
        ...

    @abstractmethod
    async def stop(self, session_id: DiscordSnowflake) -> None:
        """Stop current playback without disconnecting."""
        ...

    @abstractmethod
    async def disconnect(self, session_id: DiscordSnowflake) -> None:
        """Tear down the voice connection of a session."""
        ...

    @abstractmethod
    def current_channel_id(self, session_id: DiscordSnowflake) -> DiscordSnowflake | None:
        """Voice channel the session is connected to, or None."""
        ...

    @abstractmethod
    def set_on_track_end(self, callback: Callable[[DiscordSnowflake], Awaitable[None]]) -> None:
        """Register the coroutine called when a track finishes on its own."""
        ...
