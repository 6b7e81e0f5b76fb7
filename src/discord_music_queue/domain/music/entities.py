"""Core domain entities for the music bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from discord_music_queue.domain.music.value_objects import ConnectionState, SessionState
from discord_music_queue.domain.shared.types import (
    DiscordSnowflake,
    DurationSeconds,
    HttpUrlStr,
    NonEmptyStr,
    QueuePositionInt,
    TrackTitleStr,
)


class Track(BaseModel):
    """Immutable value object representing a playable track."""

    model_config = ConfigDict(frozen=True, strict=True)

    title: TrackTitleStr
    url: HttpUrlStr
    duration_seconds: DurationSeconds | None = None
    requested_by: NonEmptyStr | None = None

    # Resolver-provided, consumed by the audio engine only
    stream_url: HttpUrlStr | None = None

    @property
    def duration_formatted(self) -> str:
        """Format duration as MM:SS or HH:MM:SS."""
        if self.duration_seconds is None:
            return "Unknown"

        hours, remainder = divmod(self.duration_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)

        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"

    def with_requester(self, requested_by: NonEmptyStr) -> Track:
        """Return a copy of this track with requester metadata populated."""
        return self.model_copy(update={"requested_by": requested_by})

    def __str__(self) -> str:
        return self.title


class SearchResult(BaseModel):
    """Tracks returned by the audio engine for a query."""

    model_config = ConfigDict(frozen=True)

    tracks: tuple[Track, ...] = ()
    playlist: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.tracks

    @property
    def first(self) -> Track | None:
        return self.tracks[0] if self.tracks else None


class PlaybackSnapshot(BaseModel):
    """Read-only view of a playback session, safe to hand to callers."""

    model_config = ConfigDict(frozen=True)

    session_id: DiscordSnowflake
    state: SessionState = SessionState.NO_SESSION
    connection_state: ConnectionState = ConnectionState.DISCONNECTED
    tracks: tuple[Track, ...] = Field(default_factory=tuple)
    current_index: QueuePositionInt | None = None
    playing: bool = False

    @classmethod
    def empty(cls, session_id: int) -> PlaybackSnapshot:
        """Snapshot describing a session id with no live session."""
        return cls(session_id=session_id)

    @property
    def has_session(self) -> bool:
        return self.state.is_live

    @property
    def length(self) -> int:
        return len(self.tracks)

    @property
    def is_empty(self) -> bool:
        return not self.tracks

    @property
    def current_track(self) -> Track | None:
        if self.current_index is None:
            return None
        return self.tracks[self.current_index]

    @property
    def upcoming(self) -> tuple[Track, ...]:
        """Tracks after the current one, or the whole list when nothing is current."""
        if self.current_index is None:
            return self.tracks
        return self.tracks[self.current_index + 1 :]

    @property
    def total_duration_seconds(self) -> int | None:
        """Sum of all track durations, or None if any track has an unknown duration."""
        total = 0
        for track in self.tracks:
            if track.duration_seconds is None:
                return None
            total += track.duration_seconds
        return total
