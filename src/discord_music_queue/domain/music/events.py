"""Domain events published by a playback session to its observers."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from discord_music_queue.domain.music.entities import Track
from discord_music_queue.domain.shared.types import DiscordSnowflake, PositiveInt


class MusicEvent(BaseModel):
    """Base class for all music domain events."""

    model_config = ConfigDict(frozen=True)


class TrackQueued(MusicEvent):
    """A track was appended to a session's track list at 1-based ``position``."""

    event_type: Literal["TrackQueued"] = "TrackQueued"
    session_id: DiscordSnowflake
    track: Track
    position: PositiveInt


class TrackStarted(MusicEvent):
    """A track became the current track of a session."""

    event_type: Literal["TrackStarted"] = "TrackStarted"
    session_id: DiscordSnowflake
    track: Track


SessionEvent = TrackQueued | TrackStarted
