"""
Music Bounded Context

Domain types for tracks, session state snapshots and playback events.
"""

from discord_music_queue.domain.music.entities import PlaybackSnapshot, SearchResult, Track
from discord_music_queue.domain.music.events import SessionEvent, TrackQueued, TrackStarted
from discord_music_queue.domain.music.value_objects import ConnectionState, SessionState, StopReason

__all__ = [
    # Entities
    "Track",
    "SearchResult",
    "PlaybackSnapshot",
    # Value Objects
    "ConnectionState",
    "SessionState",
    "StopReason",
    # Events
    "TrackQueued",
    "TrackStarted",
    "SessionEvent",
]
