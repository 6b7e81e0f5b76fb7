"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from enum import Enum


class ConnectionState(Enum):
    """Voice connection state of a playback session."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class SessionState(Enum):
    """Session state with enforced transitions.

    State transitions:
    - NO_SESSION -> CONNECTING (first enqueue)
    - CONNECTING -> PLAYING (connection established)
    - CONNECTING -> NO_SESSION (connection failed or stop)
    - PLAYING -> PLAYING (enqueue, skip to a next track)
    - PLAYING -> IDLE (skip or track end with nothing left)
    - IDLE -> PLAYING (enqueue)
    - PLAYING / IDLE -> NO_SESSION (stop)
    """

    NO_SESSION = "no_session"
    CONNECTING = "connecting"
    PLAYING = "playing"
    IDLE = "idle"

    def can_transition_to(self, target: SessionState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            SessionState.NO_SESSION: {SessionState.CONNECTING},
            SessionState.CONNECTING: {SessionState.PLAYING, SessionState.NO_SESSION},
            SessionState.PLAYING: {
                SessionState.PLAYING,
                SessionState.IDLE,
                SessionState.NO_SESSION,
            },
            SessionState.IDLE: {SessionState.PLAYING, SessionState.NO_SESSION},
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_live(self) -> bool:
        return self != SessionState.NO_SESSION

    @property
    def is_playing(self) -> bool:
        return self == SessionState.PLAYING


class StopReason(Enum):
    """Reasons a session can be torn down."""

    USER_REQUEST = "user_request"
    CONNECTION_FAILED = "connection_failed"
    QUEUE_EXHAUSTED = "queue_exhausted"
    SHUTDOWN = "shutdown"
