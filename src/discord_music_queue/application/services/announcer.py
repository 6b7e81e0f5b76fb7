"""Session observer that turns playback events into channel messages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from discord_music_queue.domain.music.events import SessionEvent, TrackQueued, TrackStarted
from discord_music_queue.domain.shared.messages import DiscordUIMessages

if TYPE_CHECKING:
    from ..interfaces.notifier import Notifier


class SessionAnnouncer:
    """Posts "now playing" and "queued" notices to the channel a session was started from."""

    def __init__(self, notifier: Notifier) -> None:
        self._notifier = notifier

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    def __call__(self, event: SessionEvent) -> None:
        match event:
            case TrackStarted(track=track):
                self._notifier.send(
                    DiscordUIMessages.NOW_PLAYING.format(
                        title=track.title, duration=track.duration_formatted, url=track.url
                    )
                )
            case TrackQueued(track=track, position=position):
                self._notifier.send(
                    DiscordUIMessages.TRACK_QUEUED.format(title=track.title, position=position)
                )
