"""Presentation-neutral reply DTOs returned by the command router."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from discord_music_queue.domain.music.entities import PlaybackSnapshot, Track
from discord_music_queue.domain.shared.messages import DiscordUIMessages


def _format_line(template: str, track: Track, **extra: object) -> str:
    return template.format(
        title=track.title, duration=track.duration_formatted, url=track.url, **extra
    )


class QueueView(BaseModel):
    """A queue listing ready to be rendered as an embed or plain text."""

    model_config = ConfigDict(frozen=True)

    title: str = DiscordUIMessages.EMBED_QUEUE_TITLE
    lines: tuple[str, ...] = ()
    now_playing: str | None = None
    total_duration_seconds: int | None = None

    @classmethod
    def from_snapshot(cls, snapshot: PlaybackSnapshot) -> QueueView:
        lines = tuple(
            _format_line(DiscordUIMessages.QUEUE_LINE, track, index=index)
            for index, track in enumerate(snapshot.tracks, start=1)
        )
        current = snapshot.current_track
        now_playing = (
            _format_line(DiscordUIMessages.NOW_PLAYING_LINE, current) if current is not None else None
        )
        return cls(
            lines=lines,
            now_playing=now_playing,
            total_duration_seconds=snapshot.total_duration_seconds,
        )

    @property
    def description(self) -> str:
        return "\n".join(self.lines)

    def as_text(self) -> str:
        parts = [f"**{self.title}**", self.description]
        if self.now_playing:
            parts.append(self.now_playing)
        return "\n".join(part for part in parts if part)


class CommandReply(BaseModel):
    """Outcome of a routed command: either a text line or a queue listing."""

    model_config = ConfigDict(frozen=True)

    text: str | None = None
    queue: QueueView | None = None

    @classmethod
    def message(cls, text: str) -> CommandReply:
        return cls(text=text)

    @classmethod
    def queue_listing(cls, view: QueueView) -> CommandReply:
        return cls(queue=view)
