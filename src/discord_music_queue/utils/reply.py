"""Utility functions for formatting Discord messages."""

from __future__ import annotations

from collections.abc import Sequence
from functools import cache

from discord_music_queue.domain.shared.messages import DiscordUIMessages


@cache
def format_duration(seconds: int | float | None) -> str:
    if seconds is None:
        return "–"

    total_seconds = int(seconds)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    secs = total_seconds % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"


def fit_lines(lines: Sequence[str], max_length: int) -> str:
    """Join whole lines with newlines without exceeding ``max_length``.

    Lines that do not fit are summarized by a trailing "... and N more" line.
    """
    kept: list[str] = []
    used = 0
    for position, line in enumerate(lines):
        remaining = len(lines) - position
        footer = DiscordUIMessages.EMBED_MORE_TRACKS.format(count=remaining)
        cost = len(line) + (1 if kept else 0)
        reserve = 0 if remaining == 1 else len(footer) + 1
        if used + cost + reserve > max_length:
            if used + len(footer) + (1 if kept else 0) <= max_length:
                kept.append(footer)
            break
        kept.append(line)
        used += cost
    return "\n".join(kept)
