"""Notifier that posts to a Discord text channel through the shared work queue."""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING, Final

import discord

from discord_music_queue.application.commands.replies import QueueView
from discord_music_queue.application.interfaces.notifier import Notifier
from discord_music_queue.application.services.work_queue import WorkItem
from discord_music_queue.domain.shared.messages import DiscordUIMessages
from discord_music_queue.utils.reply import fit_lines, format_duration, truncate

if TYPE_CHECKING:
    from discord_music_queue.application.services.work_queue import WorkQueue

logger = logging.getLogger(__name__)

EMBED_DESCRIPTION_LIMIT: Final[int] = 4096
EMBED_FIELD_LIMIT: Final[int] = 1024
MESSAGE_LIMIT: Final[int] = 2000

_sequence = itertools.count(1)


def build_queue_embed(view: QueueView) -> discord.Embed:
    """Render a queue listing as an embed: numbered tracks plus a now-playing field."""
    embed = discord.Embed(
        title=view.title,
        description=fit_lines(view.lines, EMBED_DESCRIPTION_LIMIT),
        color=discord.Color.blurple(),
    )
    embed.add_field(
        name=DiscordUIMessages.EMBED_NOW_PLAYING_FIELD,
        value=truncate(view.now_playing or DiscordUIMessages.NOTHING_CURRENT, EMBED_FIELD_LIMIT),
        inline=False,
    )
    if view.total_duration_seconds is not None:
        embed.set_footer(
            text=DiscordUIMessages.EMBED_TOTAL_DURATION.format(
                duration=format_duration(view.total_duration_seconds)
            )
        )
    return embed


class DiscordChannelNotifier(Notifier):
    """Defers each message onto the work queue so bursts are paced per tick."""

    def __init__(self, channel: discord.abc.Messageable, work_queue: WorkQueue) -> None:
        self._channel = channel
        self._work_queue = work_queue

    @property
    def channel(self) -> discord.abc.Messageable:
        return self._channel

    def send(self, message: str | QueueView) -> None:
        channel_id = getattr(self._channel, "id", "?")
        item_id = f"notify:{channel_id}:{next(_sequence)}"
        self._work_queue.submit(WorkItem(id=item_id, action=lambda: self._deliver(message)))

    async def _deliver(self, message: str | QueueView) -> None:
        if isinstance(message, QueueView):
            await self._channel.send(embed=build_queue_embed(message))
        else:
            await self._channel.send(truncate(message, MESSAGE_LIMIT))
