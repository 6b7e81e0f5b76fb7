"""Prefix-command cog: ``!music <sub-command> <args>`` routed to the command router."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from discord_music_queue.application.commands.context import CommandContext
from discord_music_queue.domain.shared.messages import ErrorMessages, LogTemplates
from discord_music_queue.infrastructure.discord.adapters.channel_notifier import (
    MESSAGE_LIMIT,
    build_queue_embed,
)
from discord_music_queue.utils.reply import truncate

if TYPE_CHECKING:
    from ....application.commands.replies import CommandReply
    from ....config.container import Container

logger = logging.getLogger(__name__)


class MusicCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

        discord_settings = container.settings.discord
        self._trigger = f"{discord_settings.command_prefix}{discord_settings.music_command}"

    async def cog_load(self) -> None:
        logger.info(LogTemplates.COG_LOADED_MUSIC, self._trigger)

    @property
    def trigger(self) -> str:
        return self._trigger

    def extract_content(self, content: str) -> str | None:
        """Text after the music command, or None if ``content`` is not a music command."""
        if not content.startswith(self._trigger):
            return None

        rest = content[len(self._trigger) :]
        if rest and not rest[0].isspace():
            return None
        return rest.strip()

    def build_context(self, message: discord.Message) -> CommandContext:
        guild = message.guild
        member = message.author if isinstance(message.author, discord.Member) else None

        voice_channel_id = None
        if member is not None and member.voice is not None and member.voice.channel is not None:
            voice_channel_id = member.voice.channel.id

        return CommandContext(
            guild_id=guild.id if guild is not None else None,
            member=member,
            member_name=member.display_name if member is not None else None,
            member_voice_channel_id=voice_channel_id,
            notifier=self.container.notifier_for(message.channel) if guild is not None else None,
        )

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot:
            return

        content = self.extract_content(message.content)
        if content is None:
            return

        reply = await self.container.command_router.handle(content, self.build_context(message))
        await self._send_reply(message, reply)

    async def _send_reply(self, message: discord.Message, reply: CommandReply) -> None:
        try:
            if reply.queue is not None:
                await message.reply(embed=build_queue_embed(reply.queue))
            elif reply.text:
                await message.reply(truncate(reply.text, MESSAGE_LIMIT))
        except discord.HTTPException as exc:
            logger.warning(LogTemplates.COMMAND_REPLY_FAILED, message.channel.id, exc)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(MusicCog(bot, container))
