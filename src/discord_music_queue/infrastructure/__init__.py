"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Discord (bot, cogs, voice and channel adapters, role checks)
- Audio (yt-dlp resolution, FFmpeg playback engine)
"""

from discord_music_queue.infrastructure.discord.adapters.voice_adapter import DiscordVoiceAdapter
from discord_music_queue.infrastructure.discord.bot import create_bot

__all__ = [
    "create_bot",
    "DiscordVoiceAdapter",
]
