"""
Application Commands

Routing of chat sub-commands onto playback queue operations, and the
reply objects handed back to the presentation layer.
"""

from discord_music_queue.application.commands.context import CommandContext
from discord_music_queue.application.commands.replies import CommandReply, QueueView
from discord_music_queue.application.commands.router import CommandAction, CommandRouter, MusicCommand

__all__ = [
    # Context
    "CommandContext",
    # Replies
    "CommandReply",
    "QueueView",
    # Router
    "CommandAction",
    "CommandRouter",
    "MusicCommand",
]
