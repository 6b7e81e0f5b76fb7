"""Role-based permission checks against discord.py members."""

from __future__ import annotations

from typing import Any

import discord

from discord_music_queue.application.interfaces.permissions import PermissionChecker


class DiscordRolePermissionChecker(PermissionChecker):
    """A member passes when any of their roles carries the configured name."""

    def has_role(self, member: Any, role_name: str) -> bool:
        if not isinstance(member, discord.Member):
            return False
        return any(role.name == role_name for role in member.roles)
