"""Framework-neutral description of who issued a command and from where."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..interfaces.notifier import Notifier


@dataclass(frozen=True)
class CommandContext:
    """Context extracted from an inbound chat message.

    ``member`` is passed through untouched to the permission checker.
    ``notifier`` targets the channel the command was issued in.
    """

    guild_id: int | None
    member: Any | None
    member_name: str | None = None
    member_voice_channel_id: int | None = None
    notifier: Notifier | None = None

    @property
    def is_complete(self) -> bool:
        return self.guild_id is not None and self.member is not None
