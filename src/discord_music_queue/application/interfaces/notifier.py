"""Port interface for posting session notifications back to a chat channel."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..commands.replies import QueueView


class Notifier(ABC):
    """A text channel that accepts plain messages or queue listings."""

    @abstractmethod
    def send(self, message: "str | QueueView") -> None:
        """Deliver a message; delivery may be deferred."""
        ...
