"""Port interface for role-based command gating."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

WILDCARD_ROLE = "*"


class PermissionChecker(ABC):
    """Checks whether a chat member carries a named role."""

    @abstractmethod
    def has_role(self, member: Any, role_name: str) -> bool:
        ...

    def is_allowed(self, member: Any, role_name: str) -> bool:
        """Wildcard role allows everyone; otherwise the member needs the role."""
        if role_name == WILDCARD_ROLE:
            return True
        return self.has_role(member, role_name)
