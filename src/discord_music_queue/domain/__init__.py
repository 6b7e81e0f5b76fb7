# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, messages and exceptions
- music/: Track, session state and playback events
"""

from discord_music_queue.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
