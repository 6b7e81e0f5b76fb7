"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from discord_music_queue.application.interfaces.audio_engine import AudioEngine
from discord_music_queue.application.interfaces.notifier import Notifier
from discord_music_queue.application.interfaces.permissions import WILDCARD_ROLE, PermissionChecker

__all__ = [
    "AudioEngine",
    "Notifier",
    "PermissionChecker",
    "WILDCARD_ROLE",
]
