"""
Shared Domain Kernel

Contains message constants, constrained types and exceptions shared across the package.
"""

from discord_music_queue.domain.shared.exceptions import (
    ChannelOccupiedError,
    ConnectionFailureError,
    DomainError,
    EmptyQueueError,
    ExecutorTaskFailure,
    IndexOutOfRangeError,
    InvalidCommandContextError,
    InvalidOperationError,
    NoResultsFoundError,
    NoVoiceChannelError,
    PermissionDeniedError,
    QueueFullError,
)

__all__ = [
    "DomainError",
    "InvalidCommandContextError",
    "PermissionDeniedError",
    "NoVoiceChannelError",
    "ChannelOccupiedError",
    "ConnectionFailureError",
    "NoResultsFoundError",
    "EmptyQueueError",
    "QueueFullError",
    "IndexOutOfRangeError",
    "InvalidOperationError",
    "ExecutorTaskFailure",
]
