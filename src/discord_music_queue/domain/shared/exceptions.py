"""Base exception classes for domain-level errors."""

from __future__ import annotations

from discord_music_queue.domain.shared.messages import ErrorMessages


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InvalidCommandContextError(DomainError):
    """Raised when a command arrives without guild, member or channel context."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.INVALID_COMMAND_CONTEXT, code="INVALID_COMMAND_CONTEXT")


class PermissionDeniedError(DomainError):
    """Raised when the caller lacks the configured DJ role."""

    def __init__(self, role: str) -> None:
        super().__init__(ErrorMessages.PERMISSION_DENIED.format(role=role), code="PERMISSION_DENIED")
        self.role = role


class NoVoiceChannelError(DomainError):
    """Raised when the caller is not connected to a voice channel."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.NO_VOICE_CHANNEL, code="NO_VOICE_CHANNEL")


class ChannelOccupiedError(DomainError):
    """Raised when the bot already sits in a different voice channel than the caller."""

    def __init__(self, channel_id: int | None = None) -> None:
        super().__init__(
            ErrorMessages.CHANNEL_OCCUPIED.format(channel_id=channel_id), code="CHANNEL_OCCUPIED"
        )
        self.channel_id = channel_id


class ConnectionFailureError(DomainError):
    """Raised when the audio engine cannot establish a voice connection."""

    def __init__(self, channel_id: int | None = None, message: str | None = None) -> None:
        msg = message or ErrorMessages.CONNECTION_FAILED.format(channel_id=channel_id)
        super().__init__(msg, code="CONNECTION_FAILURE")
        self.channel_id = channel_id


class NoResultsFoundError(DomainError):
    """Raised when a search returns no playable tracks."""

    def __init__(self, query: str) -> None:
        super().__init__(ErrorMessages.NO_RESULTS.format(query=query), code="NO_RESULTS_FOUND")
        self.query = query


class EmptyQueueError(DomainError):
    """Raised when an operation needs tracks but the queue has none."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.QUEUE_EMPTY, code="EMPTY_QUEUE")


class QueueFullError(DomainError):
    """Raised when enqueueing would exceed the configured maximum queue size."""

    def __init__(self, max_size: int) -> None:
        super().__init__(ErrorMessages.QUEUE_FULL.format(max_size=max_size), code="QUEUE_FULL")
        self.max_size = max_size


class IndexOutOfRangeError(DomainError):
    """Raised when a queue index does not address an existing track."""

    def __init__(self, index: int, length: int) -> None:
        super().__init__(
            ErrorMessages.INDEX_OUT_OF_RANGE.format(index=index, length=length),
            code="INDEX_OUT_OF_RANGE",
        )
        self.index = index
        self.length = length


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class ExecutorTaskFailure(DomainError):
    """Wraps an exception raised by a work item's action."""

    def __init__(self, item_id: str, cause: BaseException | None = None) -> None:
        super().__init__(ErrorMessages.WORK_ITEM_FAILED.format(item_id=item_id), code="EXECUTOR_TASK_FAILURE")
        self.item_id = item_id
        self.cause = cause
