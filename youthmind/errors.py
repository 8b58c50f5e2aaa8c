"""
Exception types shared across the YouthMind service.

The server converts these into HTTP responses in one place; everything else
just raises them.
"""


class YouthMindError(Exception):
    """Base error for the service."""


class FlowError(YouthMindError):
    """A flow did not produce a usable result."""


class FlowInputError(FlowError):
    """The request handed to a flow did not match its input schema."""


class NoOutputError(FlowError):
    """The model answered with nothing at all."""


class FlowOutputError(FlowError):
    """The model's output did not match the flow's output schema."""


class GenerationError(FlowError):
    """The generative AI service rejected a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MediaError(YouthMindError):
    """A media payload (data URI, audio buffer) could not be decoded."""


class ModerationRejected(YouthMindError):
    """User content was flagged by the moderation gate."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class MoodRequired(YouthMindError):
    """A mood-keyed recommendation was requested before any mood was known."""


class StoreError(YouthMindError):
    """The support thread store could not be read or written."""


class EmptyEntry(YouthMindError):
    """A to-do task or gratitude entry was blank."""


class TaskNotFound(YouthMindError):
    """No to-do task with the given id exists in the session."""
