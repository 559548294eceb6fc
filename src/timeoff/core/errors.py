"""Core interaction errors."""


class TimeoffError(Exception):
    """Base class for all timeoff errors."""

    pass


class ConfigError(TimeoffError):
    """Raised when configuration is invalid."""


class DialogError(TimeoffError):
    """Raised when dialog execution fails."""

    pass


class DialogStackError(DialogError):
    """Raised when dialog stack operations fail."""

    pass


class DialogNotFoundError(DialogError):
    """Raised when a frame references a dialog kind that is not registered."""

    pass


class RecognitionError(TimeoffError):
    """Raised when the intent/date recognizer fails."""

    pass


class CorrelationError(TimeoffError):
    """Raised when a channel payload cannot be mapped to an action."""

    pass


class DownstreamCallError(TimeoffError):
    """Raised when an outbound HTTP call fails or returns a non-2xx status."""

    pass


class ProfileLookupError(DownstreamCallError):
    """Failed to resolve a user's profile on the channel."""

    pass


class ApprovalSubmissionError(DownstreamCallError):
    """The approval service rejected or did not receive the request."""

    pass
