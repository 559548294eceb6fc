"""Core interfaces (Protocols) for the external collaborators of the dialog engine."""

from typing import Protocol

from timeoff.core.types import RecognizerResult


class IRecognizer(Protocol):
    """Interface for intent/entity recognizers."""

    async def recognize(self, text: str) -> RecognizerResult:
        """Recognize the intent and date expression in ``text``.

        Implementations may raise; callers treat any failure as
        "nothing recognized".
        """
        ...


class IDateTokenExtractor(Protocol):
    """Interface for turning a free-text reply into a TIMEX token."""

    def extract(self, text: str) -> str | None:
        """Return the TIMEX token found in ``text``, or None if nothing parses."""
        ...


class IProfileDirectory(Protocol):
    """Interface for resolving a channel user id to a stable identity."""

    async def lookup_identity(self, user_id: str) -> str:
        """Return a stable identity (e.g. email) for ``user_id``.

        Raises:
            ProfileLookupError: If the profile cannot be resolved.
        """
        ...
