"""Channel adapter interface and correlation outcome types."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel

from timeoff.core.message_sink import OutboundContent
from timeoff.core.types import ChannelAction, InboundTurn, InteractiveMessage


class ChannelAdapter(ABC):
    """Everything channel-specific the dialogs need.

    Raw payload maps are only read inside adapters; the rest of the code works
    with ``ChannelAction`` and ``InteractiveMessage``.
    """

    channel_ids: tuple[str, ...] = ()

    @abstractmethod
    def is_action_payload(self, payload: dict[str, Any]) -> bool:
        """Whether ``payload`` claims to be an interaction with a sent message."""
        ...

    @abstractmethod
    def extract_action(self, turn: InboundTurn) -> ChannelAction:
        """Read the clicked action and the responding user from the turn's payload.

        Raises:
            CorrelationError: If the payload lacks the fields this channel requires.
        """
        ...

    @abstractmethod
    def build_confirmation_message(self, message: InteractiveMessage) -> OutboundContent:
        """Render a yes/no confirmation for this channel."""
        ...

    def build_ack_address(self, payload: dict[str, Any]) -> str | None:
        """Callback address for acknowledging the origin message, if the channel has one."""
        return None

    def resolve_user_id(self, turn: InboundTurn) -> str | None:
        """Channel user id for a typed (non-action) turn."""
        return turn.from_id


def parse_ack_address(value: Any) -> str | None:
    """Return ``value`` if it is an absolute http(s) URL httpx can post to, else None."""
    if not isinstance(value, str) or not value:
        return None
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL:
        return None
    if url.scheme not in ("http", "https") or not url.host:
        return None
    return value


class CorrelationKind(str, Enum):
    TEXT = "text"
    ACTION = "action"
    FAILURE = "failure"


class CorrelationOutcome(BaseModel):
    """What an inbound turn turned out to be."""

    kind: CorrelationKind
    action: ChannelAction | None = None
    reason: str | None = None

    @classmethod
    def text(cls) -> "CorrelationOutcome":
        return cls(kind=CorrelationKind.TEXT)

    @classmethod
    def matched(cls, action: ChannelAction) -> "CorrelationOutcome":
        return cls(kind=CorrelationKind.ACTION, action=action)

    @classmethod
    def failure(cls, reason: str) -> "CorrelationOutcome":
        return cls(kind=CorrelationKind.FAILURE, reason=reason)
