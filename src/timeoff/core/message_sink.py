"""MessageSink interface for outbound message delivery.

This module defines the abstract interface and implementations used to hand
outbound content to the messaging transport owned by the host.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)

OutboundContent = str | dict[str, Any]


class MessageSink(ABC):
    """Interface for delivering messages to a channel (DIP)."""

    @abstractmethod
    async def send(self, channel_id: str, content: OutboundContent) -> None:
        """Send content to the user on ``channel_id``."""
        ...


class BufferedMessageSink(MessageSink):
    """Buffers messages for testing or batch delivery."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, OutboundContent]] = []

    async def send(self, channel_id: str, content: OutboundContent) -> None:
        """Append message to buffer."""
        self.messages.append((channel_id, content))

    @property
    def contents(self) -> list[OutboundContent]:
        return [content for _, content in self.messages]

    def clear(self) -> None:
        """Clear the message buffer."""
        self.messages.clear()


class NullMessageSink(MessageSink):
    """Drops messages; used when responses are returned synchronously by the host."""

    async def send(self, channel_id: str, content: OutboundContent) -> None:
        logger.debug(f"Dropping outbound message for channel '{channel_id}'")
