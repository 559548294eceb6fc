"""Per-turn context handed to dialog steps."""

import logging

from timeoff.channels.base import ChannelAdapter
from timeoff.core.message_sink import MessageSink, OutboundContent
from timeoff.core.types import ChannelAction, InboundTurn

logger = logging.getLogger(__name__)


class TurnContext:
    """Wraps one inbound turn with its channel adapter and outbound sink.

    Everything sent during the turn is also kept in ``outbox`` so the host can
    return it synchronously.
    """

    def __init__(
        self,
        turn: InboundTurn,
        adapter: ChannelAdapter,
        sink: MessageSink,
        action: ChannelAction | None = None,
    ) -> None:
        self.turn = turn
        self.adapter = adapter
        self.sink = sink
        self.action = action
        self.outbox: list[OutboundContent] = []

    @property
    def text(self) -> str:
        return self.turn.text or ""

    @property
    def conversation_id(self) -> str:
        return self.turn.conversation_id

    async def send(self, content: OutboundContent) -> None:
        self.outbox.append(content)
        await self.sink.send(self.turn.channel_id, content)

    def resolve_user_id(self) -> str | None:
        """Channel user id of whoever sent this turn, per the channel's rules."""
        return self.adapter.resolve_user_id(self.turn)
