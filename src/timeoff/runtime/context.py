from dataclasses import dataclass
from typing import Any, TypedDict

from timeoff.channels.correlator import ChannelCallbackCorrelator, ChannelRegistry
from timeoff.config.models import MessagesConfig
from timeoff.core.interfaces import IRecognizer
from timeoff.core.message_sink import MessageSink, OutboundContent
from timeoff.dialogs.context import DialogSet
from timeoff.dialogs.interrupts import InterruptLayer


class TurnState(TypedDict, total=False):
    """Graph state for one conversation thread.

    ``conversation`` is the persisted ConversationState; ``turn``,
    ``correlation``, ``status``, ``outbox`` and ``result`` are reset on every
    invocation. ``result`` holds the finished request when the turn completed one.
    """

    turn: dict[str, Any]
    conversation: dict[str, Any]
    correlation: dict[str, Any] | None
    status: str | None
    outbox: list[OutboundContent]
    result: dict[str, Any] | None


@dataclass(frozen=True)
class PipelineContext:
    """Collaborators passed to pipeline nodes via runtime.context."""

    dialogs: DialogSet
    interrupts: InterruptLayer
    registry: ChannelRegistry
    correlator: ChannelCallbackCorrelator
    recognizer: IRecognizer
    sink: MessageSink
    messages: MessagesConfig
