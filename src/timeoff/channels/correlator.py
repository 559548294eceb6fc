"""Maps inbound turns back to the confirmation they answer.

A click on a confirmation message can arrive long after the conversation went
quiet, as a turn that carries nothing but the channel's action payload. The
correlator decides whether such a turn is ordinary text, a usable action for
the confirmation pending on the stack, or something to ignore.
"""

import logging
from collections.abc import Iterable

from timeoff.channels.base import ChannelAdapter, CorrelationOutcome
from timeoff.channels.emulator import EmulatorChannelAdapter
from timeoff.channels.slack import SlackChannelAdapter
from timeoff.core.constants import CONFIRMATION_STEP_INDEX, DialogKind
from timeoff.core.errors import CorrelationError
from timeoff.core.types import ConversationState, InboundTurn

logger = logging.getLogger(__name__)


class ChannelRegistry:
    """Adapters keyed by channel id, with a fallback for unknown channels."""

    def __init__(self, adapters: Iterable[ChannelAdapter], fallback: ChannelAdapter) -> None:
        self._adapters: dict[str, ChannelAdapter] = {}
        for adapter in adapters:
            for channel_id in adapter.channel_ids:
                self._adapters[channel_id] = adapter
        self.fallback = fallback

    @classmethod
    def default(cls, default_user_id: str | None = None) -> "ChannelRegistry":
        emulator = EmulatorChannelAdapter(default_user_id)
        return cls([SlackChannelAdapter(), emulator], fallback=emulator)

    def for_channel(self, channel_id: str) -> ChannelAdapter:
        return self._adapters.get(channel_id, self.fallback)


def has_pending_confirmation(state: ConversationState) -> bool:
    """Whether the active frame is a vacation request waiting on its confirmation."""
    if not state.frames:
        return False
    frame = state.frames[-1]
    return (
        frame.dialog_id == DialogKind.VACATION_REQUEST
        and frame.step_index == CONFIRMATION_STEP_INDEX
    )


class ChannelCallbackCorrelator:
    """Classifies each inbound turn as text, a matched action or a failure."""

    def __init__(self, registry: ChannelRegistry) -> None:
        self.registry = registry

    def correlate(self, turn: InboundTurn, state: ConversationState) -> CorrelationOutcome:
        payload = turn.channel_payload
        if not payload:
            return CorrelationOutcome.text()

        adapter = self.registry.for_channel(turn.channel_id)
        if not adapter.is_action_payload(payload):
            if turn.text:
                return CorrelationOutcome.text()
            return self._fail(turn, "payload is not an action and the turn has no text")

        try:
            action = adapter.extract_action(turn)
        except CorrelationError as e:
            return self._fail(turn, str(e))

        if not has_pending_confirmation(state):
            return self._fail(turn, "no confirmation is pending")

        if action.identity_substituted:
            logger.warning(
                f"Action on {turn.channel_id} attributed to default identity "
                f"{action.responding_user_id}"
            )
        logger.info(
            f"Correlated {turn.channel_id} action '{action.value}' from "
            f"{action.responding_user_id} to {turn.conversation_id}"
        )
        return CorrelationOutcome.matched(action)

    def _fail(self, turn: InboundTurn, reason: str) -> CorrelationOutcome:
        logger.warning(
            f"Correlation failed for {turn.channel_id} turn on {turn.conversation_id}: {reason}"
        )
        return CorrelationOutcome.failure(reason)
