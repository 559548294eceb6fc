"""Adapter for channels without real user identities (emulator, webchat, tests).

These channels are used to exercise the flow against production services, so
whenever an identity is needed the configured default user id stands in.
"""

import logging
from typing import Any

from timeoff.channels.base import ChannelAdapter, parse_ack_address
from timeoff.core.constants import ChannelId
from timeoff.core.errors import CorrelationError
from timeoff.core.message_sink import OutboundContent
from timeoff.core.types import ChannelAction, InboundTurn, InteractiveMessage

logger = logging.getLogger(__name__)


class EmulatorChannelAdapter(ChannelAdapter):
    """Text confirmations; identity always comes from configuration."""

    channel_ids = (ChannelId.EMULATOR.value, ChannelId.WEBCHAT.value, ChannelId.TEST.value)

    def __init__(self, default_user_id: str | None = None) -> None:
        self.default_user_id = default_user_id

    def is_action_payload(self, payload: dict[str, Any]) -> bool:
        return "actions" in payload or "value" in payload

    def extract_action(self, turn: InboundTurn) -> ChannelAction:
        payload = turn.channel_payload or {}

        value = _action_value(payload)
        if value is None:
            raise CorrelationError(f"{turn.channel_id} payload carries no action value")

        user = payload.get("user")
        user_id = user.get("id") if isinstance(user, dict) else None
        substituted = False
        if not isinstance(user_id, str) or not user_id:
            user_id = self._default_identity(turn)
            substituted = True

        return ChannelAction(
            channel_id=turn.channel_id,
            value=value,
            responding_user_id=user_id,
            ack_address=self.build_ack_address(payload),
            identity_substituted=substituted,
        )

    def build_ack_address(self, payload: dict[str, Any]) -> str | None:
        return parse_ack_address(payload.get("response_url"))

    def build_confirmation_message(self, message: InteractiveMessage) -> OutboundContent:
        choices = " or ".join(
            f"({position}) {action.text}" for position, action in enumerate(message.actions, 1)
        )
        return f"{message.title} {choices}" if choices else message.title

    def resolve_user_id(self, turn: InboundTurn) -> str | None:
        if self.default_user_id is None:
            logger.warning(f"No default identity configured for {turn.channel_id} turns")
            return None
        logger.warning(
            f"Substituting default identity {self.default_user_id} for "
            f"{turn.channel_id} user {turn.from_id}"
        )
        return self.default_user_id

    def _default_identity(self, turn: InboundTurn) -> str:
        user_id = self.resolve_user_id(turn)
        if user_id is None:
            raise CorrelationError(f"{turn.channel_id} action has no user and no default identity")
        return user_id


def _action_value(payload: dict[str, Any]) -> str | None:
    actions = payload.get("actions")
    if isinstance(actions, list) and actions and isinstance(actions[0], dict):
        value = actions[0].get("value")
    else:
        value = payload.get("value")
    return value if isinstance(value, str) and value else None
