"""Slack adapter: interactive-message buttons and action payloads."""

import logging
from typing import Any

from timeoff.channels.base import ChannelAdapter, parse_ack_address
from timeoff.core.constants import ChannelId
from timeoff.core.errors import CorrelationError
from timeoff.core.message_sink import OutboundContent
from timeoff.core.types import ChannelAction, InboundTurn, InteractiveMessage

logger = logging.getLogger(__name__)

CONFIRMATION_CALLBACK_ID = "vacation_confirmation"
INTERACTIVE_PAYLOAD_TYPES = frozenset({"interactive_message", "block_actions"})


class SlackChannelAdapter(ChannelAdapter):
    """Handles both legacy ``interactive_message`` and Block Kit ``block_actions`` payloads.

    Both shapes carry ``actions[].value``, ``user.id`` and ``response_url``.
    """

    channel_ids = (ChannelId.SLACK.value,)

    def is_action_payload(self, payload: dict[str, Any]) -> bool:
        return "actions" in payload or payload.get("type") in INTERACTIVE_PAYLOAD_TYPES

    def extract_action(self, turn: InboundTurn) -> ChannelAction:
        payload = turn.channel_payload or {}

        actions = payload.get("actions")
        if not isinstance(actions, list) or not actions or not isinstance(actions[0], dict):
            raise CorrelationError("Slack payload carries no actions")

        value = actions[0].get("value")
        if not isinstance(value, str) or not value:
            raise CorrelationError("Slack action carries no value")

        user = payload.get("user")
        user_id = user.get("id") if isinstance(user, dict) else None
        if not isinstance(user_id, str) or not user_id:
            raise CorrelationError("Slack payload carries no user.id")

        ack_address = self.build_ack_address(payload)
        if ack_address is None:
            logger.warning(f"Slack action from {user_id} has no usable response_url; no ack possible")

        return ChannelAction(
            channel_id=turn.channel_id,
            value=value,
            responding_user_id=user_id,
            ack_address=ack_address,
        )

    def build_ack_address(self, payload: dict[str, Any]) -> str | None:
        return parse_ack_address(payload.get("response_url"))

    def build_confirmation_message(self, message: InteractiveMessage) -> OutboundContent:
        return {
            "text": message.title,
            "attachments": [
                {
                    "fallback": message.title,
                    "callback_id": CONFIRMATION_CALLBACK_ID,
                    "attachment_type": "default",
                    "actions": [
                        {
                            "name": action.id,
                            "text": action.text,
                            "type": "button",
                            "value": action.value,
                            "style": action.style,
                        }
                        for action in message.actions
                    ],
                }
            ],
        }
