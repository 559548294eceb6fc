"""Tests for the Slack and emulator channel adapters."""

import pytest

from timeoff.channels.emulator import EmulatorChannelAdapter
from timeoff.channels.slack import CONFIRMATION_CALLBACK_ID, SlackChannelAdapter
from timeoff.core.errors import CorrelationError
from timeoff.core.types import InboundTurn, InteractiveMessage, MessageAction

CONFIRMATION = InteractiveMessage(
    title="Please confirm?",
    actions=[
        MessageAction(id="confirm/yes", text="Yes", value="yes", style="primary"),
        MessageAction(id="confirm/no", text="No", value="no", style="danger"),
    ],
)


def _turn(channel_id, payload, from_id=None):
    return InboundTurn(
        conversation_id="C1", channel_id=channel_id, channel_payload=payload, from_id=from_id
    )


class TestSlackChannelAdapter:
    """Tests for Slack payload reading and message rendering."""

    def test_extract_action(self):
        """Test that value, user and response_url are read from the payload."""
        # Arrange
        payload = {
            "type": "interactive_message",
            "actions": [{"name": "confirm/yes", "value": "yes"}],
            "user": {"id": "U123"},
            "response_url": "https://hooks.slack.com/actions/x",
        }

        # Act
        action = SlackChannelAdapter().extract_action(_turn("slack", payload))

        # Assert
        assert action.value == "yes"
        assert action.responding_user_id == "U123"
        assert action.ack_address == "https://hooks.slack.com/actions/x"
        assert action.identity_substituted is False

    def test_missing_response_url_is_allowed(self):
        """Test that an action without response_url still correlates, with no ack address."""
        payload = {"actions": [{"value": "no"}], "user": {"id": "U1"}}

        action = SlackChannelAdapter().extract_action(_turn("slack", payload))

        assert action.ack_address is None

    @pytest.mark.parametrize(
        "response_url",
        [
            "https://hooks.slack.com/actions/a\x00b",
            "https://hooks.slack.com/" + "a" * 70_000,
            "javascript:alert(1)",
            "/actions/relative",
        ],
    )
    def test_unusable_response_url_gives_no_ack_address(self, response_url):
        """Test that an address httpx cannot post to is dropped instead of kept."""
        payload = {
            "actions": [{"value": "yes"}],
            "user": {"id": "U1"},
            "response_url": response_url,
        }

        action = SlackChannelAdapter().extract_action(_turn("slack", payload))

        assert action.value == "yes"
        assert action.ack_address is None

    @pytest.mark.parametrize(
        "payload",
        [
            {"actions": [{"value": "yes"}]},
            {"actions": [{"value": "yes"}], "user": {}},
            {"actions": [], "user": {"id": "U1"}},
            {"actions": [{"name": "confirm/yes"}], "user": {"id": "U1"}},
            {"actions": "yes", "user": {"id": "U1"}},
        ],
    )
    def test_malformed_payload_raises(self, payload):
        """Test that missing value or user id is a correlation error."""
        with pytest.raises(CorrelationError):
            SlackChannelAdapter().extract_action(_turn("slack", payload))

    def test_is_action_payload(self):
        adapter = SlackChannelAdapter()

        assert adapter.is_action_payload({"type": "block_actions"})
        assert adapter.is_action_payload({"actions": []})
        assert not adapter.is_action_payload({"type": "event_callback"})

    def test_confirmation_renders_buttons(self):
        """Test that the confirmation becomes a legacy attachment with buttons."""
        message = SlackChannelAdapter().build_confirmation_message(CONFIRMATION)

        attachment = message["attachments"][0]
        assert message["text"] == "Please confirm?"
        assert attachment["callback_id"] == CONFIRMATION_CALLBACK_ID
        assert [(a["text"], a["value"], a["style"]) for a in attachment["actions"]] == [
            ("Yes", "yes", "primary"),
            ("No", "no", "danger"),
        ]


class TestEmulatorChannelAdapter:
    """Tests for channels without real identities."""

    def test_action_without_user_uses_default_identity(self):
        """Test that the configured default stands in and the substitution is flagged."""
        adapter = EmulatorChannelAdapter(default_user_id="U-DEFAULT")

        action = adapter.extract_action(_turn("emulator", {"value": "yes"}))

        assert action.responding_user_id == "U-DEFAULT"
        assert action.identity_substituted is True

    def test_action_with_user_keeps_it(self):
        adapter = EmulatorChannelAdapter(default_user_id="U-DEFAULT")

        action = adapter.extract_action(
            _turn("webchat", {"actions": [{"value": "no"}], "user": {"id": "U9"}})
        )

        assert action.value == "no"
        assert action.responding_user_id == "U9"
        assert action.identity_substituted is False

    def test_unusable_response_url_gives_no_ack_address(self):
        adapter = EmulatorChannelAdapter(default_user_id="U-DEFAULT")
        payload = {"value": "yes", "response_url": "http://localhost/\x07ack"}

        action = adapter.extract_action(_turn("emulator", payload))

        assert action.ack_address is None

    def test_action_without_user_or_default_raises(self):
        """Test that with no identity at all the action cannot be correlated."""
        with pytest.raises(CorrelationError):
            EmulatorChannelAdapter().extract_action(_turn("emulator", {"value": "yes"}))

    def test_action_without_value_raises(self):
        with pytest.raises(CorrelationError):
            EmulatorChannelAdapter("U-DEFAULT").extract_action(_turn("emulator", {"value": ""}))

    def test_text_turn_identity_is_the_default(self):
        """Test that typed turns are attributed to the default identity."""
        adapter = EmulatorChannelAdapter(default_user_id="U-DEFAULT")

        assert adapter.resolve_user_id(_turn("emulator", None, from_id="someone")) == "U-DEFAULT"
        assert EmulatorChannelAdapter().resolve_user_id(_turn("emulator", None)) is None

    def test_confirmation_is_text(self):
        """Test that the confirmation is rendered as numbered text choices."""
        message = EmulatorChannelAdapter().build_confirmation_message(CONFIRMATION)

        assert message == "Please confirm? (1) Yes or (2) No"
