"""End-to-end tests for VacationBot with a real LangGraph MemorySaver."""

import asyncio

import httpx
import pytest
from langgraph.checkpoint.memory import MemorySaver

from timeoff.approval.notifier import ApprovalNotifier
from timeoff.approval.profiles import StaticProfileDirectory
from timeoff.channels.base import CorrelationKind
from timeoff.core.constants import CONFIRMATION_STEP_INDEX, DialogKind, DialogTurnStatus
from timeoff.core.errors import RecognitionError
from timeoff.core.types import ApprovalRequest, DateRange, InboundTurn, RecognizerResult
from timeoff.dialogs.date_resolver import RETRY_PROMPT
from timeoff.dialogs.interrupts import CANCEL_TEXT, HELP_TEXT
from timeoff.dialogs.vacation import END_DATE_PROMPT, START_DATE_PROMPT
from timeoff.runtime.bot import VacationBot

RANGE_RESULT = RecognizerResult(
    intent="request_vacation", vacation_date=DateRange(start="2024-07-01", end="2024-07-05")
)
RESPONSE_URL = "https://hooks.slack.com/actions/T1/1/abc"


def text(body: str, conversation_id: str = "conv-1", channel_id: str = "emulator"):
    return InboundTurn(
        conversation_id=conversation_id, channel_id=channel_id, text=body, from_id="U-TEXT"
    )


def slack_click(value: str, user: dict | None = None, conversation_id: str = "C1"):
    payload = {
        "type": "interactive_message",
        "actions": [{"name": f"confirm/{value}", "value": value}],
        "channel": {"id": conversation_id},
        "response_url": RESPONSE_URL,
    }
    if user is not None:
        payload["user"] = user
    return InboundTurn(conversation_id=conversation_id, channel_id="slack", channel_payload=payload)


pytestmark = pytest.mark.integration


class TestTextConversation:
    """A whole request typed in one conversation."""

    @pytest.mark.asyncio
    async def test_range_request_confirmed_by_text(self, bot, recognizer, notifier):
        """Test that a recognized range goes to confirmation and 'yes' submits it."""
        # Arrange
        recognizer.recognize.return_value = RANGE_RESULT

        # Act
        first = await bot.process_turn(text("I want vacation from July 1st to 5th 2024"))
        second = await bot.process_turn(text("yes"))

        # Assert
        assert first.correlation == CorrelationKind.TEXT
        assert first.status == DialogTurnStatus.WAITING
        assert first.responses == [
            "Please confirm, I have you requesting vacation from: 2024-07-01 to: 2024-07-05. "
            "(1) Yes or (2) No"
        ]
        assert second.status == DialogTurnStatus.COMPLETE
        assert second.responses == [
            "Vacation request submitted for approval, from: 2024-07-01 to: 2024-07-05."
        ]
        notifier.finalize.assert_awaited_once()
        assert notifier.finalize.await_args.args == ("U-DEFAULT", "2024-07-01", "2024-07-05")
        assert (await bot.get_conversation("conv-1")).frames == []

    @pytest.mark.asyncio
    async def test_dates_collected_through_resolvers(self, bot):
        """Test that missing dates are asked for and ambiguous replies are retried."""
        replies = []
        for body in ["I need some time off", "next Friday", "2024-07-01", "2024-07-02"]:
            replies.extend((await bot.process_turn(text(body))).responses)

        assert replies[:3] == [START_DATE_PROMPT, RETRY_PROMPT, END_DATE_PROMPT]
        assert replies[3].startswith(
            "Please confirm, I have you requesting vacation from: 2024-07-01 to: 2024-07-02."
        )
        state = await bot.get_conversation("conv-1")
        assert state.frames[-1].step_index == CONFIRMATION_STEP_INDEX

    @pytest.mark.asyncio
    async def test_help_and_cancel(self, bot):
        """Test that help keeps the stack and cancel empties it at any depth."""
        await bot.process_turn(text("vacation"))

        helped = await bot.process_turn(text("help"))
        assert helped.responses == [HELP_TEXT]
        assert len((await bot.get_conversation("conv-1")).frames) == 2

        cancelled = await bot.process_turn(text("cancel"))
        assert cancelled.status == DialogTurnStatus.CANCELLED
        assert cancelled.responses == [CANCEL_TEXT]
        assert (await bot.get_conversation("conv-1")).frames == []

    @pytest.mark.asyncio
    async def test_recognizer_failure_starts_without_date(self, bot, recognizer):
        """Test that a failing recognizer degrades to asking for the dates."""
        recognizer.recognize.side_effect = RecognitionError("timeout")

        outcome = await bot.process_turn(text("vacation on July 1st"))

        assert outcome.status == DialogTurnStatus.WAITING
        assert outcome.responses == [START_DATE_PROMPT]

    @pytest.mark.asyncio
    async def test_other_intent_is_not_understood(self, bot, config, recognizer):
        recognizer.recognize.return_value = RecognizerResult(intent="none")

        outcome = await bot.process_turn(text("what's the weather?"))

        assert outcome.responses == [config.messages.not_understood]
        assert (await bot.get_conversation("conv-1")).frames == []

    @pytest.mark.asyncio
    async def test_conversations_are_independent(self, bot, recognizer):
        recognizer.recognize.return_value = RANGE_RESULT

        await asyncio.gather(
            bot.process_turn(text("vacation", conversation_id="a")),
            bot.process_turn(text("vacation", conversation_id="b")),
        )
        await bot.process_turn(text("cancel", conversation_id="a"))

        assert (await bot.get_conversation("a")).frames == []
        assert len((await bot.get_conversation("b")).frames) == 1

    @pytest.mark.asyncio
    async def test_state_is_persisted_between_turns(self, bot):
        await bot.process_turn(text("vacation"))

        state = await bot.get_conversation("conv-1")

        assert [frame.dialog_id for frame in state.frames] == [
            DialogKind.VACATION_REQUEST,
            DialogKind.START_DATE_RESOLVER,
        ]

    @pytest.mark.asyncio
    async def test_checkpoint_does_not_grow_with_turns(self, bot):
        """Test that repeated turns keep the persisted thread state to a fixed set of keys."""
        # Arrange
        await bot.process_turn(text("vacation"))

        # Act
        for _ in range(20):
            await bot.process_turn(text("help"))

        # Assert
        snapshot = await bot._require_graph().aget_state(bot._thread("conv-1"))
        assert "messages" not in snapshot.values
        assert len((await bot.get_conversation("conv-1")).frames) == 2

    @pytest.mark.asyncio
    async def test_result_only_on_the_completing_turn(self, bot, recognizer):
        recognizer.recognize.return_value = RANGE_RESULT

        pending = await bot.process_turn(text("vacation"))
        done = await bot.process_turn(text("yes"))

        assert pending.result is None
        assert done.result is not None
        assert done.result.start_date == "2024-07-01"
        assert done.result.approval_request is not None

    @pytest.mark.asyncio
    async def test_conversation_locks_are_released(self, bot):
        """Test that locks of idle conversations are not kept around."""
        await asyncio.gather(
            bot.process_turn(text("vacation")),
            bot.process_turn(text("help")),
            bot.process_turn(text("vacation", conversation_id="other")),
        )

        assert bot._locks == {}
        assert not bot._lock_users


class TestSlackConfirmation:
    """Confirmation answered later through a Slack button."""

    async def _pending(self, bot, recognizer):
        recognizer.recognize.return_value = RANGE_RESULT
        outcome = await bot.process_turn(
            text("vacation July 1-5", conversation_id="C1", channel_id="slack")
        )
        assert outcome.responses[0]["attachments"][0]["actions"][0]["value"] == "yes"

    @pytest.mark.asyncio
    async def test_yes_click_submits_and_acknowledges(self, bot, recognizer, notifier):
        """Test that a yes click finalizes for the clicking user with an ack address."""
        # Arrange
        await self._pending(bot, recognizer)

        # Act
        outcome = await bot.process_turn(slack_click("yes", user={"id": "U123"}))

        # Assert
        assert outcome.correlation == CorrelationKind.ACTION
        assert outcome.status == DialogTurnStatus.COMPLETE
        assert outcome.responses == []
        notifier.finalize.assert_awaited_once()
        call = notifier.finalize.await_args
        assert call.args == ("U123", "2024-07-01", "2024-07-05")
        assert call.kwargs["ack_address"] == RESPONSE_URL
        assert (await bot.get_conversation("C1")).frames == []
        assert outcome.result is not None
        assert outcome.result.approval_request == ApprovalRequest(
            requester_identity="U123@example.com", start_date="2024-07-01", end_date="2024-07-05"
        )

    @pytest.mark.asyncio
    async def test_no_click_restarts(self, bot, recognizer, notifier):
        """Test that a no click restarts the flow with dates cleared."""
        await self._pending(bot, recognizer)

        outcome = await bot.process_turn(slack_click("no", user={"id": "U123"}))

        assert outcome.status == DialogTurnStatus.WAITING
        assert outcome.responses == [START_DATE_PROMPT]
        notifier.finalize.assert_not_awaited()
        root = (await bot.get_conversation("C1")).frames[0]
        assert root.options.start_date is None
        assert root.options.end_date is None
        assert root.options.vacation_date is None

    @pytest.mark.asyncio
    async def test_malformed_click_is_an_idempotent_no_op(self, bot, recognizer, notifier):
        """Test that a click without user.id changes nothing, however often it arrives."""
        # Arrange
        await self._pending(bot, recognizer)
        before = await bot.get_conversation("C1")

        # Act
        outcomes = [await bot.process_turn(slack_click("yes")) for _ in range(2)]

        # Assert
        for outcome in outcomes:
            assert outcome.correlation == CorrelationKind.FAILURE
            assert outcome.status is None
            assert outcome.responses == []
        assert await bot.get_conversation("C1") == before
        notifier.finalize.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_click_is_ignored(self, bot, recognizer, notifier):
        """Test that a second click after finalizing does not submit again."""
        await self._pending(bot, recognizer)
        await bot.process_turn(slack_click("yes", user={"id": "U123"}))

        duplicate = await bot.process_turn(slack_click("yes", user={"id": "U123"}))

        assert duplicate.correlation == CorrelationKind.FAILURE
        notifier.finalize.assert_awaited_once()


class TestSlackConfirmationWithRealNotifier:
    """The Slack click path with the approval notifier talking to a mock transport."""

    APPROVAL_URL = "https://approvals.example.com/requests"

    @pytest.mark.asyncio
    async def test_malformed_response_url_submits_once(self, config, sink, recognizer):
        """Test that a click with an unusable response_url completes and cannot resubmit."""
        # Arrange
        posted: list[str] = []

        def handle(request: httpx.Request) -> httpx.Response:
            posted.append(str(request.url))
            return httpx.Response(200, json={})

        notifier = ApprovalNotifier(
            StaticProfileDirectory({"U123": "u123@example.com"}),
            self.APPROVAL_URL,
            transport=httpx.MockTransport(handle),
        )
        recognizer.recognize.return_value = RANGE_RESULT
        click = slack_click("yes", user={"id": "U123"})
        assert click.channel_payload is not None
        click.channel_payload["response_url"] = "https://hooks.slack.com/actions/a\x00b"

        async with VacationBot(
            config, MemorySaver(), sink=sink, recognizer=recognizer, notifier=notifier
        ) as bot:
            await bot.process_turn(
                text("vacation July 1-5", conversation_id="C1", channel_id="slack")
            )

            # Act
            first = await bot.process_turn(click)
            second = await bot.process_turn(click)

            # Assert
            assert first.status == DialogTurnStatus.COMPLETE
            assert second.correlation == CorrelationKind.FAILURE
            assert posted == [self.APPROVAL_URL]
            assert (await bot.get_conversation("C1")).frames == []
