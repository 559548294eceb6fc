"""Shared fixtures for timeoff tests.

Ports are mocked with AsyncMock so tests are deterministic and never call a
language model or the network.
"""

from unittest.mock import AsyncMock

import pytest

from timeoff.approval.notifier import ApprovalNotifier
from timeoff.channels.correlator import ChannelRegistry
from timeoff.core.constants import DialogKind
from timeoff.core.message_sink import BufferedMessageSink
from timeoff.core.types import (
    ApprovalRequest,
    ChannelAction,
    ConversationState,
    InboundTurn,
    RecognizerResult,
)
from timeoff.dates.extractor import RegexTimexExtractor
from timeoff.dates.timex import TimexAmbiguityClassifier
from timeoff.dialogs.context import DialogContext, DialogSet, DialogTurnResult
from timeoff.dialogs.date_resolver import DateResolverDialog
from timeoff.dialogs.interrupts import InterruptLayer
from timeoff.dialogs.stack import DialogStack
from timeoff.dialogs.turn import TurnContext
from timeoff.dialogs.vacation import END_DATE_PROMPT, START_DATE_PROMPT, VacationRequestDialog

DEFAULT_USER_ID = "U-DEFAULT"


@pytest.fixture
def notifier():
    """ApprovalNotifier mock whose finalize echoes an ApprovalRequest."""
    mock = AsyncMock(spec=ApprovalNotifier)

    async def finalize(user_id, start_date, end_date, *, summary, ack_address=None):
        if user_id is None:
            return None
        return ApprovalRequest(
            requester_identity=f"{user_id}@example.com",
            start_date=start_date,
            end_date=end_date,
        )

    mock.finalize.side_effect = finalize
    return mock


@pytest.fixture
def recognizer():
    """Recognizer mock that recognizes the vacation intent without a date."""
    mock = AsyncMock()
    mock.recognize.return_value = RecognizerResult(intent="request_vacation")
    return mock


class DialogHarness:
    """Drives the vacation dialogs over one in-memory conversation.

    Each call to ``say`` is one turn: interrupts first, then the stack.
    """

    def __init__(self, notifier: ApprovalNotifier, default_user_id: str | None = DEFAULT_USER_ID):
        extractor = RegexTimexExtractor()
        classifier = TimexAmbiguityClassifier()
        self.registry = ChannelRegistry.default(default_user_id)
        self.dialogs = DialogSet(
            [
                VacationRequestDialog(notifier),
                DateResolverDialog(
                    DialogKind.START_DATE_RESOLVER, START_DATE_PROMPT, extractor, classifier
                ),
                DateResolverDialog(
                    DialogKind.END_DATE_RESOLVER, END_DATE_PROMPT, extractor, classifier
                ),
            ]
        )
        self.interrupts = InterruptLayer()
        self.state = ConversationState(conversation_id="conv-1")
        self.sink = BufferedMessageSink()

    @property
    def sent(self):
        return self.sink.contents

    def context(
        self,
        text: str = "",
        channel_id: str = "test",
        action: ChannelAction | None = None,
        from_id: str | None = "U-TEXT",
    ) -> DialogContext:
        turn = InboundTurn(
            conversation_id=self.state.conversation_id,
            channel_id=channel_id,
            text=text,
            from_id=from_id,
        )
        turn_ctx = TurnContext(turn, self.registry.for_channel(channel_id), self.sink, action)
        return DialogContext(self.dialogs, DialogStack(self.state), turn_ctx)

    async def say(self, text: str, **kwargs) -> DialogTurnResult:
        dc = self.context(text, **kwargs)
        intercepted = await self.interrupts.intercept(dc)
        if intercepted is not None:
            return intercepted
        return await dc.continue_dialog()


@pytest.fixture
def harness(notifier):
    return DialogHarness(notifier)
