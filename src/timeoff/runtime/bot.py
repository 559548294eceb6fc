"""VacationBot: wires configuration, dialogs and the turn pipeline together."""

import asyncio
import logging
from collections import Counter
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from langchain_core.runnables import RunnableConfig
from langgraph.checkpoint.base import BaseCheckpointSaver
from langgraph.checkpoint.memory import MemorySaver
from langgraph.graph.state import CompiledStateGraph

from timeoff.approval.notifier import ApprovalNotifier
from timeoff.approval.profiles import SlackProfileDirectory, StaticProfileDirectory
from timeoff.channels.base import CorrelationKind, CorrelationOutcome
from timeoff.channels.correlator import ChannelCallbackCorrelator, ChannelRegistry
from timeoff.config.models import TimeoffConfig
from timeoff.core.constants import DialogKind, DialogTurnStatus
from timeoff.core.interfaces import IDateTokenExtractor, IProfileDirectory, IRecognizer
from timeoff.core.message_sink import MessageSink, NullMessageSink, OutboundContent
from timeoff.core.types import ConversationState, InboundTurn, VacationRequestOptions
from timeoff.dates.extractor import RegexTimexExtractor
from timeoff.dates.timex import TimexAmbiguityClassifier
from timeoff.dialogs.context import DialogSet
from timeoff.dialogs.date_resolver import DateResolverDialog
from timeoff.dialogs.interrupts import InterruptLayer
from timeoff.dialogs.vacation import VacationRequestDialog
from timeoff.du.recognizer import create_recognizer
from timeoff.observability.logging import ContextLogger
from timeoff.runtime.context import PipelineContext, TurnState
from timeoff.runtime.pipeline import build_turn_pipeline

logger = logging.getLogger(__name__)
context_logger = ContextLogger(__name__)


@dataclass
class TurnOutcome:
    """What one inbound turn produced."""

    correlation: CorrelationKind
    status: DialogTurnStatus | None = None
    responses: list[OutboundContent] = field(default_factory=list)
    reason: str | None = None
    result: VacationRequestOptions | None = None


def create_profile_directory(config: TimeoffConfig) -> IProfileDirectory:
    """Slack users.info when a token is configured, otherwise the static identity map."""
    token = config.channels.slack_token
    if token is not None:
        return SlackProfileDirectory(token.get_secret_value(), timeout=config.approval.timeout)
    logger.info("No Slack token configured; using static identities for profile lookups")
    return StaticProfileDirectory(config.channels.identities)


class VacationBot:
    """Turn handler for the vacation request flow.

    Use as an async context manager; turns for the same conversation are
    processed one at a time.
    """

    def __init__(
        self,
        config: TimeoffConfig | None = None,
        checkpointer: BaseCheckpointSaver | None = None,
        *,
        sink: MessageSink | None = None,
        recognizer: IRecognizer | None = None,
        extractor: IDateTokenExtractor | None = None,
        notifier: ApprovalNotifier | None = None,
        registry: ChannelRegistry | None = None,
    ) -> None:
        self.config = config or TimeoffConfig()
        self.checkpointer = checkpointer or MemorySaver()
        self.sink = sink or NullMessageSink()
        self.recognizer = recognizer
        self.extractor = extractor or RegexTimexExtractor()
        self.notifier = notifier
        self.registry = registry or ChannelRegistry.default(self.config.channels.default_user_id)
        self._graph: CompiledStateGraph[TurnState, PipelineContext, Any, Any] | None = None
        self._context: PipelineContext | None = None
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: Counter[str] = Counter()

    async def __aenter__(self) -> "VacationBot":
        """Build the dialogs and compile the turn pipeline."""
        messages = self.config.messages
        recognizer = self.recognizer or create_recognizer(self.config.recognizer)
        notifier = self.notifier or ApprovalNotifier(
            create_profile_directory(self.config),
            self.config.approval.endpoint,
            timeout=self.config.approval.timeout,
        )
        classifier = TimexAmbiguityClassifier()

        dialogs = DialogSet(
            [
                VacationRequestDialog(notifier),
                DateResolverDialog(
                    DialogKind.START_DATE_RESOLVER,
                    messages.start_date_prompt,
                    self.extractor,
                    classifier,
                    retry_prompt=messages.date_retry_prompt,
                ),
                DateResolverDialog(
                    DialogKind.END_DATE_RESOLVER,
                    messages.end_date_prompt,
                    self.extractor,
                    classifier,
                    retry_prompt=messages.date_retry_prompt,
                ),
            ]
        )

        self._context = PipelineContext(
            dialogs=dialogs,
            interrupts=InterruptLayer(help_text=messages.help, cancel_text=messages.cancel),
            registry=self.registry,
            correlator=ChannelCallbackCorrelator(self.registry),
            recognizer=recognizer,
            sink=self.sink,
            messages=messages,
        )
        self._graph = build_turn_pipeline(checkpointer=self.checkpointer)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Cleanup."""
        self._graph = None
        self._context = None

    def _require_graph(self) -> CompiledStateGraph[TurnState, PipelineContext, Any, Any]:
        if self._graph is None or self._context is None:
            raise RuntimeError("VacationBot not initialized. Use 'async with' context.")
        return self._graph

    @staticmethod
    def _thread(conversation_id: str) -> RunnableConfig:
        return {"configurable": {"thread_id": conversation_id}}

    @asynccontextmanager
    async def _conversation_lock(self, conversation_id: str) -> AsyncIterator[None]:
        """Serialize turns of one conversation; idle locks are dropped."""
        lock = self._locks.setdefault(conversation_id, asyncio.Lock())
        self._lock_users[conversation_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[conversation_id] -= 1
            if not self._lock_users[conversation_id]:
                del self._lock_users[conversation_id]
                del self._locks[conversation_id]

    async def process_turn(self, turn: InboundTurn) -> TurnOutcome:
        """Run one inbound turn through correlate -> interrupt -> dispatch."""
        graph = self._require_graph()
        log = context_logger.with_context(
            conversation_id=turn.conversation_id, channel_id=turn.channel_id
        )

        async with self._conversation_lock(turn.conversation_id):
            log.debug(f"Processing {turn.channel_id} turn on {turn.conversation_id}")
            result = await graph.ainvoke(
                {
                    "turn": turn.model_dump(mode="json"),
                    "correlation": None,
                    "status": None,
                    "outbox": [],
                    "result": None,
                },
                config=self._thread(turn.conversation_id),
                context=self._context,
            )

        correlation = CorrelationOutcome.model_validate(result["correlation"])
        status = result.get("status")
        completed = result.get("result")
        outcome = TurnOutcome(
            correlation=correlation.kind,
            status=DialogTurnStatus(status) if status else None,
            responses=list(result.get("outbox") or []),
            reason=correlation.reason,
            result=VacationRequestOptions.model_validate(completed) if completed else None,
        )
        log.info(
            f"Turn on {turn.conversation_id}: {outcome.correlation.value}, "
            f"status={outcome.status.value if outcome.status else None}, "
            f"{len(outcome.responses)} response(s)"
        )
        return outcome

    async def get_conversation(self, conversation_id: str) -> ConversationState:
        """Persisted stack of ``conversation_id`` (empty if it has never been seen)."""
        graph = self._require_graph()
        snapshot = await graph.aget_state(self._thread(conversation_id))
        stored = snapshot.values.get("conversation") if snapshot and snapshot.values else None
        if stored:
            return ConversationState.model_validate(stored)
        return ConversationState(conversation_id=conversation_id)
