"""Turn pipeline nodes: correlate, interrupt, dispatch.

Each node rebuilds the dialog objects from the graph state, runs its stage and
returns the updated conversation along with whatever was sent.
"""

import logging
from typing import Any

from langgraph.runtime import Runtime

from timeoff.channels.base import CorrelationKind, CorrelationOutcome
from timeoff.core.constants import REQUEST_VACATION_INTENT, DialogKind, DialogTurnStatus
from timeoff.core.types import (
    ConversationState,
    InboundTurn,
    RecognizerResult,
    VacationRequestOptions,
)
from timeoff.dialogs.context import DialogContext, DialogTurnResult
from timeoff.dialogs.stack import DialogStack
from timeoff.dialogs.turn import TurnContext
from timeoff.runtime.context import PipelineContext, TurnState

logger = logging.getLogger(__name__)


def _load_conversation(state: TurnState, turn: InboundTurn) -> ConversationState:
    stored = state.get("conversation")
    if stored:
        return ConversationState.model_validate(stored)
    return ConversationState(conversation_id=turn.conversation_id)


def _open_dialogs(state: TurnState, ctx: PipelineContext) -> DialogContext:
    turn = InboundTurn.model_validate(state["turn"])
    conversation = _load_conversation(state, turn)

    action = None
    if correlation := state.get("correlation"):
        action = CorrelationOutcome.model_validate(correlation).action

    turn_ctx = TurnContext(turn, ctx.registry.for_channel(turn.channel_id), ctx.sink, action)
    return DialogContext(ctx.dialogs, DialogStack(conversation), turn_ctx)


def _turn_update(dc: DialogContext, result: DialogTurnResult) -> dict[str, Any]:
    completed = None
    if result.status == DialogTurnStatus.COMPLETE and isinstance(
        result.result, VacationRequestOptions
    ):
        completed = result.result.model_dump(mode="json")
    return {
        "conversation": dc.stack.state.model_dump(mode="json"),
        "status": result.status.value,
        "outbox": list(dc.turn.outbox),
        "result": completed,
    }


async def correlate_node(state: TurnState, runtime: Runtime[PipelineContext]) -> dict[str, Any]:
    """Classify the turn as text, a matched channel action or a failure."""
    ctx = runtime.context
    turn = InboundTurn.model_validate(state["turn"])
    conversation = _load_conversation(state, turn)

    outcome = ctx.correlator.correlate(turn, conversation)

    return {
        "conversation": conversation.model_dump(mode="json"),
        "correlation": outcome.model_dump(mode="json"),
    }


async def interrupt_node(state: TurnState, runtime: Runtime[PipelineContext]) -> dict[str, Any]:
    """Help and cancel keywords, checked ahead of the stack."""
    dc = _open_dialogs(state, runtime.context)
    result = await runtime.context.interrupts.intercept(dc)
    if result is None:
        return {}
    return _turn_update(dc, result)


async def dispatch_node(state: TurnState, runtime: Runtime[PipelineContext]) -> dict[str, Any]:
    """Continue the active dialog, or start a vacation request from free text."""
    ctx = runtime.context
    dc = _open_dialogs(state, ctx)

    result = await dc.continue_dialog()
    if result.status == DialogTurnStatus.EMPTY and dc.turn.action is None and dc.turn.text.strip():
        result = await _start_from_text(dc, ctx)

    return _turn_update(dc, result)


async def _start_from_text(dc: DialogContext, ctx: PipelineContext) -> DialogTurnResult:
    try:
        recognized = await ctx.recognizer.recognize(dc.turn.text)
    except Exception as e:
        logger.warning(
            f"Recognizer failed on {dc.turn.conversation_id}; continuing without a date: {e}"
        )
        recognized = RecognizerResult()

    if recognized.intent not in (None, REQUEST_VACATION_INTENT):
        logger.info(f"Unsupported intent '{recognized.intent}' on {dc.turn.conversation_id}")
        await dc.turn.send(ctx.messages.not_understood)
        return DialogTurnResult(DialogTurnStatus.EMPTY)

    options = VacationRequestOptions(vacation_date=recognized.vacation_date)
    return await dc.begin_dialog(DialogKind.VACATION_REQUEST, options)


def route_after_correlate(state: TurnState) -> str:
    correlation = state.get("correlation") or {}
    if correlation.get("kind") == CorrelationKind.FAILURE.value:
        return "end"
    return "interrupt"


def route_after_interrupt(state: TurnState) -> str:
    return "end" if state.get("status") else "dispatch"
