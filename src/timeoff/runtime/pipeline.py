"""Turn pipeline builder.

Graph structure:
    correlate -> interrupt -> dispatch

correlate ends the turn on a correlation failure, interrupt ends it when a
keyword was handled.
"""

from typing import Any

from langgraph.checkpoint.base import BaseCheckpointSaver
from langgraph.graph import END, START, StateGraph
from langgraph.graph.state import CompiledStateGraph

from timeoff.runtime.context import PipelineContext, TurnState
from timeoff.runtime.nodes import (
    correlate_node,
    dispatch_node,
    interrupt_node,
    route_after_correlate,
    route_after_interrupt,
)


def build_turn_pipeline(
    checkpointer: BaseCheckpointSaver | None = None,
) -> CompiledStateGraph[TurnState, PipelineContext, Any, Any]:
    """Build the turn pipeline, persisting state per thread with ``checkpointer``."""
    builder: StateGraph[TurnState, PipelineContext] = StateGraph(
        TurnState, context_schema=PipelineContext
    )

    builder.add_node("correlate", correlate_node)
    builder.add_node("interrupt", interrupt_node)
    builder.add_node("dispatch", dispatch_node)

    builder.add_edge(START, "correlate")
    builder.add_conditional_edges(
        "correlate", route_after_correlate, {"interrupt": "interrupt", "end": END}
    )
    builder.add_conditional_edges(
        "interrupt", route_after_interrupt, {"dispatch": "dispatch", "end": END}
    )
    builder.add_edge("dispatch", END)

    return builder.compile(checkpointer=checkpointer)
