"""API Models - Pydantic models for FastAPI endpoints."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from timeoff.channels.base import CorrelationKind
from timeoff.core.constants import DialogTurnStatus
from timeoff.core.types import DialogFrame, VacationRequestOptions


class TurnResponse(BaseModel):
    """Result of processing one inbound turn."""

    conversation_id: str
    correlation: CorrelationKind = Field(description="text, action or failure")
    status: DialogTurnStatus | None = Field(
        default=None, description="Dialog status after the turn; None when the turn was ignored"
    )
    responses: list[str | dict[str, Any]] = Field(
        default_factory=list, description="Messages sent during the turn, in order"
    )
    reason: str | None = Field(default=None, description="Why a channel action was ignored")
    result: VacationRequestOptions | None = Field(
        default=None, description="The finished request, when the turn completed one"
    )


class ConversationResponse(BaseModel):
    """Snapshot of a conversation's dialog stack."""

    conversation_id: str
    active_dialog: str | None
    pending_confirmation: bool
    frames: list[DialogFrame]


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "starting"]
    version: str
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())
