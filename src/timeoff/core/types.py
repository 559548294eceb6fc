"""Core type definitions.

Everything persisted between turns is a pydantic model that round-trips
through ``model_dump(mode="json")`` so LangGraph checkpointers can store it.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from timeoff.core.constants import DialogKind

# =============================================================================
# DATE EXPRESSIONS
# =============================================================================


class SingleDate(BaseModel):
    """A single, fully resolved calendar date."""

    type: Literal["date"] = "date"
    value: str


class DateRange(BaseModel):
    """A fully resolved, inclusive range of calendar dates."""

    type: Literal["daterange"] = "daterange"
    start: str
    end: str


class AmbiguousDate(BaseModel):
    """A date expression that still needs clarification (e.g. missing year)."""

    type: Literal["ambiguous"] = "ambiguous"
    raw: str


DateExpression = Annotated[SingleDate | DateRange | AmbiguousDate, Field(discriminator="type")]


# =============================================================================
# OUTBOUND ARTIFACTS
# =============================================================================


class ApprovalRequest(BaseModel):
    """The only artifact sent to the approval service. Immutable once built."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    requester_identity: str = Field(serialization_alias="user")
    start_date: str = Field(serialization_alias="startDate")
    end_date: str = Field(serialization_alias="endDate")

    def to_payload(self) -> dict[str, str]:
        """Wire format expected by the approval endpoint."""
        return self.model_dump(by_alias=True)


class MessageAction(BaseModel):
    """A button offered on an interactive message."""

    id: str
    text: str
    value: str
    style: Literal["primary", "danger", "default"] = "default"


class InteractiveMessage(BaseModel):
    """Channel-neutral interactive message; adapters render it for their channel."""

    title: str
    actions: list[MessageAction] = Field(default_factory=list)


# =============================================================================
# DIALOG OPTIONS AND FRAMES
# =============================================================================


class VacationRequestOptions(BaseModel):
    """Data collected by the vacation request flow."""

    kind: Literal["vacation_request"] = "vacation_request"
    vacation_date: DateExpression | None = None
    start_date: str | None = None
    end_date: str | None = None
    approval_request: ApprovalRequest | None = None


class DateResolverOptions(BaseModel):
    """Prompt texts for one date resolver frame."""

    kind: Literal["date_resolver"] = "date_resolver"
    prompt: str
    retry_prompt: str


FrameOptions = Annotated[VacationRequestOptions | DateResolverOptions, Field(discriminator="kind")]


class DialogFrame(BaseModel):
    """One activation record of a dialog on the stack."""

    model_config = ConfigDict(validate_assignment=True)

    dialog_id: DialogKind
    step_index: int = Field(default=0, ge=0)
    options: FrameOptions


class ConversationState(BaseModel):
    """Per-conversation persisted record owning the dialog stack."""

    conversation_id: str
    frames: list[DialogFrame] = Field(default_factory=list)


# =============================================================================
# INBOUND
# =============================================================================


class InboundTurn(BaseModel):
    """A single inbound activity delivered by the host."""

    conversation_id: str
    channel_id: str = "emulator"
    text: str = ""
    from_id: str | None = None
    channel_payload: dict[str, Any] | None = None


class ChannelAction(BaseModel):
    """A button click on a previously sent interactive message."""

    channel_id: str
    value: str
    responding_user_id: str
    ack_address: str | None = None
    identity_substituted: bool = False


class RecognizerResult(BaseModel):
    """Structured output of the intent/date recognizer."""

    intent: str | None = None
    vacation_date: DateExpression | None = None
