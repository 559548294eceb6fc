"""Core types, errors and ports."""

from timeoff.core.constants import DialogKind, DialogTurnStatus
from timeoff.core.errors import (
    ConfigError,
    CorrelationError,
    DialogError,
    DialogStackError,
    DownstreamCallError,
    RecognitionError,
    TimeoffError,
)
from timeoff.core.types import (
    AmbiguousDate,
    ApprovalRequest,
    ChannelAction,
    ConversationState,
    DateRange,
    DialogFrame,
    InboundTurn,
    SingleDate,
    VacationRequestOptions,
)

__all__ = [
    "AmbiguousDate",
    "ApprovalRequest",
    "ChannelAction",
    "ConfigError",
    "ConversationState",
    "CorrelationError",
    "DateRange",
    "DialogError",
    "DialogFrame",
    "DialogKind",
    "DialogStackError",
    "DialogTurnStatus",
    "DownstreamCallError",
    "InboundTurn",
    "RecognitionError",
    "SingleDate",
    "TimeoffError",
    "VacationRequestOptions",
]
