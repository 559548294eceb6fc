"""Core constants and enums."""

from enum import Enum


class DialogKind(str, Enum):
    """Dialogs that can own a frame on the stack."""

    VACATION_REQUEST = "vacation_request"
    START_DATE_RESOLVER = "start_date_resolver"
    END_DATE_RESOLVER = "end_date_resolver"


class DialogTurnStatus(str, Enum):
    """Outcome of driving the stack for one turn."""

    EMPTY = "empty"
    WAITING = "waiting"
    COMPLETE = "complete"
    CANCELLED = "cancelled"


class ChannelId(str, Enum):
    """Channels with a dedicated adapter."""

    SLACK = "slack"
    EMULATOR = "emulator"
    WEBCHAT = "webchat"
    TEST = "test"


REQUEST_VACATION_INTENT = "request_vacation"

AFFIRMATIVE_ACTION_ID = "yes"
NEGATIVE_ACTION_ID = "no"

# Position of the confirm step in the vacation request waterfall. A frame
# parked here is the pending confirmation a channel action can answer.
CONFIRMATION_STEP_INDEX = 2
