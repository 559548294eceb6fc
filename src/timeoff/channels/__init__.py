"""Channel adapters and the callback correlator."""

from timeoff.channels.base import ChannelAdapter, CorrelationKind, CorrelationOutcome
from timeoff.channels.correlator import (
    ChannelCallbackCorrelator,
    ChannelRegistry,
    has_pending_confirmation,
)
from timeoff.channels.emulator import EmulatorChannelAdapter
from timeoff.channels.slack import SlackChannelAdapter

__all__ = [
    "ChannelAdapter",
    "ChannelCallbackCorrelator",
    "ChannelRegistry",
    "CorrelationKind",
    "CorrelationOutcome",
    "EmulatorChannelAdapter",
    "SlackChannelAdapter",
    "has_pending_confirmation",
]
