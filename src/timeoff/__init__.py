"""timeoff - a vacation request bot.

A stack-based dialog engine drives the request flow: it collects the dates,
asks for confirmation (in the conversation or through a channel button) and
forwards the confirmed request to an approval service.

Quick start:
    from timeoff import InboundTurn, VacationBot

    async with VacationBot() as bot:
        outcome = await bot.process_turn(
            InboundTurn(conversation_id="c1", text="I need a vacation")
        )
"""

from timeoff.__version__ import __version__
from timeoff.config import ConfigLoader, TimeoffConfig
from timeoff.core.errors import TimeoffError
from timeoff.core.types import ConversationState, InboundTurn
from timeoff.runtime import TurnOutcome, VacationBot

__all__ = [
    "__version__",
    "ConfigLoader",
    "ConversationState",
    "InboundTurn",
    "TimeoffConfig",
    "TimeoffError",
    "TurnOutcome",
    "VacationBot",
]
