"""Stack-based dialog engine and the vacation request dialogs."""

from timeoff.dialogs.context import Dialog, DialogContext, DialogSet, DialogTurnResult
from timeoff.dialogs.date_resolver import DateResolverDialog
from timeoff.dialogs.interrupts import InterruptLayer
from timeoff.dialogs.stack import DialogStack
from timeoff.dialogs.turn import TurnContext
from timeoff.dialogs.vacation import VacationRequestDialog
from timeoff.dialogs.waterfall import WaterfallDialog, WaterfallStep

__all__ = [
    "DateResolverDialog",
    "Dialog",
    "DialogContext",
    "DialogSet",
    "DialogStack",
    "DialogTurnResult",
    "InterruptLayer",
    "TurnContext",
    "VacationRequestDialog",
    "WaterfallDialog",
    "WaterfallStep",
]
