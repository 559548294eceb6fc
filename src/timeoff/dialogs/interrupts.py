"""Global keyword interrupts.

Runs as a stage ahead of stack dispatch, so every turn is checked no matter
which dialog (or how deep a stack) would otherwise receive it.
"""

import logging
from typing import Literal

from timeoff.core.constants import DialogTurnStatus
from timeoff.dialogs.context import DialogContext, DialogTurnResult

logger = logging.getLogger(__name__)

HELP_TEXT = "I support the following actions: Request Vacation Time"
CANCEL_TEXT = "Cancelling"

HELP_KEYWORDS = frozenset({"help", "?"})
CANCEL_KEYWORDS = frozenset({"cancel", "quit"})

Interrupt = Literal["help", "cancel"]


class InterruptLayer:
    """Short-circuits help and cancel keywords before normal processing."""

    def __init__(self, help_text: str = HELP_TEXT, cancel_text: str = CANCEL_TEXT) -> None:
        self.help_text = help_text
        self.cancel_text = cancel_text

    def classify(self, text: str | None) -> Interrupt | None:
        keyword = (text or "").strip().lower()
        if keyword in HELP_KEYWORDS:
            return "help"
        if keyword in CANCEL_KEYWORDS:
            return "cancel"
        return None

    async def intercept(self, dc: DialogContext) -> DialogTurnResult | None:
        """Handle an interrupt keyword, or return None to let dispatch proceed.

        Help leaves the stack untouched and reports WAITING. Cancel discards the
        whole stack and reports CANCELLED.
        """
        interrupt = self.classify(dc.turn.text)
        if interrupt is None:
            return None

        logger.info(
            f"Interrupt '{interrupt}' on {dc.turn.conversation_id} at depth {len(dc.stack)}"
        )
        if interrupt == "help":
            await dc.turn.send(self.help_text)
            return DialogTurnResult(DialogTurnStatus.WAITING)

        await dc.turn.send(self.cancel_text)
        return await dc.cancel_all_dialogs()
