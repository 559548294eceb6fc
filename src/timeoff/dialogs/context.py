"""Dialog context: the begin/continue/end/replace operations over a stack.

Control returns to the turn handler whenever a step suspends (prompts the user
and reports WAITING). The next inbound turn re-enters the active frame through
``continue_dialog``. When a child dialog ends, its parent resumes at the step
after the one that began the child, receiving the child's result.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from timeoff.core.constants import DialogKind, DialogTurnStatus
from timeoff.core.errors import DialogNotFoundError
from timeoff.core.types import DialogFrame, FrameOptions
from timeoff.dialogs.stack import DialogStack
from timeoff.dialogs.turn import TurnContext

logger = logging.getLogger(__name__)


@dataclass
class DialogTurnResult:
    """Outcome of one engine entry point."""

    status: DialogTurnStatus
    result: Any = None


class Dialog(ABC):
    """A dialog that can own frames on the stack."""

    kind: DialogKind

    @abstractmethod
    def default_options(self) -> FrameOptions:
        """Options used when the dialog is begun without any."""
        ...

    @abstractmethod
    async def begin(self, dc: "DialogContext", options: FrameOptions) -> DialogTurnResult:
        """Run when the frame is first pushed."""
        ...

    @abstractmethod
    async def continue_dialog(self, dc: "DialogContext") -> DialogTurnResult:
        """Run when a new turn arrives while this dialog is active."""
        ...

    @abstractmethod
    async def resume(self, dc: "DialogContext", result: Any) -> DialogTurnResult:
        """Run when a child dialog ended and this dialog is active again."""
        ...


class DialogSet:
    """Registry mapping each dialog kind to its dialog object."""

    def __init__(self, dialogs: Iterable[Dialog] = ()) -> None:
        self._dialogs: dict[DialogKind, Dialog] = {}
        for dialog in dialogs:
            self.add(dialog)

    def add(self, dialog: Dialog) -> "DialogSet":
        self._dialogs[dialog.kind] = dialog
        return self

    def find(self, kind: DialogKind) -> Dialog:
        try:
            return self._dialogs[kind]
        except KeyError:
            raise DialogNotFoundError(f"Dialog '{kind.value}' is not registered") from None

    def __contains__(self, kind: object) -> bool:
        return kind in self._dialogs


class DialogContext:
    """Drives the dialogs of one conversation for one turn."""

    def __init__(self, dialogs: DialogSet, stack: DialogStack, turn: TurnContext) -> None:
        self.dialogs = dialogs
        self.stack = stack
        self.turn = turn

    @property
    def active_frame(self) -> DialogFrame | None:
        return self.stack.active

    async def begin_dialog(
        self, kind: DialogKind, options: FrameOptions | None = None
    ) -> DialogTurnResult:
        """Push a frame for ``kind`` and run its first step."""
        dialog = self.dialogs.find(kind)
        frame = self.stack.push(kind, options if options is not None else dialog.default_options())
        logger.info(f"Beginning {kind.value} (depth {len(self.stack)})")
        return await dialog.begin(self, frame.options)

    async def continue_dialog(self) -> DialogTurnResult:
        """Re-enter the active frame with the current turn."""
        frame = self.active_frame
        if frame is None:
            return DialogTurnResult(DialogTurnStatus.EMPTY)
        dialog = self.dialogs.find(frame.dialog_id)
        return await dialog.continue_dialog(self)

    async def end_dialog(self, result: Any = None) -> DialogTurnResult:
        """Pop the active frame and resume the parent, if any, with ``result``."""
        ended = self.stack.pop()
        logger.info(f"Ended {ended.dialog_id.value} (depth {len(self.stack)})")

        parent = self.active_frame
        if parent is None:
            return DialogTurnResult(DialogTurnStatus.COMPLETE, result)
        return await self.dialogs.find(parent.dialog_id).resume(self, result)

    async def replace_dialog(
        self, kind: DialogKind, options: FrameOptions | None = None
    ) -> DialogTurnResult:
        """Swap the active frame for a fresh ``kind`` frame under the same parent."""
        replaced = self.stack.pop()
        logger.info(f"Replacing {replaced.dialog_id.value} with {kind.value}")
        return await self.begin_dialog(kind, options)

    async def cancel_all_dialogs(self) -> DialogTurnResult:
        """Discard the whole stack."""
        removed = self.stack.clear()
        logger.info(f"Cancelled {len(removed)} dialog(s) on {self.turn.conversation_id}")
        return DialogTurnResult(DialogTurnStatus.CANCELLED)
