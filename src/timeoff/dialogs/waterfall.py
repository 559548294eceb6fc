"""Waterfall dialogs: ordered steps, one per resumption."""

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from timeoff.core.constants import DialogKind, DialogTurnStatus
from timeoff.core.errors import DialogError, DialogStackError
from timeoff.core.message_sink import OutboundContent
from timeoff.core.types import DialogFrame, FrameOptions
from timeoff.dialogs.context import Dialog, DialogContext, DialogTurnResult
from timeoff.dialogs.turn import TurnContext

logger = logging.getLogger(__name__)


class WaterfallStep:
    """Handle passed to a step function.

    ``result`` is the previous step's result, the child dialog's result after a
    resume, or the turn text when the step runs because the user replied.
    """

    def __init__(
        self,
        dc: DialogContext,
        dialog: "WaterfallDialog",
        frame: DialogFrame,
        index: int,
        result: Any,
    ) -> None:
        self._dc = dc
        self._dialog = dialog
        self._frame = frame
        self.index = index
        self.result = result

    @property
    def options(self) -> FrameOptions:
        return self._frame.options

    @property
    def turn(self) -> TurnContext:
        return self._dc.turn

    async def next(self, result: Any = None) -> DialogTurnResult:
        """Run the following step immediately, without suspending."""
        return await self._dialog.run_step(self._dc, self.index + 1, result)

    async def prompt(self, content: OutboundContent) -> DialogTurnResult:
        """Send ``content`` and suspend; the next turn runs the following step."""
        await self.turn.send(content)
        return DialogTurnResult(DialogTurnStatus.WAITING)

    async def loop_back(self, content: OutboundContent) -> DialogTurnResult:
        """Send ``content`` and suspend; the next turn runs this same step again."""
        if self.index == 0:
            raise DialogError("The first step of a waterfall cannot loop back")
        self._frame.step_index = self.index - 1
        await self.turn.send(content)
        return DialogTurnResult(DialogTurnStatus.WAITING)

    async def begin_dialog(
        self, kind: DialogKind, options: FrameOptions | None = None
    ) -> DialogTurnResult:
        return await self._dc.begin_dialog(kind, options)

    async def end_dialog(self, result: Any = None) -> DialogTurnResult:
        return await self._dc.end_dialog(result)

    async def replace_dialog(
        self, kind: DialogKind, options: FrameOptions | None = None
    ) -> DialogTurnResult:
        return await self._dc.replace_dialog(kind, options)


StepFunction = Callable[[WaterfallStep], Awaitable[DialogTurnResult]]


class WaterfallDialog(Dialog):
    """Runs ``steps`` strictly in declared order.

    The frame's ``step_index`` is the step that ran last. Running past the
    final step ends the dialog, so the index always stays below the step count.
    """

    def __init__(self, kind: DialogKind, steps: Sequence[StepFunction]) -> None:
        if not steps:
            raise DialogError(f"Waterfall '{kind.value}' needs at least one step")
        self.kind = kind
        self.steps = list(steps)

    @property
    def step_count(self) -> int:
        return len(self.steps)

    async def begin(self, dc: DialogContext, options: FrameOptions) -> DialogTurnResult:
        return await self.run_step(dc, 0, None)

    async def continue_dialog(self, dc: DialogContext) -> DialogTurnResult:
        frame = self._own_frame(dc)
        return await self.run_step(dc, frame.step_index + 1, dc.turn.text)

    async def resume(self, dc: DialogContext, result: Any) -> DialogTurnResult:
        frame = self._own_frame(dc)
        return await self.run_step(dc, frame.step_index + 1, result)

    async def run_step(self, dc: DialogContext, index: int, result: Any) -> DialogTurnResult:
        if index >= self.step_count:
            return await dc.end_dialog(result)

        frame = self._own_frame(dc)
        frame.step_index = index
        step = self.steps[index]
        logger.debug(f"{self.kind.value}: running step {index} ({getattr(step, '__name__', step)})")
        return await step(WaterfallStep(dc, self, frame, index, result))

    def _own_frame(self, dc: DialogContext) -> DialogFrame:
        frame = dc.active_frame
        if frame is None or frame.dialog_id != self.kind:
            raise DialogStackError(f"Active frame does not belong to '{self.kind.value}'")
        return frame
