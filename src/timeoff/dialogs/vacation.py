"""The vacation request waterfall: start date, end date, confirm, finalize."""

import logging
from typing import Any, cast

from timeoff.approval.notifier import ApprovalNotifier
from timeoff.core.constants import (
    AFFIRMATIVE_ACTION_ID,
    CONFIRMATION_STEP_INDEX,
    NEGATIVE_ACTION_ID,
    DialogKind,
)
from timeoff.core.errors import DialogError
from timeoff.core.message_sink import OutboundContent
from timeoff.core.types import (
    DateRange,
    InteractiveMessage,
    MessageAction,
    SingleDate,
    VacationRequestOptions,
)
from timeoff.dialogs.context import DialogTurnResult
from timeoff.dialogs.turn import TurnContext
from timeoff.dialogs.waterfall import WaterfallDialog, WaterfallStep

logger = logging.getLogger(__name__)

START_DATE_PROMPT = "When would you like your vacation to start?"
END_DATE_PROMPT = (
    "When would you like your vacation to end? If it's just the one day, enter that day again."
)

AFFIRMATIVE_REPLIES = frozenset({"yes", "y", "yeah", "yep", "sure", "ok", "okay", "confirm", "1"})
NEGATIVE_REPLIES = frozenset({"no", "n", "nope", "nah", "2"})


def parse_confirmation(reply: Any) -> bool | None:
    """Read a typed yes/no answer. None means the reply was neither."""
    if not isinstance(reply, str):
        return None
    answer = reply.strip().lower().rstrip(".!")
    if answer in AFFIRMATIVE_REPLIES:
        return True
    if answer in NEGATIVE_REPLIES:
        return False
    return None


def describe_dates(options: VacationRequestOptions) -> str:
    if options.start_date == options.end_date:
        return f"for: {options.start_date}"
    return f"from: {options.start_date} to: {options.end_date}"


class VacationRequestDialog(WaterfallDialog):
    """Collects a date range, confirms it and hands it to the approval notifier."""

    def __init__(self, notifier: ApprovalNotifier) -> None:
        super().__init__(
            DialogKind.VACATION_REQUEST,
            [self.start_date_step, self.end_date_step, self.confirm_step, self.final_step],
        )
        if self.steps[CONFIRMATION_STEP_INDEX] != self.confirm_step:
            raise DialogError("Confirmation step index is out of sync with the waterfall")
        self.notifier = notifier

    def default_options(self) -> VacationRequestOptions:
        return VacationRequestOptions()

    async def start_date_step(self, step: WaterfallStep) -> DialogTurnResult:
        """If no definite date was recognized, ask for the start date."""
        options = cast(VacationRequestOptions, step.options)
        vacation_date = options.vacation_date

        if isinstance(vacation_date, SingleDate):
            options.start_date = vacation_date.value
            return await step.next(options)
        if isinstance(vacation_date, DateRange):
            options.start_date = vacation_date.start
            options.end_date = vacation_date.end
            return await step.next(options)

        return await step.begin_dialog(DialogKind.START_DATE_RESOLVER)

    async def end_date_step(self, step: WaterfallStep) -> DialogTurnResult:
        """If an end date has not been provided, ask for one."""
        options = cast(VacationRequestOptions, step.options)

        if isinstance(step.result, SingleDate):
            options.start_date = step.result.value
        elif isinstance(step.result, DateRange):
            options.start_date = step.result.start
            options.end_date = options.end_date or step.result.end

        if not options.end_date:
            return await step.begin_dialog(DialogKind.END_DATE_RESOLVER)
        return await step.next(options.end_date)

    async def confirm_step(self, step: WaterfallStep) -> DialogTurnResult:
        """Confirm the collected dates."""
        options = cast(VacationRequestOptions, step.options)

        if isinstance(step.result, SingleDate):
            options.end_date = step.result.value
        elif isinstance(step.result, DateRange):
            options.end_date = step.result.end
        elif isinstance(step.result, str) and step.result:
            options.end_date = step.result

        if not options.start_date or not options.end_date:
            raise DialogError("Cannot confirm a vacation request with unresolved dates")

        return await step.prompt(self.build_confirmation(step.turn, options))

    async def final_step(self, step: WaterfallStep) -> DialogTurnResult:
        """Submit on yes, start over on no."""
        options = cast(VacationRequestOptions, step.options)
        action = step.turn.action

        if action is not None:
            confirmed = action.value == AFFIRMATIVE_ACTION_ID
        else:
            answer = parse_confirmation(step.result)
            if answer is None:
                return await step.loop_back(self.build_confirmation(step.turn, options))
            confirmed = answer

        if not confirmed:
            logger.info(f"Vacation request declined on {step.turn.conversation_id}; restarting")
            return await step.replace_dialog(DialogKind.VACATION_REQUEST, VacationRequestOptions())

        # Guarded by confirm_step.
        start_date = cast(str, options.start_date)
        end_date = cast(str, options.end_date)

        if action is not None:
            user_id: str | None = action.responding_user_id
        else:
            user_id = step.turn.resolve_user_id()

        summary = f"Vacation request submitted for approval, {describe_dates(options)}."
        options.approval_request = await self.notifier.finalize(
            user_id,
            start_date,
            end_date,
            summary=summary,
            ack_address=action.ack_address if action is not None else None,
        )
        if action is None:
            await step.turn.send(summary)

        return await step.end_dialog(options)

    def build_confirmation(
        self, turn: TurnContext, options: VacationRequestOptions
    ) -> OutboundContent:
        message = InteractiveMessage(
            title=f"Please confirm, I have you requesting vacation {describe_dates(options)}.",
            actions=[
                MessageAction(
                    id="confirm/yes", text="Yes", value=AFFIRMATIVE_ACTION_ID, style="primary"
                ),
                MessageAction(
                    id="confirm/no", text="No", value=NEGATIVE_ACTION_ID, style="danger"
                ),
            ],
        )
        return turn.adapter.build_confirmation_message(message)
