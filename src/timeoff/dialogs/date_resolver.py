"""Sub-dialog that keeps asking for a date until it gets a definite one."""

import logging
from typing import cast

from timeoff.core.constants import DialogKind
from timeoff.core.interfaces import IDateTokenExtractor
from timeoff.core.types import DateResolverOptions
from timeoff.dates.timex import TimexAmbiguityClassifier
from timeoff.dialogs.context import DialogTurnResult
from timeoff.dialogs.waterfall import WaterfallDialog, WaterfallStep

logger = logging.getLogger(__name__)

RETRY_PROMPT = (
    "I'm sorry, for best results, please enter your vacation date "
    "including the month, day and year."
)


class DateResolverDialog(WaterfallDialog):
    """PROMPT -> VALIDATE -> (loop to PROMPT | DONE).

    Ends with the resolved ``SingleDate`` or ``DateRange``. There is no retry
    limit; the user can always leave through the cancel interrupt.
    """

    def __init__(
        self,
        kind: DialogKind,
        prompt: str,
        extractor: IDateTokenExtractor,
        classifier: TimexAmbiguityClassifier,
        retry_prompt: str = RETRY_PROMPT,
    ) -> None:
        super().__init__(kind, [self.prompt_step, self.validate_step])
        self.prompt = prompt
        self.retry_prompt = retry_prompt
        self.extractor = extractor
        self.classifier = classifier

    def default_options(self) -> DateResolverOptions:
        return DateResolverOptions(prompt=self.prompt, retry_prompt=self.retry_prompt)

    async def prompt_step(self, step: WaterfallStep) -> DialogTurnResult:
        options = cast(DateResolverOptions, step.options)
        return await step.prompt(options.prompt)

    async def validate_step(self, step: WaterfallStep) -> DialogTurnResult:
        options = cast(DateResolverOptions, step.options)
        reply = step.result if isinstance(step.result, str) else ""

        token = self.extractor.extract(reply)
        if token is None or not self.classifier.is_definite(token):
            logger.info(f"{self.kind.value}: reply {reply!r} is not a definite date ({token})")
            return await step.loop_back(options.retry_prompt)

        return await step.end_dialog(self.classifier.to_expression(token))
