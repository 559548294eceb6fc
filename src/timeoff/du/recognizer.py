"""Recognizer implementations for the IRecognizer port."""

import logging
from collections.abc import Callable
from datetime import date

import dspy

from timeoff.config.models import RecognizerConfig
from timeoff.core.errors import RecognitionError
from timeoff.core.interfaces import IRecognizer
from timeoff.core.types import RecognizerResult
from timeoff.dates.timex import TimexAmbiguityClassifier
from timeoff.du.signatures import RecognizeVacationRequest

logger = logging.getLogger(__name__)


class NullRecognizer:
    """Recognizes nothing. Used when no recognizer credentials are configured."""

    async def recognize(self, text: str) -> RecognizerResult:
        return RecognizerResult()


class DSPyRecognizer:
    """Intent and TIMEX extraction with a DSPy predictor.

    Uses native async ``.acall()`` with the recognizer's own LM bound through
    ``dspy.context`` so it never depends on global DSPy configuration.
    """

    def __init__(
        self,
        lm: dspy.LM,
        classifier: TimexAmbiguityClassifier | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.lm = lm
        self.classifier = classifier or TimexAmbiguityClassifier()
        self.predictor = dspy.Predict(RecognizeVacationRequest)
        self._today = today

    @classmethod
    def from_config(cls, config: RecognizerConfig) -> "DSPyRecognizer":
        if config.api_key is None:
            raise RecognitionError("DSPyRecognizer requires an api_key")
        lm = dspy.LM(
            f"{config.provider}/{config.model}",
            api_key=config.api_key.get_secret_value(),
            temperature=config.temperature,
        )
        return cls(lm)

    async def recognize(self, text: str) -> RecognizerResult:
        try:
            with dspy.context(lm=self.lm):
                prediction = await self.predictor.acall(
                    user_message=text, today=self._today().isoformat()
                )
        except Exception as e:
            raise RecognitionError(f"Recognizer call failed: {e}") from e

        intent = str(prediction.intent or "").strip() or None
        timex = (prediction.timex or "").strip()
        vacation_date = self.classifier.to_expression(timex) if timex else None

        logger.debug(f"Recognized intent={intent} timex={timex!r}")
        return RecognizerResult(intent=intent, vacation_date=vacation_date)


def create_recognizer(config: RecognizerConfig) -> IRecognizer:
    """DSPy recognizer when credentials exist, otherwise the null recognizer."""
    if config.api_key is None:
        logger.warning("No recognizer credentials configured; intents and dates won't be extracted")
        return NullRecognizer()
    return DSPyRecognizer.from_config(config)
