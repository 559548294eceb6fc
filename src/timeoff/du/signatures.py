"""DSPy signatures for recognizing vacation requests."""

from typing import Literal

import dspy


class RecognizeVacationRequest(dspy.Signature):
    """Decide whether the user is asking for time off and extract the dates they mention.

    Dates are TIMEX tokens: 2024-07-01 for a day, (2024-07-01,2024-07-05,P4D) for a
    range. Use XXXX for a year the user did not give and leave timex empty when no
    date is mentioned.
    """

    user_message: str = dspy.InputField(desc="The user's message")
    today: str = dspy.InputField(desc="Today's date (ISO), used to anchor relative dates")

    intent: Literal["request_vacation", "none"] = dspy.OutputField(
        desc="request_vacation when the user wants time off, otherwise none"
    )
    timex: str = dspy.OutputField(desc="TIMEX token for the requested dates, or empty")
