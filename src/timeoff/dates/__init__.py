"""Date expression handling: TIMEX parsing, ambiguity policy and extraction."""

from timeoff.dates.extractor import RegexTimexExtractor
from timeoff.dates.timex import TimexAmbiguityClassifier, TimexProperty, parse_timex

__all__ = ["RegexTimexExtractor", "TimexAmbiguityClassifier", "TimexProperty", "parse_timex"]
