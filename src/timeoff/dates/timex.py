"""TIMEX token parsing and the ambiguity policy used by the date resolver.

A TIMEX token is the date micro-format emitted by the recognizer:

- ``2024-07-01``                 a definite date
- ``XXXX-07-01``                 July 1st, year unknown
- ``XXXX-WXX-5``                 a Friday, week unknown ("next Friday")
- ``2024-07``                    a whole month
- ``(2024-07-01,2024-07-05,P4D)`` a range with its duration
- ``PRESENT_REF``                "now"
- ``P3D``                        a bare duration

Any date form may carry a ``T..`` time part, which is ignored for dates.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date

from timeoff.core.types import AmbiguousDate, DateExpression, DateRange, SingleDate

logger = logging.getLogger(__name__)

PRESENT_REF = "PRESENT_REF"

_DATE_PATTERN = re.compile(r"^(?P<year>\d{4}|XXXX)-(?P<month>\d{2}|XX)-(?P<day>\d{2}|XX)$")
_WEEKDAY_PATTERN = re.compile(r"^(?P<year>\d{4}|XXXX)-W(?P<week>\d{2}|XX)-(?P<weekday>[1-7])$")
_MONTH_PATTERN = re.compile(r"^(?P<year>\d{4}|XXXX)-(?P<month>\d{2})$")
_DURATION_PATTERN = re.compile(r"^PT?(?:\d+(?:\.\d+)?[YMWDHS])+$")
_RANGE_PATTERN = re.compile(
    r"^\((?P<start>[^,()]+),(?P<end>[^,()]+)(?:,(?P<duration>[^,()]+))?\)$"
)


@dataclass(frozen=True)
class TimexProperty:
    """Parsed view of a TIMEX token."""

    token: str
    types: frozenset[str] = field(default_factory=frozenset)
    calendar_date: date | None = None
    start: "TimexProperty | None" = None
    end: "TimexProperty | None" = None

    @property
    def is_definite(self) -> bool:
        return "definite" in self.types

    @property
    def is_range(self) -> bool:
        return "daterange" in self.types


def _parse_calendar_date(year: str, month: str, day: str) -> date | None:
    if "X" in year or "X" in month or "X" in day:
        return None
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def parse_timex(token: str) -> TimexProperty:
    """Parse ``token`` into its type set. Unknown shapes yield an empty set."""
    raw = token.strip()

    if raw == PRESENT_REF:
        return TimexProperty(raw, frozenset({"present"}))

    if _DURATION_PATTERN.match(raw):
        return TimexProperty(raw, frozenset({"duration"}))

    range_match = _RANGE_PATTERN.match(raw)
    if range_match:
        start = parse_timex(range_match["start"])
        end = parse_timex(range_match["end"])
        types = {"daterange"}
        if range_match["duration"]:
            types.add("duration")
        if (
            start.calendar_date is not None
            and end.calendar_date is not None
            and start.calendar_date <= end.calendar_date
        ):
            types.add("definite")
        return TimexProperty(raw, frozenset(types), start=start, end=end)

    date_part, _, time_part = raw.partition("T")
    types: set[str] = set()
    if time_part:
        types.add("time")

    date_match = _DATE_PATTERN.match(date_part)
    if date_match:
        types.add("date")
        calendar_date = _parse_calendar_date(
            date_match["year"], date_match["month"], date_match["day"]
        )
        if calendar_date is not None:
            types.add("definite")
        return TimexProperty(raw, frozenset(types), calendar_date=calendar_date)

    if _WEEKDAY_PATTERN.match(date_part):
        types.add("date")
        return TimexProperty(raw, frozenset(types))

    if _MONTH_PATTERN.match(date_part):
        types.add("daterange")
        return TimexProperty(raw, frozenset(types))

    if date_part:
        logger.debug(f"Unrecognized TIMEX token: {raw!r}")
    return TimexProperty(raw, frozenset(types))


class TimexAmbiguityClassifier:
    """Decides whether a TIMEX token denotes a fully resolved date or range.

    A token is resolved only when its type set contains ``definite``: a real
    calendar date with year, month and day, or an ordered range of two such
    dates. Missing-year tokens, weekdays without an anchor, whole months and
    present references are ambiguous.
    """

    def types(self, token: str) -> frozenset[str]:
        return parse_timex(token).types

    def is_definite(self, token: str) -> bool:
        return parse_timex(token).is_definite

    def to_expression(self, token: str) -> DateExpression:
        """Map ``token`` to the tagged date expression the dialogs work with."""
        timex = parse_timex(token)
        if not timex.is_definite:
            return AmbiguousDate(raw=timex.token)

        if timex.is_range and timex.start is not None and timex.end is not None:
            return DateRange(
                start=_iso(timex.start.calendar_date),
                end=_iso(timex.end.calendar_date),
            )
        return SingleDate(value=_iso(timex.calendar_date))


def _iso(value: date | None) -> str:
    if value is None:
        raise ValueError("definite TIMEX without a calendar date")
    return value.isoformat()
