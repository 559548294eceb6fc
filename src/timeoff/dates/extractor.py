"""Rule-based extraction of TIMEX tokens from free-text replies.

Only what a date prompt reply needs is covered: ISO and US numeric dates,
"July 1st, 2024" / "1 July 2024" style dates, weekday names and "today".
Partial dates keep ``X`` placeholders so the classifier sees them as ambiguous.
Two dates in one reply become a range token.
"""

import logging
import re

logger = logging.getLogger(__name__)

MONTHS = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}
MONTHS.update({name[:3]: number for name, number in list(MONTHS.items())})
MONTHS["sept"] = 9

WEEKDAYS = {
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
    "sunday": 7,
}

_MONTH_NAMES = "|".join(sorted(MONTHS, key=len, reverse=True))
_ORDINAL = r"(?:st|nd|rd|th)?"

_ISO = r"(?P<iso_year>\d{4})-(?P<iso_month>\d{1,2})-(?P<iso_day>\d{1,2})"
_NUMERIC = r"(?P<num_month>\d{1,2})/(?P<num_day>\d{1,2})(?:/(?P<num_year>\d{4}|\d{2}))?"
_MONTH_FIRST = (
    rf"(?P<mf_month>{_MONTH_NAMES})\.?\s+(?P<mf_day>\d{{1,2}}){_ORDINAL}"
    r"(?:,?\s+(?P<mf_year>\d{4}))?"
)
_DAY_FIRST = (
    rf"(?P<df_day>\d{{1,2}}){_ORDINAL}\s+(?:of\s+)?(?P<df_month>{_MONTH_NAMES})\.?"
    r"(?:,?\s+(?P<df_year>\d{4}))?"
)
_WEEKDAY = rf"(?P<weekday>{'|'.join(WEEKDAYS)})"
_TODAY = r"(?P<today>today|now)"

_DATE_TOKEN = re.compile(
    rf"\b(?:{_ISO}|{_NUMERIC}|{_MONTH_FIRST}|{_DAY_FIRST}|{_WEEKDAY}|{_TODAY})\b",
    re.IGNORECASE,
)


def _format(year: str | None, month: int, day: int) -> str:
    if year is None:
        year_part = "XXXX"
    elif len(year) == 2:
        year_part = f"20{year}"
    else:
        year_part = year
    return f"{year_part}-{month:02d}-{day:02d}"


def _token_from_match(match: re.Match[str]) -> str:
    groups = match.groupdict()
    if groups["iso_year"]:
        return _format(groups["iso_year"], int(groups["iso_month"]), int(groups["iso_day"]))
    if groups["num_month"]:
        return _format(groups["num_year"], int(groups["num_month"]), int(groups["num_day"]))
    if groups["mf_month"]:
        month = MONTHS[groups["mf_month"].lower()]
        return _format(groups["mf_year"], month, int(groups["mf_day"]))
    if groups["df_month"]:
        month = MONTHS[groups["df_month"].lower()]
        return _format(groups["df_year"], month, int(groups["df_day"]))
    if groups["weekday"]:
        return f"XXXX-WXX-{WEEKDAYS[groups['weekday'].lower()]}"
    return "PRESENT_REF"


class RegexTimexExtractor:
    """Extracts the first date (or a two-date range) from a reply."""

    def extract(self, text: str) -> str | None:
        tokens = [_token_from_match(match) for match in _DATE_TOKEN.finditer(text or "")]
        if not tokens:
            logger.debug(f"No date token found in {text!r}")
            return None
        if len(tokens) >= 2:
            return f"({tokens[0]},{tokens[1]})"
        return tokens[0]
