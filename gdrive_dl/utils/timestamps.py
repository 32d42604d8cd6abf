"""
Parses the "last modified" text shown in Drive folder listings into epoch seconds.

The listing renders recent items as a time of day ("3:45 PM"), items from the
current year as a month and day ("Dec 25"), and older items as a short date
("12/25/23"). Only the shape of the text tells which form is used.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from rich.markup import escape

log = logging.getLogger(__name__)

# The listing's time of day is rendered in a fixed zone seven hours behind
# UTC. This mirrors the service's observed output, not a configurable locale.
TIME_OF_DAY_UTC_OFFSET_HOURS = 7

_LEADING_NUMBER = re.compile(r"\s*(\d+)")
_MONTH_DAY_FORMATS = ("%b %d %Y", "%B %d %Y")
_FULL_DATE_FORMATS = ("%b %d, %Y", "%B %d, %Y")


def _parse_time_of_day(text: str, now: datetime) -> Optional[int]:
    hour_part, _, minute_part = text.lower().partition(":")
    minute_match = _LEADING_NUMBER.match(minute_part)
    if not minute_match:
        return None
    hours = int(hour_part)
    minutes = int(minute_match.group(1))

    if "pm" in minute_part and hours != 12:
        hours += 12
    if "am" in minute_part and hours == 12:
        hours = 0
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None

    today = now.astimezone(timezone.utc)
    midnight = datetime(today.year, today.month, today.day, tzinfo=timezone.utc)
    moment = midnight + timedelta(
        hours=hours + TIME_OF_DAY_UTC_OFFSET_HOURS, minutes=minutes
    )
    return int(moment.timestamp())


def _parse_short_date(text: str) -> Optional[int]:
    parts = text.split("/")
    if len(parts) != 3:
        return None
    month, day, year = (int(p) for p in parts)
    return int(datetime(2000 + year, month, day).timestamp())


def _parse_month_day(text: str, now: datetime) -> Optional[int]:
    for fmt in _MONTH_DAY_FORMATS:
        try:
            return int(datetime.strptime(f"{text} {now.year}", fmt).timestamp())
        except ValueError:
            continue
    for fmt in _FULL_DATE_FORMATS:
        try:
            return int(datetime.strptime(text, fmt).timestamp())
        except ValueError:
            continue
    return None


def parse_modified_time(
    modified: Optional[str], now: Optional[datetime] = None
) -> Optional[int]:
    """
    Converts a listing timestamp into epoch seconds.

    Args:
        modified: The raw text from the listing, e.g. "3:45 PM", "12/25/23"
            or "Dec 25".
        now: Reference point for "today" and "this year". Defaults to the
            current local time.

    Returns:
        Epoch seconds, or None when the text cannot be understood.
    """
    if not modified or not modified.strip():
        return None
    text = modified.strip()
    now = now or datetime.now().astimezone()

    try:
        if ":" in text:
            return _parse_time_of_day(text, now)
        if "/" in text:
            return _parse_short_date(text)
        return _parse_month_day(text, now)
    except (ValueError, OverflowError, OSError) as e:
        log.debug(
            f"Could not parse modified time '{escape(modified)}': {escape(str(e))}"
        )
        return None
