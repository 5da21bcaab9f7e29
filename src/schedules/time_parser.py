# marchbell - Discord Event Warning Bot
# Copyright (c) 2025-2026 Slash Daemon slashdaemon@protonmail.com
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, version 3 of the License.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Commercial licensing: [slashdaemon@protonmail.com]

"""
Time Parser Module

Parses the yearless schedule lines used in the schedule files, e.g.
"Mon, 12.1. 12:00" or "14.1. 4:00". All times are UTC.
"""

import logging
import re
from datetime import datetime, timedelta
from typing import Optional

import pytz
from dateutil.relativedelta import relativedelta

logger = logging.getLogger("marchbell.schedules.time_parser")

# Events up to this far in the past still count as "this year"
PAST_TOLERANCE = timedelta(minutes=5)

_WEEKDAY_PREFIX = re.compile(r"^[A-Za-z]{3},\s*")
_WHITESPACE = re.compile(r"\s+")

# d.m. h:mm (the month is followed by a dot)
_DATE_LINE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.\s*(\d{1,2}):(\d{2})$")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(pytz.UTC)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value.astimezone(pytz.UTC)


def normalize_line(line: str) -> str:
    """
    Normalize a raw schedule line.

    Collapses whitespace and drops a leading three-letter weekday prefix
    ("Mon, "). The weekday is positional only and is never validated.
    """
    collapsed = _WHITESPACE.sub(" ", line.strip())
    return _WEEKDAY_PREFIX.sub("", collapsed)


def parse_date_line(line: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Parse a schedule line into an absolute UTC timestamp.

    The year is inferred: the current UTC year is used unless that puts the
    event more than PAST_TOLERANCE in the past, in which case it moves to the
    next year.

    Args:
        line: Raw line from a schedule file
        now: Reference time (defaults to the current UTC time)

    Returns:
        Aware UTC datetime, or None if the line is not a schedule entry
    """
    text = normalize_line(line)
    if not text:
        return None

    match = _DATE_LINE.match(text)
    if not match:
        return None

    day, month, hour, minute = (int(g) for g in match.groups())
    now = ensure_utc(now) if now is not None else utc_now()

    try:
        candidate = datetime(now.year, month, day, hour, minute, tzinfo=pytz.UTC)
    except ValueError:
        logger.debug(f"Impossible date in schedule line: '{text}'")
        return None

    if candidate < now - PAST_TOLERANCE:
        candidate = candidate + relativedelta(years=1)

    return candidate
