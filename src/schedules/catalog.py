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
Event Catalog Module

Merged, time-ordered view of every configured schedule file.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from .source import ScheduleEvent, read_schedule_file
from .time_parser import ensure_utc, utc_now

logger = logging.getLogger("marchbell.schedules.catalog")

# Cap on query results so replies stay a sane size
MAX_UPCOMING = 50

Duration = Union[timedelta, relativedelta]


@dataclass
class ReloadResult:
    """Event counts from a catalog reload."""

    counts: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())


class EventCatalog:
    """
    Time-ordered list of events from all schedule sources.

    The list is only ever replaced as a whole by reload(); queries never
    mutate it.
    """

    def __init__(self, sources: dict[str, Path]):
        """
        Args:
            sources: Mapping of category name to schedule file path
        """
        self.sources = dict(sources)
        self._events: tuple[ScheduleEvent, ...] = ()

    @property
    def events(self) -> tuple[ScheduleEvent, ...]:
        return self._events

    def __len__(self) -> int:
        return len(self._events)

    def reload(self, now: Optional[datetime] = None) -> ReloadResult:
        """Re-read every source and replace the catalog."""
        now = ensure_utc(now) if now is not None else utc_now()
        result = ReloadResult()
        merged: list[ScheduleEvent] = []

        for category, path in self.sources.items():
            events = read_schedule_file(path, category, now)
            result.counts[category] = len(events)
            merged.extend(events)

        merged.sort(key=lambda e: e.starts_at)
        self._events = tuple(merged)

        breakdown = ", ".join(f"{name}={count}" for name, count in result.counts.items())
        logger.info(f"Loaded events: {result.total} ({breakdown}) TZ=UTC")
        return result

    def upcoming(
        self,
        duration: Duration,
        now: Optional[datetime] = None,
        limit: int = MAX_UPCOMING,
    ) -> list[ScheduleEvent]:
        """
        Events starting within `duration` of now.

        Args:
            duration: Window length (timedelta, or relativedelta for months)
            now: Reference time
            limit: Maximum number of events returned

        Returns:
            Events with now <= starts_at <= now + duration, ascending
        """
        now = ensure_utc(now) if now is not None else utc_now()
        end = now + duration
        matches = [e for e in self._events if now <= e.starts_at <= end]
        return matches[:limit]

    def next_event(self, now: Optional[datetime] = None) -> Optional[ScheduleEvent]:
        """Earliest event that has not started yet, or None."""
        now = ensure_utc(now) if now is not None else utc_now()
        for event in self._events:
            if event.starts_at >= now:
                return event
        return None
