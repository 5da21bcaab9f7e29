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
Schedule Source Module

Reads one schedule file per event category and turns it into events.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from .time_parser import parse_date_line, utc_now

logger = logging.getLogger("marchbell.schedules.source")

COMMENT_MARKER = "#"


def make_event_key(category: str, starts_at: datetime) -> str:
    """Build the deterministic identity used for deduplication and the ledger."""
    return f"{category}:{starts_at.isoformat()}"


@dataclass(frozen=True)
class ScheduleEvent:
    """One scheduled occurrence of an in-game event."""

    category: str
    starts_at: datetime  # aware UTC, minute resolution
    key: str = field(default="", compare=False)

    def __post_init__(self):
        if not self.key:
            object.__setattr__(self, "key", make_event_key(self.category, self.starts_at))

    @property
    def label(self) -> str:
        return self.category.capitalize()


def ensure_schedule_dir(schedule_dir: Path) -> None:
    """Create the schedule directory so operators know where files go."""
    schedule_dir.mkdir(parents=True, exist_ok=True)


def read_schedule_lines(path: Path) -> list[str]:
    """Return trimmed, non-blank, non-comment lines; [] if the file is missing."""
    if not path.exists():
        logger.debug(f"Schedule file not found, skipping: {path}")
        return []

    text = path.read_text(encoding="utf-8")
    lines = (raw.strip() for raw in text.splitlines())
    return [line for line in lines if line and not line.startswith(COMMENT_MARKER)]


def read_schedule_file(
    path: Path, category: str, now: Optional[datetime] = None
) -> list[ScheduleEvent]:
    """
    Parse a schedule file into events.

    Args:
        path: Schedule file to read
        category: Category name attached to every event from this file
        now: Reference time for year inference

    Returns:
        Events sorted by start time, deduplicated by key (first occurrence wins)
    """
    now = now or utc_now()
    seen: set[str] = set()
    events: list[ScheduleEvent] = []

    for line in read_schedule_lines(path):
        starts_at = parse_date_line(line, now)
        if starts_at is None:
            logger.warning(f"Could not parse {category}: '{line}'")
            continue

        event = ScheduleEvent(category=category, starts_at=starts_at)
        if event.key in seen:
            continue
        seen.add(event.key)
        events.append(event)

    events.sort(key=lambda e: e.starts_at)
    return events
