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
Schedule Service Module

Owns the event catalog, the notification ledger and the notifier, and runs
the warning check. Both the tick loop and the reload command go through this
object, serialized by one lock.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional

from .catalog import Duration, EventCatalog, ReloadResult
from .config import ScheduleConfig
from .ledger import NotificationLedger
from .notifier import DeliveryError, Notifier
from .source import ScheduleEvent, ensure_schedule_dir
from .time_parser import ensure_utc, utc_now

logger = logging.getLogger("marchbell.schedules.service")

# Warn one hour ahead, give or take half a poll interval
WARN_LEAD = timedelta(hours=1)
WARN_WINDOW_MIN = 3570
WARN_WINDOW_MAX = 3630


class ScheduleService:
    """
    Event catalog + ledger + notifier, with the per-tick warning logic.

    Events are warned at most once: the is_warned/mark_warned pair runs under
    the service lock, and keys are only marked after confirmed delivery.
    """

    def __init__(
        self,
        config: ScheduleConfig,
        notifier: Notifier,
        catalog: Optional[EventCatalog] = None,
        ledger: Optional[NotificationLedger] = None,
    ):
        self.config = config
        self.notifier = notifier
        self.catalog = catalog or EventCatalog(config.categories)
        self.ledger = ledger or NotificationLedger(config.state_file)
        self._lock = asyncio.Lock()

    def warning_text(self, event: ScheduleEvent) -> str:
        """Build the announcement for an event."""
        parts = [
            self.config.announce_mention,
            f"{event.label} in 1 hour!",
            self.config.reminder_suffix,
        ]
        return " ".join(p.strip() for p in parts if p and p.strip())

    async def reload(self, now: Optional[datetime] = None) -> ReloadResult:
        """Rebuild the catalog from disk and prune old ledger entries."""
        now = ensure_utc(now) if now is not None else utc_now()
        async with self._lock:
            ensure_schedule_dir(self.config.schedule_dir)
            result = self.catalog.reload(now)
            self.ledger.prune(now)
            self.ledger.save()
        return result

    async def tick(self, now: Optional[datetime] = None) -> list[ScheduleEvent]:
        """
        Warn about every un-warned event starting about one hour from now.

        Args:
            now: Reference time (defaults to the current UTC time)

        Returns:
            Events warned during this tick
        """
        now = ensure_utc(now) if now is not None else utc_now()
        warned: list[ScheduleEvent] = []

        async with self._lock:
            for event in self.catalog.events:
                if self.ledger.is_warned(event.key):
                    continue

                seconds_until = (event.starts_at - now).total_seconds()
                if not WARN_WINDOW_MIN <= seconds_until <= WARN_WINDOW_MAX:
                    continue

                try:
                    await self.notifier.send(self.warning_text(event))
                except DeliveryError as e:
                    # Left unmarked so the next tick in the window can retry
                    logger.warning(f"Failed to warn {event.key}: {e}")
                    continue
                except Exception as e:
                    logger.error(f"Unexpected error warning {event.key}: {e}", exc_info=True)
                    continue

                try:
                    self.ledger.mark_warned(event.key)
                except OSError as e:
                    # The in-memory mark still blocks a resend in this process
                    logger.error(f"Failed to persist warning for {event.key}: {e}", exc_info=True)
                warned.append(event)
                logger.info(f"Warned: {event.key}")

        return warned

    def upcoming(self, duration: Duration, now: Optional[datetime] = None) -> list[ScheduleEvent]:
        return self.catalog.upcoming(duration, now)

    def next_event(self, now: Optional[datetime] = None) -> Optional[ScheduleEvent]:
        return self.catalog.next_event(now)
