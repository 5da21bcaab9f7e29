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
Notification Ledger Module

Persistent record of events that have already been warned about, so a
restart never pings the same event twice.

File format:
    {"notified": {"ruins:2024-03-05T14:00:00+00:00": true, ...}}
"""

import json
import logging
import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Optional

from .time_parser import ensure_utc, utc_now

logger = logging.getLogger("marchbell.schedules.ledger")

# Entries for events older than this are dropped on reload
PRUNE_AFTER = timedelta(days=14)


def key_timestamp(key: str) -> Optional[datetime]:
    """
    Extract the event time embedded in a ledger key.

    Returns None when the key has no parseable ISO timestamp.
    """
    _, sep, iso = key.partition(":")
    if not sep or not iso:
        return None
    if iso.endswith("Z"):
        iso = iso[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(iso))
    except ValueError:
        return None


class NotificationLedger:
    """
    JSON-file backed set of warned event keys.

    Not thread-safe on its own; callers serialize is_warned/mark_warned
    pairs (see ScheduleService).
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._notified: dict[str, bool] = {}
        self._extra: dict[str, Any] = {}
        self.load()

    def __len__(self) -> int:
        return len(self._notified)

    def __contains__(self, key: str) -> bool:
        return self.is_warned(key)

    def load(self) -> None:
        """Load state from disk. Missing or corrupt files yield an empty ledger."""
        self._notified = {}
        self._extra = {}

        if not self.path.exists():
            logger.info(f"No ledger at {self.path}, starting empty")
            return

        try:
            with self.path.open(encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read ledger {self.path}, starting empty: {e}")
            return

        if not isinstance(raw, dict) or not isinstance(raw.get("notified", {}), dict):
            logger.warning(f"Ledger {self.path} has unexpected shape, starting empty")
            return

        self._extra = {k: v for k, v in raw.items() if k != "notified"}
        self._notified = {
            str(key): True for key, value in raw.get("notified", {}).items() if value
        }
        logger.info(f"Loaded ledger with {len(self._notified)} warned event(s)")

    def save(self) -> None:
        """Write state to disk atomically (temp file, then replace)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = dict(self._extra)
        payload["notified"] = dict(sorted(self._notified.items()))

        temp_path = self.path.with_name(self.path.name + ".tmp")
        with temp_path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        os.replace(temp_path, self.path)

    def is_warned(self, key: str) -> bool:
        return self._notified.get(key, False)

    def mark_warned(self, key: str) -> None:
        """Record a warning and persist it before returning. Idempotent."""
        if self._notified.get(key):
            return
        self._notified[key] = True
        self.save()

    def prune(self, now: Optional[datetime] = None) -> int:
        """
        Drop entries whose event time is more than PRUNE_AFTER before now.

        Keys without a parseable timestamp are left alone. Does not save.

        Returns:
            Number of entries removed
        """
        now = ensure_utc(now) if now is not None else utc_now()
        cutoff = now - PRUNE_AFTER
        stale = []
        for key in self._notified:
            ts = key_timestamp(key)
            if ts is not None and ts < cutoff:
                stale.append(key)

        for key in stale:
            del self._notified[key]

        if stale:
            logger.info(f"Pruned {len(stale)} ledger entries older than {PRUNE_AFTER.days} days")
        return len(stale)
