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
Event Schedules Package

Loads event schedule files and warns one hour before each event.
"""

from .catalog import MAX_UPCOMING, EventCatalog, ReloadResult
from .config import ConfigError, ScheduleConfig
from .ledger import PRUNE_AFTER, NotificationLedger
from .notifier import DeliveryError, DiscordChannelNotifier, Notifier
from .scheduler import POLL_INTERVAL_SECONDS, WarningScheduler
from .service import WARN_LEAD, WARN_WINDOW_MAX, WARN_WINDOW_MIN, ScheduleService
from .source import ScheduleEvent, read_schedule_file
from .time_parser import normalize_line, parse_date_line

__all__ = [
    "MAX_UPCOMING",
    "EventCatalog",
    "ReloadResult",
    "ConfigError",
    "ScheduleConfig",
    "PRUNE_AFTER",
    "NotificationLedger",
    "DeliveryError",
    "DiscordChannelNotifier",
    "Notifier",
    "POLL_INTERVAL_SECONDS",
    "WarningScheduler",
    "WARN_LEAD",
    "WARN_WINDOW_MAX",
    "WARN_WINDOW_MIN",
    "ScheduleService",
    "ScheduleEvent",
    "read_schedule_file",
    "normalize_line",
    "parse_date_line",
]
