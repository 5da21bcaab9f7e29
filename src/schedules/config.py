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
Schedule Configuration

Settings for the event warning bot. Values come from environment variables
(a .env file is loaded by discord_bot.py).
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_CATEGORIES = "ruins,altar"


class ConfigError(Exception):
    """Raised when mandatory configuration is missing or invalid."""

    pass


def parse_categories(value: str, schedule_dir: Path) -> dict[str, Path]:
    """
    Parse a SCHEDULE_CATEGORIES value.

    "ruins,altar" maps each name to <schedule_dir>/<name>.txt;
    "ruins=/data/ruins.txt" maps a name to an explicit path.
    """
    sources: dict[str, Path] = {}
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        name, sep, path = item.partition("=")
        name = name.strip().lower()
        if not name:
            continue
        sources[name] = Path(path.strip()) if sep and path.strip() else schedule_dir / f"{name}.txt"
    return sources


@dataclass
class ScheduleConfig:
    """Configuration for schedule loading and warning delivery."""

    announce_channel_id: int
    reminder_suffix: str = "Send march!"
    command_prefix: str = "!"
    announce_mention: str = "@everyone"
    schedule_dir: Path = Path("schedules")
    state_file: Path = Path("state.json")
    categories: dict[str, Path] = field(default_factory=dict)

    def __post_init__(self):
        if not self.categories:
            self.categories = parse_categories(DEFAULT_CATEGORIES, self.schedule_dir)

    @classmethod
    def from_env(cls) -> "ScheduleConfig":
        """Create config from environment variables with defaults."""
        channel_raw = os.getenv("ANNOUNCE_CHANNEL_ID", "").strip()
        if not channel_raw:
            raise ConfigError("Missing ANNOUNCE_CHANNEL_ID")
        try:
            channel_id = int(channel_raw)
        except ValueError:
            raise ConfigError(f"ANNOUNCE_CHANNEL_ID must be a numeric channel ID, got '{channel_raw}'")

        schedule_dir = Path(os.getenv("SCHEDULE_DIR", "schedules"))
        categories = parse_categories(
            os.getenv("SCHEDULE_CATEGORIES", DEFAULT_CATEGORIES), schedule_dir
        )
        if not categories:
            raise ConfigError("SCHEDULE_CATEGORIES does not name any category")

        return cls(
            announce_channel_id=channel_id,
            reminder_suffix=os.getenv("REMINDER_SUFFIX", "Send march!"),
            command_prefix=os.getenv("COMMAND_PREFIX", "!"),
            announce_mention=os.getenv("ANNOUNCE_MENTION", "@everyone"),
            schedule_dir=schedule_dir,
            state_file=Path(os.getenv("STATE_FILE", "state.json")),
            categories=categories,
        )
