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

"""Shared fixtures for schedule tests."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from schedules import DeliveryError, ScheduleConfig


class FakeNotifier:
    """Records sent messages; optionally fails the first N sends."""

    def __init__(self, fail_times: int = 0):
        self.sent: list[str] = []
        self.attempts = 0
        self.fail_times = fail_times

    async def send(self, text: str) -> None:
        self.attempts += 1
        if self.attempts <= self.fail_times:
            raise DeliveryError("channel unavailable")
        self.sent.append(text)


@pytest.fixture
def schedule_dir(tmp_path):
    path = tmp_path / "schedules"
    path.mkdir()
    return path


@pytest.fixture
def config(tmp_path, schedule_dir):
    return ScheduleConfig(
        announce_channel_id=1234,
        schedule_dir=schedule_dir,
        state_file=tmp_path / "state.json",
    )


@pytest.fixture
def notifier():
    return FakeNotifier()
