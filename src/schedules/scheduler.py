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
Warning Scheduler Module

Background task loop that runs the warning check every 30 seconds.
Uses discord.ext.tasks for reliable scheduling.

A tick that lands outside the one-hour window never catches up: if the bot
is offline for the whole window, that event is not warned.
"""

import logging
from typing import TYPE_CHECKING

from discord.ext import tasks

from .service import ScheduleService

if TYPE_CHECKING:
    from discord.ext import commands

logger = logging.getLogger("marchbell.schedules.scheduler")

POLL_INTERVAL_SECONDS = 30


class WarningScheduler:
    """
    Drives ScheduleService.tick() for the lifetime of the bot.

    The window in ScheduleService is as wide as the poll interval, so exactly
    one tick sees each event inside it as long as no tick is missed.
    """

    def __init__(self, bot: "commands.Bot", service: ScheduleService):
        """
        Initialize the warning scheduler.

        Args:
            bot: Discord bot instance
            service: Schedule service holding catalog and ledger
        """
        self.bot = bot
        self.service = service
        self._started = False

    @property
    def is_running(self) -> bool:
        return self._started

    def start(self) -> None:
        """Start the scheduler loop."""
        if not self._started:
            self._check_events.start()
            self._started = True
            logger.info("Warning scheduler started")

    def stop(self) -> None:
        """Stop the scheduler loop."""
        if self._started:
            self._check_events.cancel()
            self._started = False
            logger.info("Warning scheduler stopped")

    @tasks.loop(seconds=POLL_INTERVAL_SECONDS)
    async def _check_events(self) -> None:
        """Warn about events starting in one hour."""
        try:
            warned = await self.service.tick()
            if warned:
                logger.info(f"Sent {len(warned)} warning(s)")
        except Exception as e:
            logger.error(f"Error in warning scheduler loop: {e}", exc_info=True)

    @_check_events.before_loop
    async def _before_check(self) -> None:
        """Wait for the bot to be ready before starting the loop."""
        await self.bot.wait_until_ready()
        logger.info("Warning scheduler ready, starting loop")
