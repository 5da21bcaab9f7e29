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
Notifier Module

Delivery boundary for event warnings. The scheduler only knows about the
Notifier protocol; DiscordChannelNotifier posts to the announcement channel.
"""

import asyncio
import logging
from typing import Protocol

import discord
from discord.ext import commands

logger = logging.getLogger("marchbell.schedules.notifier")


class DeliveryError(Exception):
    """Raised when a warning could not be delivered."""

    pass


class Notifier(Protocol):
    """Anything that can deliver plain text to the announcement destination."""

    async def send(self, text: str) -> None:
        """Deliver text, raising DeliveryError on failure."""
        ...


class DiscordChannelNotifier:
    """Posts warnings to a fixed Discord channel."""

    def __init__(self, bot: commands.Bot, channel_id: int):
        self.bot = bot
        self.channel_id = channel_id

    async def _resolve_channel(self) -> discord.abc.Messageable:
        channel = self.bot.get_channel(self.channel_id)
        if channel is None:
            try:
                channel = await self.bot.fetch_channel(self.channel_id)
            except discord.NotFound as e:
                raise DeliveryError(f"Channel {self.channel_id} not found") from e
            except discord.Forbidden as e:
                raise DeliveryError(f"No access to channel {self.channel_id}") from e
            except discord.HTTPException as e:
                raise DeliveryError(f"Failed to fetch channel {self.channel_id}: {e}") from e

        if not isinstance(channel, discord.abc.Messageable):
            raise DeliveryError(f"Channel {self.channel_id} is not a text channel")
        return channel

    async def send(self, text: str) -> None:
        channel = await self._resolve_channel()
        try:
            await channel.send(
                text, allowed_mentions=discord.AllowedMentions(everyone=True)
            )
        except (discord.HTTPException, asyncio.TimeoutError) as e:
            raise DeliveryError(f"Failed to send to channel {self.channel_id}: {e!r}") from e
        logger.debug(f"Sent to channel {self.channel_id}: {text}")
