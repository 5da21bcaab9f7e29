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

"""Tests for Discord delivery and the scheduler loop."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest

from schedules.notifier import DeliveryError, DiscordChannelNotifier
from schedules.scheduler import POLL_INTERVAL_SECONDS, WarningScheduler


def http_error(cls, status):
    response = MagicMock(status=status, reason="error")
    return cls(response, "request failed")


def text_channel():
    channel = MagicMock(spec=discord.TextChannel)
    channel.send = AsyncMock()
    return channel


class TestDiscordChannelNotifier:
    """Test channel resolution and error wrapping."""

    @pytest.mark.asyncio
    async def test_sends_to_cached_channel(self):
        channel = text_channel()
        bot = MagicMock()
        bot.get_channel.return_value = channel

        await DiscordChannelNotifier(bot, 42).send("@everyone Ruins in 1 hour!")

        bot.get_channel.assert_called_once_with(42)
        args, kwargs = channel.send.call_args
        assert args == ("@everyone Ruins in 1 hour!",)
        assert kwargs["allowed_mentions"].everyone is True

    @pytest.mark.asyncio
    async def test_fetches_uncached_channel(self):
        channel = text_channel()
        bot = MagicMock()
        bot.get_channel.return_value = None
        bot.fetch_channel = AsyncMock(return_value=channel)

        await DiscordChannelNotifier(bot, 42).send("hello")

        bot.fetch_channel.assert_awaited_once_with(42)
        channel.send.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            http_error(discord.NotFound, 404),
            http_error(discord.Forbidden, 403),
            http_error(discord.HTTPException, 500),
        ],
    )
    async def test_fetch_errors_become_delivery_errors(self, error):
        bot = MagicMock()
        bot.get_channel.return_value = None
        bot.fetch_channel = AsyncMock(side_effect=error)

        with pytest.raises(DeliveryError):
            await DiscordChannelNotifier(bot, 42).send("hello")

    @pytest.mark.asyncio
    async def test_non_text_channel_rejected(self):
        bot = MagicMock()
        bot.get_channel.return_value = MagicMock(spec=discord.CategoryChannel)

        with pytest.raises(DeliveryError):
            await DiscordChannelNotifier(bot, 42).send("hello")

    @pytest.mark.asyncio
    async def test_send_failure_becomes_delivery_error(self):
        channel = text_channel()
        channel.send.side_effect = http_error(discord.Forbidden, 403)
        bot = MagicMock()
        bot.get_channel.return_value = channel

        with pytest.raises(DeliveryError):
            await DiscordChannelNotifier(bot, 42).send("hello")

    @pytest.mark.asyncio
    async def test_send_timeout_becomes_delivery_error(self):
        channel = text_channel()
        channel.send.side_effect = asyncio.TimeoutError()
        bot = MagicMock()
        bot.get_channel.return_value = channel

        with pytest.raises(DeliveryError):
            await DiscordChannelNotifier(bot, 42).send("hello")


class TestWarningScheduler:
    """Test the background loop wrapper."""

    def make_scheduler(self, tick=None):
        bot = MagicMock()
        bot.wait_until_ready = AsyncMock()
        service = MagicMock()
        service.tick = tick or AsyncMock(return_value=[])
        return WarningScheduler(bot, service), service

    def test_poll_interval(self):
        assert POLL_INTERVAL_SECONDS == 30

    @pytest.mark.asyncio
    async def test_loop_body_runs_tick(self):
        scheduler, service = self.make_scheduler()
        await scheduler._check_events()
        service.tick.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_loop_body_survives_errors(self, caplog):
        scheduler, service = self.make_scheduler(AsyncMock(side_effect=OSError("disk full")))
        await scheduler._check_events()
        assert "Error in warning scheduler loop: disk full" in caplog.text

    def test_start_and_stop_are_idempotent(self):
        scheduler, _ = self.make_scheduler()
        loop = scheduler._check_events
        with patch.object(loop, "start") as start, patch.object(loop, "cancel") as cancel:
            scheduler.start()
            scheduler.start()
            assert scheduler.is_running
            scheduler.stop()
            scheduler.stop()

        start.assert_called_once()
        cancel.assert_called_once()
        assert not scheduler.is_running
