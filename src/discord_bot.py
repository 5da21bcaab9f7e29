"""
marchbell Discord Bot

Reads event schedule files and pings the announcement channel one hour
before each event. Answers prefix commands about upcoming events.
"""

import asyncio
import os
import sys
from typing import Optional

import discord
from discord.ext import commands
from dotenv import load_dotenv

from commands.schedule_commands import ScheduleCommands
from schedules import (
    ConfigError,
    DiscordChannelNotifier,
    ScheduleConfig,
    ScheduleService,
    WarningScheduler,
)

load_dotenv()

import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("marchbell")


class ScheduleBot(commands.Bot):
    """Discord bot that announces scheduled events."""

    def __init__(self, config: ScheduleConfig):
        # Prefix commands need the message content intent
        intents = discord.Intents.default()
        intents.message_content = True
        intents.guilds = True
        intents.messages = True

        super().__init__(
            command_prefix=config.command_prefix,
            intents=intents,
            help_command=None,
            case_insensitive=True,
        )

        self.config = config
        self.service = ScheduleService(
            config, DiscordChannelNotifier(self, config.announce_channel_id)
        )
        self.scheduler: Optional[WarningScheduler] = None

    async def setup_hook(self):
        """Called when the bot is starting up."""
        logger.info(f"Setup: ANNOUNCE_CHANNEL_ID={self.config.announce_channel_id}")
        logger.info(f"Setup: COMMAND_PREFIX={self.config.command_prefix!r}")
        logger.info(f"Setup: SCHEDULE_DIR={self.config.schedule_dir}")
        logger.info(f"Setup: STATE_FILE={self.config.state_file}")

        await self.service.reload()

        self.scheduler = WarningScheduler(self, self.service)
        await self.add_cog(ScheduleCommands(self, self.service, self.scheduler))
        self.scheduler.start()

    async def on_ready(self):
        """Called when the bot has connected to Discord."""
        logger.info(f"Logged in as {self.user} (ID: {self.user.id})")
        logger.info(f"Connected to {len(self.guilds)} guild(s)")

    async def on_message(self, message: discord.Message):
        """Only guild messages from humans are treated as commands."""
        if message.author.bot or message.guild is None:
            return
        await self.process_commands(message)

    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError):
        if isinstance(error, (commands.CommandNotFound, commands.CheckFailure)):
            return
        if ctx.cog is not None and ctx.cog.has_error_handler():
            return
        logger.error(f"Unhandled command error: {error}", exc_info=error)

    async def close(self):
        """Clean up resources on shutdown."""
        if self.scheduler:
            self.scheduler.stop()
        await super().close()


async def main():
    """Run the bot."""
    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        logger.error("DISCORD_BOT_TOKEN environment variable not set")
        sys.exit(1)

    try:
        config = ScheduleConfig.from_env()
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    bot = ScheduleBot(config)
    async with bot:
        await bot.start(token)


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
