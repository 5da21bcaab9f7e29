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
Schedule Prefix Commands

Text commands for querying the event schedule. Replies are plain text and
are trimmed to stay under Discord's message limit.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta
from discord.ext import commands

from schedules import ReloadResult, ScheduleEvent, ScheduleService, WARN_LEAD
from schedules.time_parser import utc_now

logger = logging.getLogger("marchbell.commands.schedule")

# Stay well below Discord's 2000 character limit
MAX_REPLY_LENGTH = 1800
TRIM_MARKER = "\n…(trimmed)"

NO_EVENTS_IN_RANGE = "No upcoming events in that range."


def truncate_reply(text: str, limit: int = MAX_REPLY_LENGTH) -> str:
    """Cut text to `limit` characters, appending a marker when trimmed."""
    if len(text) <= limit:
        return text
    return text[:limit] + TRIM_MARKER


def format_utc(dt: datetime) -> str:
    """Format like 'Tue 05.03 14:00 UTC'."""
    return dt.strftime("%a %d.%m %H:%M") + " UTC"


def format_remaining(delta: timedelta) -> str:
    """Format a positive duration as '2d 3h 15m'."""
    minutes = max(int(delta.total_seconds() // 60), 0)
    days, minutes = divmod(minutes, 24 * 60)
    hours, minutes = divmod(minutes, 60)
    if days:
        return f"{days}d {hours}h {minutes}m"
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_event_line(event: ScheduleEvent) -> str:
    warn_at = event.starts_at - WARN_LEAD
    return (
        f"• **{event.category.upper()}** opens: **{format_utc(event.starts_at)}**"
        f" | warn: **{format_utc(warn_at)}**"
    )


def format_upcoming(title: str, events: list[ScheduleEvent]) -> str:
    """Build an upcoming-events reply with a bold title line."""
    if not events:
        body = NO_EVENTS_IN_RANGE
    else:
        body = "\n".join(format_event_line(e) for e in events)
    return truncate_reply(f"**{title}**\n{body}")


def format_reload(result: ReloadResult) -> str:
    per_category = ", ".join(
        f"{name.capitalize()}: **{count}**" for name, count in result.counts.items()
    )
    return truncate_reply(
        f"✅ Reloaded schedules (UTC). {per_category}, Total: **{result.total}**."
    )


def format_status(
    service: ScheduleService,
    scheduler_running: bool,
    now: Optional[datetime] = None,
) -> str:
    """Bot status plus the next event."""
    now = now or utc_now()
    lines = [
        "**Status**",
        f"Scheduler: {'running' if scheduler_running else 'stopped'}",
        f"Loaded events: **{len(service.catalog)}** | Already warned: **{len(service.ledger)}**",
        f"Now: {format_utc(now)}",
    ]

    event = service.next_event(now)
    if event is None:
        lines.append("No upcoming events.")
    else:
        lines.append(
            f"Next: **{event.label}** at **{format_utc(event.starts_at)}**"
            f" (in {format_remaining(event.starts_at - now)})"
            f" | warn: **{format_utc(event.starts_at - WARN_LEAD)}**"
        )
    return truncate_reply("\n".join(lines))


def help_text(prefix: str) -> str:
    return truncate_reply("\n".join([
        "**Commands**",
        f"`{prefix}help` - show this message",
        f"`{prefix}status` - show bot status + next event",
        f"`{prefix}week` - show upcoming schedules in the next 7 days (UTC)",
        f"`{prefix}month` - show upcoming schedules in the next 1 month (UTC)",
        f"`{prefix}reload` - reload schedules from the schedule files (no spam)",
        "",
        "**Schedule format (UTC):**",
        "`Mon, 12.1. 12:00`",
        "`Wed, 14.1. 4:00`",
        "",
        "**Notes:**",
        "- Bot pings exactly 1 hour before an event.",
        "- It will not ping the same event twice.",
    ]))


class ScheduleCommands(commands.Cog):
    """
    Prefix commands for the event schedule.

    Commands:
    - help - Command overview and schedule format
    - status - Scheduler status and next event
    - week - Events in the next 7 days
    - month - Events in the next month
    - reload - Re-read schedule files
    """

    def __init__(self, bot: commands.Bot, service: ScheduleService, scheduler=None):
        self.bot = bot
        self.service = service
        self.scheduler = scheduler

    async def cog_check(self, ctx: commands.Context) -> bool:
        return ctx.guild is not None

    async def cog_command_error(self, ctx: commands.Context, error: commands.CommandError):
        if isinstance(error, commands.CheckFailure):
            return
        logger.error(f"Command {ctx.command} failed: {error}", exc_info=error)
        await ctx.reply("Sorry, something went wrong running that command.")

    @commands.command(name="help")
    async def show_help(self, ctx: commands.Context):
        """Show available commands."""
        await ctx.reply(help_text(self.service.config.command_prefix))

    @commands.command(name="status")
    async def show_status(self, ctx: commands.Context):
        """Show bot status and the next event."""
        running = bool(self.scheduler and self.scheduler.is_running)
        await ctx.reply(format_status(self.service, running))

    @commands.command(name="week")
    async def show_week(self, ctx: commands.Context):
        """Show events in the next 7 days."""
        events = self.service.upcoming(timedelta(days=7))
        await ctx.reply(format_upcoming("Upcoming (next 7 days, UTC)", events))

    @commands.command(name="month")
    async def show_month(self, ctx: commands.Context):
        """Show events in the next month."""
        events = self.service.upcoming(relativedelta(months=1))
        await ctx.reply(format_upcoming("Upcoming (next 1 month, UTC)", events))

    @commands.command(name="reload")
    async def reload_schedules(self, ctx: commands.Context):
        """Re-read schedule files."""
        result = await self.service.reload()
        logger.info(f"Schedules reloaded by {ctx.author} ({result.total} events)")
        await ctx.reply(format_reload(result))
