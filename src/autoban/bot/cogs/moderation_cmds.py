"""
Moderation cog: purge commands for the configured guild.

- ``/purgeunverified`` runs a membership scan and bans members that lack the
  required role and hold nothing but the target role (only logged while
  dry run is on).
- ``/purge`` bulk deletes the most recent messages of the current channel.

Permissions
- ``/purgeunverified`` requires Ban Members, ``/purge`` requires Manage
  Messages. A failed check replies ephemerally to the invoking user and
  touches nothing else.
"""

import discord
from discord import Option
from discord.ext import commands

from autoban.configuration.app_configuration import BotSettings
from autoban.moderation.purge_engine import COMMAND_BAN_REASON, run_guild_scan
from autoban.util.discord_utils import (
    MAX_PURGE_AMOUNT,
    MIN_PURGE_AMOUNT,
    has_permissions,
    is_valid_purge_amount,
)
from autoban.util.logger import get_logger

logger = get_logger("moderation_cog")


class ModerationActionCog(commands.Cog):
    """Cog containing the purge slash commands."""

    def __init__(self, discord_bot_instance, settings: BotSettings):
        """Store the bot instance and the runtime settings.

        Parameters
        ----------
        discord_bot_instance:
            Active :class:`discord.Bot` instance used to reach the guild.
        settings:
            Settings shared with the startup scan.
        """
        self.discord_bot_instance = discord_bot_instance
        self.settings = settings
        logger.info("Moderation cog loaded")

    @commands.slash_command(name="purgeunverified", description="Ban all members without the required role.")
    async def purgeunverified(self, ctx: discord.ApplicationContext) -> None:
        """Scan every member and ban the ones the purge policy selects."""
        if not has_permissions(ctx, ban_members=True):
            await ctx.respond("🚫 You lack `Ban Members` permission.", ephemeral=True)
            return

        await ctx.respond("🔍 Scanning for unverified members...", ephemeral=True)

        try:
            processed = await run_guild_scan(self.discord_bot_instance, self.settings, COMMAND_BAN_REASON)
        except Exception:
            logger.exception("Error during purge scan requested by %s", ctx.author)
            await ctx.send_followup("❌ Error during purge.")
            return

        logger.info("Purge requested by %s processed %d members (DRY_RUN=%s)", ctx.author, processed, self.settings.dry_run)
        await ctx.send_followup(
            f"✅ Purge complete. Processed {processed} members (DRY_RUN={str(self.settings.dry_run).lower()})."
        )

    @commands.slash_command(name="purge", description="Delete recent messages in this channel.")
    async def purge(
        self,
        ctx: discord.ApplicationContext,
        amount: Option(int, f"Number of messages to delete ({MIN_PURGE_AMOUNT}–{MAX_PURGE_AMOUNT})", required=True),  # type: ignore
    ) -> None:
        """Delete up to ``amount`` of the latest messages in the channel."""
        if not has_permissions(ctx, manage_messages=True):
            await ctx.respond("🚫 You lack `Manage Messages` permission.", ephemeral=True)
            return

        if not is_valid_purge_amount(amount):
            await ctx.respond(
                f"⚠️ Amount must be between {MIN_PURGE_AMOUNT} and {MAX_PURGE_AMOUNT}.", ephemeral=True
            )
            return

        await ctx.defer(ephemeral=True)
        try:
            deleted = await ctx.channel.purge(limit=amount)
        except Exception:
            logger.exception("Failed to purge %d messages", amount)
            await ctx.send_followup("❌ Failed to purge messages.", ephemeral=True)
            return

        logger.info("%s purged %d messages in %s", ctx.author, len(deleted), getattr(ctx.channel, "name", ctx.channel))
        await ctx.send_followup(f"✅ Purged {len(deleted)} messages.", ephemeral=True)


def setup(discord_bot_instance, settings: BotSettings) -> None:
    """Register the ModerationActionCog with the bot."""
    discord_bot_instance.add_cog(ModerationActionCog(discord_bot_instance, settings))
