"""Event listener Cog for Autoban.

This cog registers the slash commands once the gateway connects, runs the
optional startup scan when the bot is ready, and reports command errors.
"""

import discord
from discord.ext import commands

from autoban.configuration.app_configuration import BotSettings
from autoban.moderation.purge_engine import STARTUP_BAN_REASON, run_guild_scan
from autoban.util.logger import get_logger

logger = get_logger("events_listener_cog")


class EventsListenerCog(commands.Cog):
    """Cog containing bot lifecycle and command error handlers."""

    def __init__(self, discord_bot_instance, settings: BotSettings):
        """Initialize the events listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        settings:
            Runtime settings; decides whether a startup scan runs.
        """
        self.bot = discord_bot_instance
        self.settings = settings
        self.startup_scan_done = False
        logger.info("Events listener cog loaded")

    @commands.Cog.listener(name="on_connect")
    async def on_connect(self):
        """Register the slash commands for the configured guild."""
        application_id = getattr(self.bot, "application_id", None)
        if application_id and application_id != self.settings.client_id:
            logger.warning(
                "Token belongs to application %s but CLIENT_ID is %s", application_id, self.settings.client_id
            )

        logger.info("Registering slash commands...")
        try:
            await self.bot.sync_commands(guild_ids=[self.settings.guild_id])
        except Exception as exc:
            logger.error("Failed to register commands: %s", exc, exc_info=True)
            return
        logger.info("Slash commands registered.")

    @commands.Cog.listener(name="on_ready")
    async def on_ready(self):
        """Log the connected identity and run the startup scan when enabled.

        ``on_ready`` fires again after a resumed session; the scan runs once
        per process.
        """
        if self.bot.user:
            logger.info(f"Logged in as {self.bot.user} (ID: {self.bot.user.id})")
        else:
            logger.warning("Bot partially connected, but user information not yet available.")

        if not self.settings.scan_on_ready or self.startup_scan_done:
            return
        self.startup_scan_done = True
        await self.run_startup_scan()

    async def run_startup_scan(self) -> None:
        logger.info("Running startup scan for unverified members...")
        try:
            processed = await run_guild_scan(self.bot, self.settings, STARTUP_BAN_REASON)
        except Exception as exc:
            logger.error("Error during startup scan: %s", exc, exc_info=True)
            return
        logger.info(
            "Startup scan complete. Processed %d members (DRY_RUN=%s).", processed, self.settings.dry_run
        )

    @commands.Cog.listener(name="on_application_command_error")
    async def on_application_command_error(self, application_context: discord.ApplicationContext, error: Exception):
        """Handle errors from application commands with logging and user feedback.

        Parameters
        ----------
        application_context:
            The command invocation context.
        error:
            The exception raised during command execution.
        """
        if isinstance(error, commands.CommandNotFound):
            return

        command_name = getattr(application_context.command, "name", "<unknown>")
        logger.error(f"Error in command '{command_name}': {error}", exc_info=True)

        error_message = "A :bug: showed up while running this command."
        try:
            await application_context.respond(error_message, ephemeral=True)
        except discord.InteractionResponded:
            await application_context.followup.send(error_message, ephemeral=True)


def setup(discord_bot_instance, settings: BotSettings):
    """Register the EventsListenerCog with the bot."""
    discord_bot_instance.add_cog(EventsListenerCog(discord_bot_instance, settings))
