"""
Autoban Discord Bot
===================

Bans members of one guild who never received its required role while
holding only a designated target role, either on demand or at startup,
and offers a bulk message purge command.
"""

import os
import sys
from pathlib import Path


def resolve_base_dir() -> Path:
    """Determine the base directory holding ``.env`` and ``logs/``.

    Resolution order:
    1. AUTOBAN_HOME environment variable, if set. It locates ``.env``, so it
       must come from the real environment; a value inside ``.env`` is ignored.
    2. If running in a frozen/compiled context (e.g., PyInstaller, Nuitka), use the executable's directory.
    3. Otherwise, assume running from source and use the project root.
    """
    if env_home := os.getenv("AUTOBAN_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]


BASE_DIR = resolve_base_dir()

import asyncio
import discord
from dotenv import load_dotenv

from autoban.configuration.app_configuration import BotSettings, ConfigurationError, load_settings
from autoban.util.logger import get_logger


logger = get_logger("main")


def load_environment() -> BotSettings:
    """Load ``.env`` and build the runtime settings.

    Returns
    -------
    BotSettings
        Settings validated from the process environment.

    Raises
    ------
    SystemExit
        If a required variable is missing or malformed.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    try:
        return load_settings(os.environ)
    except ConfigurationError as exc:
        logger.critical("%s Bot cannot start.", exc)
        sys.exit(1)


def build_intents() -> discord.Intents:
    """Construct the Discord intents needed to scan members and purge messages.

    Returns
    -------
    discord.Intents
        Intents enabling guild, member, and message events.
    """
    intents = discord.Intents.default()
    intents.guilds = True
    intents.members = True
    intents.messages = True
    intents.message_content = True
    return intents


def load_cogs(discord_bot_instance: discord.Bot, settings: BotSettings) -> None:
    """Register all cogs with the provided Discord bot instance.

    Parameters
    ----------
    discord_bot_instance:
        Py-Cord bot object that should receive the Autoban cogs.
    settings:
        Runtime settings handed to every cog.
    """
    from autoban.bot.cogs import events_listener, moderation_cmds

    events_listener.setup(discord_bot_instance, settings)
    moderation_cmds.setup(discord_bot_instance, settings)

    logger.info("All cogs loaded successfully.")


def create_bot(settings: BotSettings) -> discord.Bot:
    """Instantiate the Discord bot scoped to the configured guild and register all cogs.

    Command registration is left to the events listener so its outcome is logged.
    """
    bot = discord.Bot(
        intents=build_intents(),
        debug_guilds=[settings.guild_id],
        auto_sync_commands=False,
    )
    load_cogs(bot, settings)
    return bot


async def start_bot(bot: discord.Bot, token: str) -> None:
    """Start the Discord bot and handle lifecycle logging around the connection.

    Parameters
    ----------
    bot:
        Discord client to start.
    token:
        Authentication token used to connect to Discord.
    """
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def shutdown_runtime(bot: discord.Bot | None = None) -> None:
    """Close the Discord connection if it is still open."""
    if bot is not None and not bot.is_closed():
        try:
            await bot.close()
        except Exception:
            logger.exception("Error while closing the Discord client")

    logger.info("Shutdown complete.")


async def async_main() -> int:
    """Bootstrap the bot and run it until it disconnects.

    Returns
    -------
    int
        Process exit code reflecting success or failure.
    """
    settings = load_environment()
    logger.info(
        "Configured for guild %s (DRY_RUN=%s, SCAN_ON_READY=%s, %d exempt roles)",
        settings.guild_id,
        settings.dry_run,
        settings.scan_on_ready,
        len(settings.exempt_role_ids),
    )

    try:
        bot = create_bot(settings)
    except Exception as exc:
        logger.critical("Failed to initialize Discord bot: %s", exc)
        return 1

    exit_code = 0
    try:
        await start_bot(bot, settings.token)
    except discord.LoginFailure as exc:
        logger.critical("Discord rejected the bot token: %s", exc)
        exit_code = 1
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        exit_code = 1
    finally:
        await shutdown_runtime(bot)

    return exit_code


def main() -> int:
    """Entrypoint that orchestrates the async runtime and returns the process code.

    Returns
    -------
    int
        Exit code propagated to the operating system.
    """
    logger.info("Starting Autoban…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        if isinstance(code, int):
            return code
        return 1
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the bot: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
