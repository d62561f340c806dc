"""
Purge workflows built on the eligibility policy.

- :func:`safe_ban_member` judges a single member and, when the verdict is a
  ban, either logs it (dry run) or issues it.
- :func:`scan_and_purge` walks a membership snapshot, applies the coarse
  required-role and exempt-role filters, and hands survivors to
  :func:`safe_ban_member`.
- :func:`run_guild_scan` fetches the configured guild and its members and
  runs :func:`scan_and_purge`; both the slash command and the startup scan
  go through it.

Per-member failures are logged and never interrupt a scan. Failing to
resolve the guild or its members propagates to the caller.
"""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Iterable, Optional

import discord

from autoban.configuration.app_configuration import BotSettings
from autoban.moderation.eligibility import (
    DEFAULT_BAN_REASON,
    ActorAuthority,
    MemberSnapshot,
    evaluate,
)
from autoban.util.logger import get_logger

logger = get_logger("purge_engine")


COMMAND_BAN_REASON = "Purged by command: missing required role"
STARTUP_BAN_REASON = "Startup scan: missing required role"


class BanOutcome(Enum):
    """What actually happened to a member handed to the policy."""

    SKIPPED = "skipped"
    DRY_RUN = "dry_run"
    BANNED = "banned"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


async def resolve_guild(bot: discord.Bot, guild_id: int) -> discord.Guild:
    """Return the guild from the cache, falling back to the REST API."""
    guild = bot.get_guild(guild_id)
    if guild is None:
        guild = await bot.fetch_guild(guild_id)
    return guild


async def resolve_actor(guild: discord.Guild, bot_user_id: Optional[int] = None) -> ActorAuthority:
    """Build the bot's own authority in ``guild``.

    ``guild.me`` is only populated for cached guilds; otherwise the bot's
    member is fetched when its user id is known.
    """
    me = guild.me
    if me is None and bot_user_id is not None:
        me = await guild.fetch_member(bot_user_id)
    return ActorAuthority.from_member(me)


async def fetch_all_members(guild: discord.Guild) -> list[discord.Member]:
    """Fetch the full membership list of ``guild``."""
    return [member async for member in guild.fetch_members(limit=None)]


async def safe_ban_member(
    guild: discord.Guild,
    member: Optional[discord.Member],
    settings: BotSettings,
    reason: str = DEFAULT_BAN_REASON,
    actor: Optional[ActorAuthority] = None,
) -> BanOutcome:
    """Ban ``member`` if the eligibility policy allows it.

    Parameters
    ----------
    guild:
        Guild the member belongs to.
    member:
        Member to judge; ``None`` is skipped.
    settings:
        Runtime settings supplying the target role and dry-run flag.
    reason:
        Audit-log reason for the ban.
    actor:
        The bot's authority. Resolved from ``guild.me`` when omitted.

    Returns
    -------
    BanOutcome
        ``FAILED`` when Discord rejected the ban; the error is logged, not raised.
    """
    snapshot = MemberSnapshot.from_member(member, guild) if member is not None else None
    if actor is None:
        actor = ActorAuthority.from_member(guild.me)

    decision = evaluate(snapshot, settings.target_role_id, actor, reason)
    if not decision.is_ban:
        if snapshot is not None:
            logger.debug("Skipping %s (%s): %s", snapshot.tag, snapshot.member_id, decision.skip_reason)
        return BanOutcome.SKIPPED

    if settings.dry_run:
        logger.info("[DRY RUN] Would ban %s (%s) for: %s", snapshot.tag, snapshot.member_id, reason)
        return BanOutcome.DRY_RUN

    try:
        await member.ban(reason=reason)
    except Exception:
        logger.exception("Failed to ban %s (%s)", snapshot.tag, snapshot.member_id)
        return BanOutcome.FAILED

    logger.info("Banned %s (%s) for: %s", snapshot.tag, snapshot.member_id, reason)
    return BanOutcome.BANNED


async def scan_and_purge(
    guild: discord.Guild,
    members: Iterable[discord.Member],
    settings: BotSettings,
    reason: str,
    actor: Optional[ActorAuthority] = None,
) -> int:
    """Apply the purge policy to a membership snapshot.

    Members that are bots, own the guild, hold an exempt role, or already
    hold the required role are passed over. Everyone else goes through
    :func:`safe_ban_member`, which applies the stricter target-role-only
    policy.

    Returns
    -------
    int
        Number of members handed to :func:`safe_ban_member`. This is not
        the number of bans; most of those members may still be skipped.
    """
    if actor is None:
        actor = ActorAuthority.from_member(guild.me)

    outcomes: Counter[BanOutcome] = Counter()
    processed = 0

    for member in members:
        if member.bot:
            continue
        if member.id == guild.owner_id:
            continue
        role_ids = [role.id for role in member.roles]
        if settings.is_exempt(role_ids):
            continue
        if settings.required_role_id in role_ids:
            continue

        outcomes[await safe_ban_member(guild, member, settings, reason, actor)] += 1
        processed += 1

    logger.info(
        "Scan finished: processed=%d banned=%d dry_run=%d skipped=%d failed=%d (DRY_RUN=%s)",
        processed,
        outcomes[BanOutcome.BANNED],
        outcomes[BanOutcome.DRY_RUN],
        outcomes[BanOutcome.SKIPPED],
        outcomes[BanOutcome.FAILED],
        settings.dry_run,
    )
    return processed


async def run_guild_scan(bot: discord.Bot, settings: BotSettings, reason: str) -> int:
    """Fetch the configured guild's members and purge them.

    Raises
    ------
    Exception
        Whatever the client raised while resolving the guild, the bot's own
        member, or the membership list. No partial count is returned.
    """
    guild = await resolve_guild(bot, settings.guild_id)
    bot_user_id = bot.user.id if bot.user else None
    actor = await resolve_actor(guild, bot_user_id)
    members = await fetch_all_members(guild)
    logger.debug("Fetched %d members from %s", len(members), guild.id)
    return await scan_and_purge(guild, members, settings, reason, actor)
