"""
Eligibility policy for automatic bans.

This module holds the pure half of the purge workflow: plain snapshots of
the member being judged and of the acting identity, and :func:`evaluate`,
which turns them into a :class:`Decision`. Nothing here talks to Discord;
``purge_engine`` builds the snapshots from live objects and applies the
decision.

A member is banned only when every check passes, in this order:

1. a member was supplied at all,
2. the member is not a bot account,
3. the member does not own the guild,
4. the member holds the target role,
5. the target role is the member's only role (``@everyone`` aside),
6. the actor may ban and outranks the member.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

import discord


DEFAULT_BAN_REASON = "Matched target role only"


class DecisionType(Enum):
    """Outcome of evaluating one member."""

    SKIP = "skip"
    BAN = "ban"

    def __str__(self) -> str:
        return self.value


class SkipReason(Enum):
    """Why a member was left alone."""

    NO_MEMBER = "no member"
    BOT_ACCOUNT = "bot account"
    GUILD_OWNER = "guild owner"
    MISSING_TARGET_ROLE = "missing target role"
    HAS_OTHER_ROLES = "holds roles besides the target role"
    INSUFFICIENT_AUTHORITY = "bot cannot ban this member"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Decision:
    """A ban or skip verdict.

    Attributes:
        action: Whether to ban or skip.
        reason: Audit-log reason for a ban, or the skip reason's text.
        skip_reason: Set only for skips.
    """
    action: DecisionType
    reason: str
    skip_reason: Optional[SkipReason] = None

    @classmethod
    def skip(cls, skip_reason: SkipReason) -> "Decision":
        return cls(DecisionType.SKIP, str(skip_reason), skip_reason)

    @classmethod
    def ban(cls, reason: str) -> "Decision":
        return cls(DecisionType.BAN, reason)

    @property
    def is_ban(self) -> bool:
        return self.action is DecisionType.BAN


@dataclass(frozen=True, slots=True)
class MemberSnapshot:
    """The facts about a guild member the policy looks at.

    Attributes:
        member_id: Discord user id.
        tag: Human readable name used in log lines.
        is_bot: Whether the account is a bot.
        is_owner: Whether the member owns the guild.
        role_ids: Assigned roles, without the implicit ``@everyone`` role.
        top_role_position: Position of the member's highest role.
    """
    member_id: int
    tag: str
    is_bot: bool
    is_owner: bool
    role_ids: FrozenSet[int]
    top_role_position: int

    def has_role(self, role_id: int) -> bool:
        return role_id in self.role_ids

    @classmethod
    def from_member(cls, member: discord.Member, guild: discord.Guild) -> "MemberSnapshot":
        """Capture ``member`` as seen from ``guild``.

        The ``@everyone`` role shares its id with the guild and is dropped.
        """
        top_role = getattr(member, "top_role", None)
        return cls(
            member_id=member.id,
            tag=str(member),
            is_bot=bool(member.bot),
            is_owner=member.id == guild.owner_id,
            role_ids=frozenset(role.id for role in member.roles if role.id != guild.id),
            top_role_position=top_role.position if top_role is not None else 0,
        )


@dataclass(frozen=True, slots=True)
class ActorAuthority:
    """What the acting identity is allowed to do.

    Attributes:
        can_ban: Whether the actor holds the Ban Members permission.
        top_role_position: Position of the actor's highest role.
    """
    can_ban: bool
    top_role_position: int

    def outranks(self, member: MemberSnapshot) -> bool:
        return self.top_role_position > member.top_role_position

    @classmethod
    def from_member(cls, member: Optional[discord.Member]) -> "ActorAuthority":
        """Read the authority of ``member``; an unknown actor can do nothing."""
        if member is None:
            return cls(can_ban=False, top_role_position=-1)
        return cls(
            can_ban=bool(member.guild_permissions.ban_members),
            top_role_position=member.top_role.position,
        )


def evaluate(
    member: Optional[MemberSnapshot],
    target_role_id: int,
    actor: ActorAuthority,
    reason: str = DEFAULT_BAN_REASON,
) -> Decision:
    """Decide whether ``member`` should be banned.

    Parameters
    ----------
    member:
        Snapshot of the member, or ``None`` when the member could not be resolved.
    target_role_id:
        The role that, when held alone, marks a member for banning.
    actor:
        Authority of the identity that would issue the ban.
    reason:
        Reason attached to a ban decision.

    Returns
    -------
    Decision
        ``Decision.ban(reason)`` if every check passes, otherwise the skip
        for the first check that failed.
    """
    if member is None:
        return Decision.skip(SkipReason.NO_MEMBER)
    if member.is_bot:
        return Decision.skip(SkipReason.BOT_ACCOUNT)
    if member.is_owner:
        return Decision.skip(SkipReason.GUILD_OWNER)
    if not member.has_role(target_role_id):
        return Decision.skip(SkipReason.MISSING_TARGET_ROLE)
    if len(member.role_ids) != 1:
        return Decision.skip(SkipReason.HAS_OTHER_ROLES)
    if not actor.can_ban or not actor.outranks(member):
        return Decision.skip(SkipReason.INSUFFICIENT_AUTHORITY)
    return Decision.ban(reason)
