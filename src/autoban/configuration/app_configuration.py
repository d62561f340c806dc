from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import FrozenSet, List, Mapping, Optional


REQUIRED_KEYS = ("DISCORD_TOKEN", "GUILD_ID", "CLIENT_ID", "REQUIRED_ROLE_ID", "TARGET_ROLE_ID")


class ConfigurationError(Exception):
    """Raised when the environment does not describe a usable bot."""


def parse_flag(value: Optional[str], default: bool) -> bool:
    """Interpret an environment flag.

    Unset or empty values fall back to ``default``; anything else is true
    only when it spells ``true`` (case-insensitive).
    """
    if not value:
        return default
    return value.strip().lower() == "true"


def parse_snowflake(key: str, value: str) -> int:
    """Convert a Discord id taken from ``key`` into an int."""
    try:
        return int(value.strip())
    except ValueError:
        raise ConfigurationError(f"{key} must be a numeric Discord id, got {value!r}.") from None


def parse_role_list(key: str, value: Optional[str]) -> FrozenSet[int]:
    """Split a comma-separated id list, dropping blank entries."""
    if not value:
        return frozenset()
    return frozenset(
        parse_snowflake(key, item)
        for item in value.split(",")
        if item.strip()
    )


@dataclass(frozen=True, slots=True)
class BotSettings:
    """Immutable runtime settings, built once at startup.

    Attributes:
        token: Bot token used to log in.
        guild_id: The single guild this bot moderates.
        client_id: Application id the token is expected to belong to.
        required_role_id: Members lacking this role are handed to the ban policy.
        target_role_id: Only members whose sole role is this one get banned.
        exempt_role_ids: Holders of any of these roles are never considered.
        dry_run: Log would-be bans instead of issuing them.
        scan_on_ready: Run a scan as soon as the gateway reports ready.
    """
    token: str = field(repr=False)
    guild_id: int
    client_id: int
    required_role_id: int
    target_role_id: int
    exempt_role_ids: FrozenSet[int] = frozenset()
    dry_run: bool = True
    scan_on_ready: bool = False

    def is_exempt(self, role_ids) -> bool:
        """Return True when any of ``role_ids`` is an exempt role."""
        return bool(self.exempt_role_ids) and any(role_id in self.exempt_role_ids for role_id in role_ids)


def missing_keys(environ: Mapping[str, str]) -> List[str]:
    return [key for key in REQUIRED_KEYS if not (environ.get(key) or "").strip()]


def load_settings(environ: Optional[Mapping[str, str]] = None) -> BotSettings:
    """Build :class:`BotSettings` from an environment mapping.

    Parameters
    ----------
    environ:
        Mapping to read from; defaults to ``os.environ``.

    Raises
    ------
    ConfigurationError
        If a required key is absent or an id is not numeric.
    """
    if environ is None:
        environ = os.environ

    absent = missing_keys(environ)
    if absent:
        raise ConfigurationError(
            f"Missing environment variables. Check {', '.join(absent)}."
        )

    return BotSettings(
        token=environ["DISCORD_TOKEN"].strip(),
        guild_id=parse_snowflake("GUILD_ID", environ["GUILD_ID"]),
        client_id=parse_snowflake("CLIENT_ID", environ["CLIENT_ID"]),
        required_role_id=parse_snowflake("REQUIRED_ROLE_ID", environ["REQUIRED_ROLE_ID"]),
        target_role_id=parse_snowflake("TARGET_ROLE_ID", environ["TARGET_ROLE_ID"]),
        exempt_role_ids=parse_role_list("EXEMPT_ROLE_IDS", environ.get("EXEMPT_ROLE_IDS")),
        dry_run=parse_flag(environ.get("DRY_RUN"), default=True),
        scan_on_ready=parse_flag(environ.get("SCAN_ON_READY"), default=False),
    )
