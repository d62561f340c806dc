"""
discord_utils.py
================

Low-level Discord helpers for Autoban.

Permission checks for command invokers and the bounds of the purge
command. Nothing here keeps state.
"""

import discord


MIN_PURGE_AMOUNT = 1
MAX_PURGE_AMOUNT = 100


def has_permissions(application_context: discord.ApplicationContext, **required_permissions) -> bool:
    """
    Check if the command issuer has all specified permissions in the guild.

    Args:
        application_context (discord.ApplicationContext): The command context.
        **required_permissions: Permission flags to check.

    Returns:
        bool: True if all permissions are present, False otherwise.
    """
    if not isinstance(application_context.author, discord.Member):
        return False
    permissions = application_context.author.guild_permissions
    return all(getattr(permissions, permission_name, False) for permission_name in required_permissions)


def is_valid_purge_amount(amount) -> bool:
    """
    Check that a purge count lies within what a single bulk delete accepts.

    Args:
        amount: Number of messages requested.

    Returns:
        bool: True for integers from 1 to 100 inclusive.
    """
    return isinstance(amount, int) and MIN_PURGE_AMOUNT <= amount <= MAX_PURGE_AMOUNT
