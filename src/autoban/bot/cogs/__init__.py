"""
Cogs package for Autoban.

Each module defines a cog class and a setup function to register it with
the bot. The cogs are loaded explicitly in main.py to avoid dynamic imports.

- **events_listener.py**: Slash command registration on connect, the
  optional startup scan on ready, and application command error handling.

- **moderation_cmds.py**: ``/purgeunverified`` and ``/purge``.
"""
