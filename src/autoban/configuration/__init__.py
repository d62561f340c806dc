"""
Configuration management for Autoban.

- **app_configuration.py**: Parses the process environment (optionally
  seeded from a ``.env`` file) into an immutable :class:`BotSettings`
  instance. Required keys are validated up front so a misconfigured bot
  never connects to Discord.
"""
