"""
Utility functions and helpers for Autoban.

- **logger.py**: Centralized logging configuration with coloured console
  output through prompt_toolkit and one log file per session. Silences
  Discord's own networking loggers.

- **discord_utils.py**: Stateless permission checks for command invokers
  and validation of the purge command's message count.
"""
