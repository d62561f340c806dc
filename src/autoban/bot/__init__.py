"""
Discord-facing layer of Autoban.

- **cogs/**: Slash commands and gateway event listeners.
"""
