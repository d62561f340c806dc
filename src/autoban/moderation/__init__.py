"""
Member purge policy for Autoban.

- **eligibility.py**: Pure decision layer. Snapshots of the member and of
  the acting identity, the ``Decision`` type, and ``evaluate``, the ordered
  chain of checks that decides between a ban and a skip.

- **purge_engine.py**: Applies decisions against Discord. ``safe_ban_member``
  honours dry-run mode and contains per-member failures, ``scan_and_purge``
  filters a membership snapshot by required and exempt roles, and
  ``run_guild_scan`` fetches the guild and its members for the slash
  command and the startup scan.
"""
