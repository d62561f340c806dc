"""
Autoban - Role-based member purge bot for Discord

Autoban bans members that never picked up a guild's required role, as long
as the only role they hold is a designated target role. It also offers a
bulk message purge for moderators.

Core Components:

- **Eligibility policy**: An ordered chain of checks (bot, owner, target
  role, sole role, bot authority) deciding whether a member may be banned
- **Purge scans**: Walk the guild's membership on demand through
  ``/purgeunverified`` or once at startup, filtering by required and exempt
  roles before applying the policy
- **Dry run**: Enabled by default; would-be bans are only logged
- **Message purge**: ``/purge`` deletes the latest 1-100 messages of a channel

Usage:
    from autoban.main import main
    main()
"""
