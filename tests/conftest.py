"""
Pytest configuration and fixtures for Autoban tests.
"""

import sys
from dataclasses import replace
from pathlib import Path

import pytest

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from autoban.configuration.app_configuration import BotSettings  # noqa: E402
from fakes import EXEMPT_ROLE, GUILD_ID, REQUIRED_ROLE, TARGET_ROLE  # noqa: E402


@pytest.fixture
def settings() -> BotSettings:
    return BotSettings(
        token="token",
        guild_id=GUILD_ID,
        client_id=555,
        required_role_id=REQUIRED_ROLE,
        target_role_id=TARGET_ROLE,
        exempt_role_ids=frozenset({EXEMPT_ROLE}),
        dry_run=False,
        scan_on_ready=False,
    )


@pytest.fixture
def dry_run_settings(settings) -> BotSettings:
    return replace(settings, dry_run=True)
