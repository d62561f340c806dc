import pytest

from autoban.configuration.app_configuration import (
    BotSettings,
    ConfigurationError,
    load_settings,
    parse_flag,
    parse_role_list,
)


@pytest.fixture()
def environ() -> dict:
    return {
        "DISCORD_TOKEN": "secret-token",
        "GUILD_ID": "1000",
        "CLIENT_ID": "555",
        "REQUIRED_ROLE_ID": "10",
        "TARGET_ROLE_ID": "20",
    }


def test_load_settings_applies_defaults(environ) -> None:
    settings = load_settings(environ)

    assert settings == BotSettings(
        token="secret-token",
        guild_id=1000,
        client_id=555,
        required_role_id=10,
        target_role_id=20,
    )
    assert settings.dry_run is True
    assert settings.scan_on_ready is False
    assert settings.exempt_role_ids == frozenset()


def test_load_settings_reads_optional_keys(environ) -> None:
    environ.update({"EXEMPT_ROLE_IDS": " 40, 41 ,,", "DRY_RUN": "FALSE", "SCAN_ON_READY": "True"})

    settings = load_settings(environ)

    assert settings.exempt_role_ids == frozenset({40, 41})
    assert settings.dry_run is False
    assert settings.scan_on_ready is True


@pytest.mark.parametrize("key", ["DISCORD_TOKEN", "GUILD_ID", "CLIENT_ID", "REQUIRED_ROLE_ID", "TARGET_ROLE_ID"])
def test_missing_required_key_is_fatal(environ, key) -> None:
    del environ[key]

    with pytest.raises(ConfigurationError, match=key):
        load_settings(environ)


def test_blank_required_key_counts_as_missing(environ) -> None:
    environ["REQUIRED_ROLE_ID"] = "   "

    with pytest.raises(ConfigurationError, match="REQUIRED_ROLE_ID"):
        load_settings(environ)


def test_all_missing_keys_are_named() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        load_settings({})

    for key in ("DISCORD_TOKEN", "GUILD_ID", "CLIENT_ID", "REQUIRED_ROLE_ID", "TARGET_ROLE_ID"):
        assert key in str(excinfo.value)


def test_non_numeric_id_is_rejected(environ) -> None:
    environ["TARGET_ROLE_ID"] = "verified"

    with pytest.raises(ConfigurationError, match="TARGET_ROLE_ID must be a numeric Discord id"):
        load_settings(environ)


@pytest.mark.parametrize(
    "value, default, expected",
    [
        (None, True, True),
        ("", True, True),
        (None, False, False),
        ("true", False, True),
        (" TRUE ", False, True),
        ("yes", True, False),
        ("1", True, False),
        ("false", True, False),
    ],
)
def test_parse_flag(value, default, expected) -> None:
    assert parse_flag(value, default) is expected


def test_parse_role_list_rejects_garbage() -> None:
    with pytest.raises(ConfigurationError, match="EXEMPT_ROLE_IDS"):
        parse_role_list("EXEMPT_ROLE_IDS", "40,mods")


def test_is_exempt(environ) -> None:
    environ["EXEMPT_ROLE_IDS"] = "40"
    settings = load_settings(environ)

    assert settings.is_exempt([1000, 40]) is True
    assert settings.is_exempt([1000, 20]) is False


def test_token_is_hidden_from_repr(environ) -> None:
    assert "secret-token" not in repr(load_settings(environ))
