import json
from pathlib import Path

import pytest

from zowekit.config import get_config, load_config
from zowekit.errors import ConfigError
from zowekit.events import EventOperator, ZoweUserEvents
from zowekit.extenders import add_profile_type, list_profile_types, read_extenders_json, remove_profile_type
from zowekit.profiles import list_profiles, load_profile, read_team_config, set_profile_property


def _write_team_config(home: Path, data: dict) -> Path:
    path = home / "cli" / "zowe.config.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))
    return path


TEAM_CONFIG = {
    "profiles": {
        "lpar1": {"type": "zosmf", "properties": {"host": "lpar1", "port": 443}, "secure": ["password"]},
        "lpar2": {"type": "zosmf", "properties": {"host": "lpar2", "port": 10443}},
        "base": {"type": "base", "properties": {"user": "ibmuser", "rejectUnauthorized": False}},
    },
    "defaults": {"zosmf": "lpar1", "base": "base"},
}


def test_load_config_defaults_and_env(zowe_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZOWEKIT_PORT", "7554")
    monkeypatch.setenv("ZOWEKIT_LOG_JSON", "yes")

    config = load_config()

    assert config.cli_home == zowe_home / "cli"
    assert config.config_file == zowe_home / "cli" / "zowe.config.json"
    assert config.extenders_file == zowe_home / "cli" / "extenders.json"
    assert config.shared_events_dir == zowe_home / "cli" / ".events"
    assert config.user_events_dir == zowe_home / "user" / ".events"
    assert config.log_json is True
    assert config.connection_overrides() == {"port": 7554}


def test_get_config_is_cached() -> None:
    assert get_config() is get_config()


def test_missing_team_config_reads_empty() -> None:
    assert read_team_config() == {"profiles": {}, "defaults": {}}
    assert load_profile() == {}


def test_load_default_profile_merges_base(zowe_home: Path) -> None:
    _write_team_config(zowe_home, TEAM_CONFIG)

    props = load_profile()

    assert props == {"host": "lpar1", "port": 443, "user": "ibmuser", "reject_unauthorized": False}


def test_load_named_profile(zowe_home: Path) -> None:
    _write_team_config(zowe_home, TEAM_CONFIG)

    assert load_profile("lpar2")["port"] == 10443


def test_unknown_profile_is_an_error(zowe_home: Path) -> None:
    _write_team_config(zowe_home, TEAM_CONFIG)

    with pytest.raises(ConfigError, match="Profile not found: nope"):
        load_profile("nope")


def test_invalid_team_config_is_an_error(zowe_home: Path) -> None:
    path = zowe_home / "cli" / "zowe.config.json"
    path.parent.mkdir(parents=True)
    path.write_text("- just\n- a list\n")

    with pytest.raises(ConfigError, match="Unexpected content"):
        read_team_config()


def test_list_profiles_marks_defaults(zowe_home: Path) -> None:
    _write_team_config(zowe_home, TEAM_CONFIG)

    profiles = list_profiles()

    assert profiles["lpar1"]["default"] is True
    assert profiles["lpar2"]["default"] is False
    assert profiles["base"]["properties"] == ["rejectUnauthorized", "user"]


def test_set_profile_property_writes_back(zowe_home: Path) -> None:
    path = _write_team_config(zowe_home, TEAM_CONFIG)

    secure = set_profile_property("lpar2", "port", 443)

    assert secure is False
    assert json.loads(path.read_text())["profiles"]["lpar2"]["properties"]["port"] == 443


def test_set_secure_property_emits_vault_changed(zowe_home: Path) -> None:
    _write_team_config(zowe_home, TEAM_CONFIG)

    secure = set_profile_property("lpar1", "password", "new")

    assert secure is True
    event_file = get_config().user_events_dir / "Zowe" / ZoweUserEvents.ON_VAULT_CHANGED.value
    assert json.loads(event_file.read_text())["eventName"] == "onVaultChanged"
    assert EventOperator.has_processor("Zowe")


def test_extenders_file_created_with_empty_registry() -> None:
    assert read_extenders_json() == {"profileTypes": {}}
    assert get_config().extenders_file.exists()


def test_add_and_remove_profile_types() -> None:
    assert add_profile_type("zftp", "@zowe/zos-ftp-for-zowe-cli", version="2.1.0") is True
    assert add_profile_type("zftp", "@zowe/zos-ftp-for-zowe-cli", version="2.1.0") is False
    add_profile_type("zftp", "other-plugin")

    data = read_extenders_json()
    assert data["profileTypes"]["zftp"] == {"from": ["@zowe/zos-ftp-for-zowe-cli", "other-plugin"], "version": "2.1.0"}

    assert remove_profile_type("zftp", "other-plugin") is True
    assert list_profile_types() == ["zftp"]
    assert remove_profile_type("zftp", "@zowe/zos-ftp-for-zowe-cli") is True
    assert list_profile_types() == []
    assert remove_profile_type("zftp") is False


def test_corrupt_extenders_file_is_a_config_error() -> None:
    path = get_config().extenders_file
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("{not json")

    with pytest.raises(ConfigError, match="Unable to parse"):
        read_extenders_json()
