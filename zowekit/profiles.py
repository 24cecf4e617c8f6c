"""
Zowekit Team Profiles

Loads connection profiles from the team configuration file
(``zowe.config.json`` in the CLI home). The file is parsed with PyYAML, so a
YAML rendition of the same structure is accepted as well.

Layout:
    {
        "profiles": {
            "lpar1": {"type": "zosmf", "properties": {"host": "...", "port": 443}, "secure": ["password"]},
            "base":  {"type": "base", "properties": {"rejectUnauthorized": false}}
        },
        "defaults": {"zosmf": "lpar1", "base": "base"}
    }
"""

import json
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from zowekit.config import Config, get_config
from zowekit.errors import ConfigError
from zowekit.logging import get_logger

logger = get_logger(__name__)

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


def read_team_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Read the team configuration file; an absent file reads as empty."""
    target = path or get_config().config_file
    if not target.exists():
        return {"profiles": {}, "defaults": {}}
    try:
        data = yaml.safe_load(target.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Unable to parse {target}: {exc}", metadata={"path": str(target)}) from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Unexpected content in {target}", metadata={"path": str(target)})
    data.setdefault("profiles", {})
    data.setdefault("defaults", {})
    return data


def write_team_config(data: Dict[str, Any], path: Optional[Path] = None) -> None:
    target = path or get_config().config_file
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(data, indent=4) + "\n", encoding="utf-8")


def _profile_properties(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    profile = data["profiles"].get(name)
    if profile is None:
        raise ConfigError(f"Profile not found: {name}", metadata={"profile": name})
    return dict(profile.get("properties") or {})


def load_profile(
    name: Optional[str] = None,
    profile_type: str = "zosmf",
    *,
    config: Optional[Config] = None,
) -> Dict[str, Any]:
    """
    Resolve the properties of a profile.

    The default ``base`` profile supplies shared values (host, credentials,
    rejectUnauthorized) and the named or default profile of ``profile_type``
    overrides them. Property names are returned in snake_case.

    Raises:
        ConfigError: If ``name`` is given but does not exist
    """
    cfg = config or get_config()
    data = read_team_config(cfg.config_file)
    merged: Dict[str, Any] = {}

    base_name = data["defaults"].get("base")
    if base_name and base_name in data["profiles"]:
        merged.update(_profile_properties(data, base_name))

    target = name or data["defaults"].get(profile_type)
    if target:
        merged.update(_profile_properties(data, target))
    elif name is None:
        logger.debug("no_default_profile", extra={"profile_type": profile_type})

    return {_snake(k): v for k, v in merged.items()}


def list_profiles(config: Optional[Config] = None) -> Dict[str, Dict[str, Any]]:
    """Return ``{name: {"type": ..., "default": bool}}`` for every profile."""
    cfg = config or get_config()
    data = read_team_config(cfg.config_file)
    defaults = data["defaults"]
    result: Dict[str, Dict[str, Any]] = {}
    for name, profile in data["profiles"].items():
        profile_type = profile.get("type", "")
        result[name] = {
            "type": profile_type,
            "default": defaults.get(profile_type) == name,
            "properties": sorted((profile.get("properties") or {}).keys()),
        }
    return result


def set_profile_property(
    name: str,
    key: str,
    value: Any,
    *,
    config: Optional[Config] = None,
) -> bool:
    """
    Set a property on a profile and write the team configuration back.

    When ``key`` is one of the profile's secure properties the Zowe
    ``onVaultChanged`` user event is emitted so other processes can reload
    their credentials.

    Returns:
        True if the property is secure
    """
    cfg = config or get_config()
    data = read_team_config(cfg.config_file)
    profile = data["profiles"].get(name)
    if profile is None:
        raise ConfigError(f"Profile not found: {name}", metadata={"profile": name})
    profile.setdefault("properties", {})[key] = value
    write_team_config(data, cfg.config_file)

    secure = key in (profile.get("secure") or [])
    logger.info("profile_property_set", extra={"profile": name, "property": key, "secure": secure})
    if secure:
        from zowekit.events import EventOperator, ZoweUserEvents

        EventOperator.get_zowe_processor().emit_zowe_event(ZoweUserEvents.ON_VAULT_CHANGED.value)
    return secure
