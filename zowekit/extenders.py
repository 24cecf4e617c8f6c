"""
Zowekit Extenders

Reads and updates extenders.json, the registry of profile types contributed
by installed plugins. Its profile type names double as the application
names accepted by the event operator.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from zowekit.config import get_config
from zowekit.errors import ConfigError
from zowekit.logging import get_logger

logger = get_logger(__name__)


def _default_extenders() -> Dict[str, Any]:
    return {"profileTypes": {}}


def _extenders_path(path: Optional[Path] = None) -> Path:
    return path or get_config().extenders_file


def read_extenders_json(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Read extenders.json, creating it with an empty registry when missing.

    Raises:
        ConfigError: If the file exists but is not valid JSON
    """
    target = _extenders_path(path)
    if not target.exists():
        data = _default_extenders()
        write_extenders_json(data, target)
        return data
    try:
        data = json.loads(target.read_text(encoding="utf-8") or "{}")
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Unable to parse {target}: {exc}", metadata={"path": str(target)}) from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Unexpected content in {target}", metadata={"path": str(target)})
    data.setdefault("profileTypes", {})
    return data


def write_extenders_json(data: Dict[str, Any], path: Optional[Path] = None) -> None:
    """Write extenders.json, creating the CLI home directory if needed."""
    target = _extenders_path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(data, indent=4) + "\n", encoding="utf-8")


def list_profile_types(path: Optional[Path] = None) -> List[str]:
    """Return the registered profile type names."""
    return list(read_extenders_json(path)["profileTypes"].keys())


def add_profile_type(
    profile_type: str,
    source: str,
    *,
    version: Optional[str] = None,
    path: Optional[Path] = None,
) -> bool:
    """
    Record that ``source`` contributes ``profile_type``.

    Returns:
        True if the file changed
    """
    data = read_extenders_json(path)
    entry = data["profileTypes"].setdefault(profile_type, {"from": []})
    changed = False
    if source not in entry["from"]:
        entry["from"].append(source)
        changed = True
    if version is not None and entry.get("version") != version:
        entry["version"] = version
        changed = True
    if changed:
        write_extenders_json(data, path)
        logger.info("profile_type_registered", extra={"profile_type": profile_type, "source": source})
    return changed


def remove_profile_type(profile_type: str, source: Optional[str] = None, *, path: Optional[Path] = None) -> bool:
    """
    Remove ``source`` from ``profile_type``; drop the type once no source remains.

    With no ``source`` the profile type is removed outright.
    """
    data = read_extenders_json(path)
    entry = data["profileTypes"].get(profile_type)
    if entry is None:
        return False
    if source is not None:
        sources = [s for s in entry.get("from", []) if s != source]
        if sources:
            entry["from"] = sources
            write_extenders_json(data, path)
            return True
    del data["profileTypes"][profile_type]
    write_extenders_json(data, path)
    logger.info("profile_type_removed", extra={"profile_type": profile_type})
    return True
