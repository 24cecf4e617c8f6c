"""
Zowekit Configuration

Pydantic-backed configuration loaded from environment variables.
Uses ZOWEKIT_ prefix for all environment variables.
"""

import os
import threading
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Config(BaseModel):
    """
    Pydantic-backed configuration loaded from environment variables.

    Key env vars:
    - ZOWEKIT_CLI_HOME (default: ~/.zowe) holds zowe.config.json, extenders.json
      and the shared event channels
    - ZOWEKIT_USER_HOME (default: ~/.zowe) holds the per-user event channels
    - ZOWEKIT_PROFILE selects the zosmf profile to connect with
    - ZOWEKIT_HOST / PORT / USER / PASSWORD / PROTOCOL / BASE_PATH override profile values
    - ZOWEKIT_REJECT_UNAUTHORIZED (default: true)
    - ZOWEKIT_LOG_LEVEL (default: WARNING), ZOWEKIT_LOG_JSON
    """

    # Locations
    cli_home: Path = Field(default_factory=lambda: Path.home() / ".zowe")
    user_home: Path = Field(default_factory=lambda: Path.home() / ".zowe")

    # Logging
    log_level: str = Field(default="WARNING")
    log_json: bool = Field(default=False)

    # Connection
    profile_name: Optional[str] = Field(default=None)
    host: Optional[str] = Field(default=None)
    port: Optional[int] = Field(default=None)
    user: Optional[str] = Field(default=None)
    password: Optional[str] = Field(default=None)
    protocol: Optional[str] = Field(default=None)
    base_path: Optional[str] = Field(default=None)
    reject_unauthorized: Optional[bool] = Field(default=None)
    response_timeout: Optional[int] = Field(default=None)
    request_timeout: float = Field(default=30.0)

    # Polling
    event_poll_interval: float = Field(default=0.25)
    job_poll_interval: float = Field(default=3.0)
    job_wait_attempts: int = Field(default=100)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def config_file(self) -> Path:
        """Team configuration file holding connection profiles."""
        return self.cli_home / "zowe.config.json"

    @property
    def extenders_file(self) -> Path:
        """Registry of profile types contributed by plugins."""
        return self.cli_home / "extenders.json"

    @property
    def shared_events_dir(self) -> Path:
        """Root directory of event channels shared by every user of the CLI home."""
        return self.cli_home / ".events"

    @property
    def user_events_dir(self) -> Path:
        """Root directory of per-user event channels."""
        return self.user_home / ".events"

    def connection_overrides(self) -> dict:
        """Return connection fields explicitly set through the environment."""
        fields = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "protocol": self.protocol,
            "base_path": self.base_path,
            "reject_unauthorized": self.reject_unauthorized,
            "response_timeout": self.response_timeout,
        }
        return {k: v for k, v in fields.items() if v is not None}


def _parse_bool(value: Optional[str], default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


def _optional_bool(value: Optional[str]) -> Optional[bool]:
    if value is None or value == "":
        return None
    return _parse_bool(value)


def _home_path(var: str) -> Path:
    raw = os.environ.get(var)
    if raw:
        return Path(raw).expanduser()
    return Path.home() / ".zowe"


def load_config() -> Config:
    """
    Load Zowekit configuration from environment.

    Environment variables use the ZOWEKIT_ prefix.
    """
    return Config(
        # Locations
        cli_home=_home_path("ZOWEKIT_CLI_HOME"),
        user_home=_home_path("ZOWEKIT_USER_HOME"),

        # Logging
        log_level=os.environ.get("ZOWEKIT_LOG_LEVEL", "WARNING"),
        log_json=_parse_bool(os.environ.get("ZOWEKIT_LOG_JSON")),

        # Connection
        profile_name=os.environ.get("ZOWEKIT_PROFILE") or None,
        host=os.environ.get("ZOWEKIT_HOST") or None,
        port=int(v) if (v := os.environ.get("ZOWEKIT_PORT")) else None,
        user=os.environ.get("ZOWEKIT_USER") or None,
        password=os.environ.get("ZOWEKIT_PASSWORD") or None,
        protocol=os.environ.get("ZOWEKIT_PROTOCOL") or None,
        base_path=os.environ.get("ZOWEKIT_BASE_PATH") or None,
        reject_unauthorized=_optional_bool(os.environ.get("ZOWEKIT_REJECT_UNAUTHORIZED")),
        response_timeout=int(v) if (v := os.environ.get("ZOWEKIT_RESPONSE_TIMEOUT")) else None,
        request_timeout=float(os.environ.get("ZOWEKIT_REQUEST_TIMEOUT", "30")),

        # Polling
        event_poll_interval=float(os.environ.get("ZOWEKIT_EVENT_POLL_INTERVAL", "0.25")),
        job_poll_interval=float(os.environ.get("ZOWEKIT_JOB_POLL_INTERVAL", "3")),
        job_wait_attempts=int(os.environ.get("ZOWEKIT_JOB_WAIT_ATTEMPTS", "100")),
    )


# Singleton config instance (lazy loaded)
_config: Optional[Config] = None
_config_lock = threading.Lock()


def get_config() -> Config:
    """Get or create the singleton config instance."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_config()
    return _config


def _reset_config_for_tests() -> None:
    """Reset the global config cache (tests only)."""
    global _config
    with _config_lock:
        _config = None
