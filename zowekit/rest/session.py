"""
Zowekit Session

Connection details for one z/OSMF instance.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from zowekit.config import Config, get_config
from zowekit.errors import ConfigError


class Session(BaseModel):
    """
    z/OSMF connection settings.

    Attributes:
        response_timeout: Seconds z/OSMF may spend on a files request
            (sent as X-IBM-Response-Timeout)
        request_timeout: Client-side httpx timeout in seconds
    """
    host: str
    port: int = 443
    user: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)
    protocol: str = "https"
    base_path: str = ""
    reject_unauthorized: bool = True
    response_timeout: Optional[int] = None
    request_timeout: float = 30.0
    token_type: Optional[str] = None
    token_value: Optional[str] = Field(default=None, repr=False)

    model_config = ConfigDict(extra="ignore")

    @field_validator("protocol")
    @classmethod
    def _check_protocol(cls, value: str) -> str:
        value = value.lower()
        if value not in ("http", "https"):
            raise ValueError(f"Unsupported protocol: {value}")
        return value

    @field_validator("base_path")
    @classmethod
    def _normalize_base_path(cls, value: Optional[str]) -> str:
        if not value:
            return ""
        return "/" + value.strip("/")

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.host}:{self.port}{self.base_path}"

    @property
    def has_credentials(self) -> bool:
        return bool((self.user and self.password) or (self.token_type and self.token_value))

    @classmethod
    def from_config(
        cls,
        config: Optional[Config] = None,
        *,
        profile: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "Session":
        """
        Build a session from the team profile, then environment overrides,
        then explicit ``overrides`` (highest precedence).

        Raises:
            ConfigError: If no host can be resolved
        """
        from zowekit.profiles import load_profile

        cfg = config or get_config()
        values: Dict[str, Any] = dict(load_profile(profile or cfg.profile_name, config=cfg))
        values.setdefault("request_timeout", cfg.request_timeout)
        values.update(cfg.connection_overrides())
        if overrides:
            values.update({k: v for k, v in overrides.items() if v is not None})
        if not values.get("host"):
            raise ConfigError(
                "No z/OSMF host configured. Set a zosmf profile, ZOWEKIT_HOST or --host.",
            )
        return cls(**values)
