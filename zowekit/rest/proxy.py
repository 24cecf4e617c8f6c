"""
Zowekit Proxy Variables

Reads HTTP_PROXY / HTTPS_PROXY / NO_PROXY (either case) from the environment
and decides which proxy, if any, a session should use.
"""

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from zowekit.rest.session import Session


@dataclass
class ProxyVariables:
    """Proxy settings taken from the environment."""
    http_proxy: Optional[str] = None
    https_proxy: Optional[str] = None
    no_proxy: List[str] = field(default_factory=list)


def _env(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(name.upper()) or env.get(name.lower())
    return value or None


def get_system_proxy_variables(env: Optional[Mapping[str, str]] = None) -> ProxyVariables:
    source = os.environ if env is None else env
    no_proxy_raw = _env(source, "no_proxy") or ""
    return ProxyVariables(
        http_proxy=_env(source, "http_proxy"),
        https_proxy=_env(source, "https_proxy"),
        no_proxy=[entry.strip() for entry in no_proxy_raw.split(",") if entry.strip()],
    )


def matches_no_proxy(host: str, no_proxy: List[str]) -> bool:
    """
    True if ``host`` is excluded from proxying.

    Entries match exactly, ``*`` matches everything and an entry starting with
    ``.`` matches any subdomain (and the bare domain).
    """
    host = host.lower()
    for entry in no_proxy:
        entry = entry.lower()
        if entry == "*":
            return True
        if entry.startswith("."):
            if host.endswith(entry) or host == entry[1:]:
                return True
        elif host == entry:
            return True
    return False


def proxy_url_for(session: Session, variables: Optional[ProxyVariables] = None) -> Optional[str]:
    """Proxy URL to use for ``session``, or None to connect directly."""
    variables = variables or get_system_proxy_variables()
    if matches_no_proxy(session.host, variables.no_proxy):
        return None
    if session.protocol == "https":
        return variables.https_proxy or variables.http_proxy
    return variables.http_proxy
