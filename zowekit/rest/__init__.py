"""
Zowekit REST layer

Session settings, proxy resolution and the z/OSMF HTTP client.
"""

from zowekit.rest.client import ZosmfRestClient
from zowekit.rest.proxy import ProxyVariables, get_system_proxy_variables, proxy_url_for
from zowekit.rest.session import Session

__all__ = [
    "ProxyVariables",
    "Session",
    "ZosmfRestClient",
    "get_system_proxy_variables",
    "proxy_url_for",
]
