"""Adapter implementations bridging domain ports to infrastructure."""

from .client import CachedRegistryClient, CachedRegistryClientFactory, resolve_basic_auth
from .tls import SslContextBuilder, TlsConfigError, TlsContext
from .transport import RestTransport, parse_base_urls

__all__ = [
    "CachedRegistryClient",
    "CachedRegistryClientFactory",
    "RestTransport",
    "SslContextBuilder",
    "TlsConfigError",
    "TlsContext",
    "parse_base_urls",
    "resolve_basic_auth",
]
