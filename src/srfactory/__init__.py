"""Layered configuration resolution and TLS-aware schema registry client factory."""

from srfactory.config import SCHEMA_REGISTRY_PREFIX, ConfigStore, resolve_prefix_override
from srfactory.factory import IDENTITY_MAP_CAPACITY, RegistryClientFactory
from srfactory.runtime.logging import configure_logging

__all__ = [
    "ConfigStore",
    "IDENTITY_MAP_CAPACITY",
    "RegistryClientFactory",
    "SCHEMA_REGISTRY_PREFIX",
    "configure_logging",
    "resolve_prefix_override",
]

__version__ = "0.1.0"
