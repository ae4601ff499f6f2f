"""Configuration management module for srfactory.

This module provides:
- Immutable configuration snapshots with defaults
- Prefix-override resolution of subsystem namespaces
- Loading from environment variables and ``.properties`` files
- Typed TLS and basic-auth settings
"""

from srfactory.config.loader import config_from_env, load_properties, parse_properties
from srfactory.config.models import (
    CONNECT_PREFIX,
    REGISTRY_DEFAULTS,
    SCHEMA_REGISTRY_PREFIX,
    SCHEMA_REGISTRY_URL_PROPERTY,
    STREAMS_PREFIX,
    SUBSYSTEM_PREFIXES,
    BasicAuthSettings,
    SslSettings,
)
from srfactory.config.precedence import PrefixOverrideResolver, resolve_prefix_override
from srfactory.config.store import ConfigStore
from srfactory.config.types import ConfigSource, EffectiveConfig

__all__ = [
    "BasicAuthSettings",
    "CONNECT_PREFIX",
    "ConfigSource",
    "ConfigStore",
    "EffectiveConfig",
    "PrefixOverrideResolver",
    "REGISTRY_DEFAULTS",
    "SCHEMA_REGISTRY_PREFIX",
    "SCHEMA_REGISTRY_URL_PROPERTY",
    "STREAMS_PREFIX",
    "SUBSYSTEM_PREFIXES",
    "SslSettings",
    "config_from_env",
    "load_properties",
    "parse_properties",
    "resolve_prefix_override",
]
