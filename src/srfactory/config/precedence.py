"""Configuration precedence resolution.

Resolution order: subsystem-prefixed keys → ambient keys

Keys scoped to a subsystem namespace (e.g. ``ksql.schema.registry.ssl.protocol``)
take precedence over ambient keys of the same stripped name (``ssl.protocol``).
Keys that live under another subsystem's namespace are never visible to the
requested subsystem, stripped or otherwise.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Mapping

from srfactory.config.types import ConfigSource, EffectiveConfig


def _reserved(prefix: str, reserved_prefixes: Iterable[str]) -> tuple[str, ...]:
    reserved = [p for p in reserved_prefixes if p]
    if prefix not in reserved:
        reserved.append(prefix)
    return tuple(reserved)


def resolve_prefix_override(
    all_config: Mapping[str, Any],
    prefix: str,
    reserved_prefixes: Iterable[str] = (),
) -> EffectiveConfig:
    """Derive the effective configuration of the subsystem owning ``prefix``.

    Args:
        all_config: Full configuration mapping
        prefix: Namespace prefix of the subsystem (e.g. "ksql.schema.registry.")
        reserved_prefixes: Namespaces of every known subsystem; keys under any of
            them are excluded from the ambient defaults. ``prefix`` is always reserved.

    Returns:
        Read-only mapping of ambient keys overlaid with the stripped prefixed keys

    Example:
        >>> resolve_prefix_override(
        ...     {"ssl.protocol": "TLSv1.2", "ns.ssl.protocol": "SSLv3"}, "ns."
        ... )
        mappingproxy({'ssl.protocol': 'SSLv3'})
    """
    if not prefix:
        raise ValueError("Namespace prefix must be a non-empty string")

    reserved = _reserved(prefix, reserved_prefixes)
    resolved: dict[str, Any] = {}

    # Ambient defaults
    for key, value in all_config.items():
        if not key.startswith(reserved):
            resolved[key] = value

    # Prefixed keys override ambient ones
    for key, value in all_config.items():
        if key.startswith(prefix):
            stripped = key[len(prefix):]
            if stripped:
                resolved[stripped] = value

    return MappingProxyType(resolved)


class PrefixOverrideResolver:
    """Resolves a subsystem's configuration from a global namespace with precedence."""

    def __init__(self, prefix: str, reserved_prefixes: Iterable[str] = ()):
        """Initialize resolver.

        Args:
            prefix: Namespace prefix of the subsystem
            reserved_prefixes: Namespaces of all known subsystems
        """
        if not prefix:
            raise ValueError("Namespace prefix must be a non-empty string")
        self.prefix = prefix
        self.reserved_prefixes = _reserved(prefix, reserved_prefixes)

    def resolve(self, all_config: Mapping[str, Any]) -> EffectiveConfig:
        """Resolve configuration with precedence: prefixed → ambient."""
        return resolve_prefix_override(all_config, self.prefix, self.reserved_prefixes)

    def get_config_source(
        self, key: str, all_config: Mapping[str, Any]
    ) -> ConfigSource | None:
        """Determine where a resolved key came from.

        Args:
            key: Stripped configuration key (as it appears in the resolved mapping)
            all_config: Full configuration mapping

        Returns:
            ConfigSource (PREFIXED or AMBIENT), or None if the key does not resolve
        """
        if key and f"{self.prefix}{key}" in all_config:
            return ConfigSource.PREFIXED

        if key in all_config and not key.startswith(self.reserved_prefixes):
            return ConfigSource.AMBIENT

        return None

    def resolve_with_metadata(
        self, all_config: Mapping[str, Any]
    ) -> tuple[EffectiveConfig, dict[str, ConfigSource]]:
        """Resolve configuration and return source metadata.

        Returns:
            Tuple of (effective_config, source_map)
            where source_map maps resolved key -> ConfigSource
        """
        effective = self.resolve(all_config)
        source_map: dict[str, ConfigSource] = {}
        for key in effective:
            source = self.get_config_source(key, all_config)
            if source is not None:
                source_map[key] = source
        return effective, source_map
