"""Immutable configuration store with namespace extraction."""

from __future__ import annotations

from collections.abc import Mapping
from os import PathLike
from types import MappingProxyType
from typing import Any, Iterable, Iterator

from srfactory.config.loader import config_from_env, load_properties
from srfactory.config.precedence import PrefixOverrideResolver
from srfactory.config.types import EffectiveConfig


class ConfigStore(Mapping):
    """Read-only snapshot of the process configuration.

    Values are ``originals`` overlaid on ``defaults``. The store is never mutated
    after construction; resolution always returns a fresh read-only mapping.
    """

    def __init__(
        self,
        originals: Mapping[str, Any] | None = None,
        *,
        defaults: Mapping[str, Any] | None = None,
        reserved_prefixes: Iterable[str] = (),
    ):
        """Initialize store.

        Args:
            originals: Explicitly supplied configuration values
            defaults: Fallback values for keys absent from ``originals``
            reserved_prefixes: Namespaces of the known subsystems
        """
        self._originals = MappingProxyType(dict(originals or {}))
        values: dict[str, Any] = dict(defaults or {})
        values.update(self._originals)
        self._values = MappingProxyType(values)
        self.reserved_prefixes = tuple(reserved_prefixes)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        env_prefix: str = "SRFACTORY_",
        defaults: Mapping[str, Any] | None = None,
        reserved_prefixes: Iterable[str] = (),
    ) -> ConfigStore:
        """Load configuration from environment variables (see ``config_from_env``)."""
        return cls(
            config_from_env(environ, env_prefix=env_prefix),
            defaults=defaults,
            reserved_prefixes=reserved_prefixes,
        )

    @classmethod
    def from_properties(
        cls,
        path: str | PathLike[str],
        *,
        defaults: Mapping[str, Any] | None = None,
        reserved_prefixes: Iterable[str] = (),
    ) -> ConfigStore:
        """Load configuration from a ``.properties`` file."""
        return cls(
            load_properties(path),
            defaults=defaults,
            reserved_prefixes=reserved_prefixes,
        )

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ConfigStore(keys={sorted(self._values)!r})"

    @property
    def originals(self) -> Mapping[str, Any]:
        """Explicitly supplied values, without defaults."""
        return self._originals

    def originals_with_prefix(self, prefix: str, *, strip: bool = True) -> dict[str, Any]:
        """Return the originals under ``prefix``, optionally with the prefix stripped."""
        result: dict[str, Any] = {}
        for key, value in self._originals.items():
            if key.startswith(prefix) and len(key) > len(prefix):
                result[key[len(prefix):] if strip else key] = value
        return result

    def resolve(self, prefix: str) -> EffectiveConfig:
        """Effective configuration for the subsystem owning ``prefix``.

        Prefixed keys override ambient keys of the same stripped name; keys under
        any other reserved prefix are excluded.
        """
        return PrefixOverrideResolver(prefix, self.reserved_prefixes).resolve(self._values)

    values_with_prefix_override = resolve
