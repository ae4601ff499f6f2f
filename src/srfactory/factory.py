"""Schema registry client factory.

Resolves the schema registry's effective configuration from the global
configuration, builds a TLS context from it, installs that context on a freshly
supplied transport and delegates client construction to a pluggable factory.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Mapping, TypeVar

from srfactory.adapters.client import CachedRegistryClient, CachedRegistryClientFactory
from srfactory.adapters.tls import SslContextBuilder
from srfactory.adapters.transport import RestTransport, parse_base_urls
from srfactory.config.models import (
    REGISTRY_DEFAULTS,
    SCHEMA_REGISTRY_PREFIX,
    SCHEMA_REGISTRY_URL_PROPERTY,
    SUBSYSTEM_PREFIXES,
)
from srfactory.config.store import ConfigStore
from srfactory.domain.ports import ClientFactory, TlsContextBuilder, Transport
from srfactory.runtime.logging import redact_config

logger = logging.getLogger(__name__)

# Identifier-to-schema cache size handed to every client
IDENTITY_MAP_CAPACITY = 1000

ClientT = TypeVar("ClientT")


class RegistryClientFactory(Generic[ClientT]):
    """Builds schema registry clients from a configuration snapshot.

    Every ``get()`` runs resolve → configure TLS → build context → obtain
    transport → install socket factory → create client, with nothing kept
    between calls. Errors from any collaborator propagate unchanged.

    Not thread-safe: concurrent ``get()`` calls on one instance share the TLS
    builder and must be serialized by the caller.
    """

    def __init__(
        self,
        config: ConfigStore,
        transport_supplier: Callable[[], Transport],
        tls_builder: TlsContextBuilder,
        client_factory: ClientFactory[ClientT],
        *,
        prefix: str = SCHEMA_REGISTRY_PREFIX,
    ) -> None:
        """Initialize factory.

        Args:
            config: Process configuration snapshot (never mutated)
            transport_supplier: Zero-argument callable returning a transport handle,
                evaluated once per ``get()``
            tls_builder: Two-phase TLS context builder
            client_factory: Strategy producing the final client
            prefix: Namespace prefix of the schema registry configuration
        """
        self._config = config
        self._transport_supplier = transport_supplier
        self._tls_builder = tls_builder
        self._client_factory = client_factory
        self._prefix = prefix

    @classmethod
    def from_config(
        cls, config: ConfigStore | Mapping[str, Any]
    ) -> RegistryClientFactory[CachedRegistryClient]:
        """Wire the default TLS builder, HTTP transport and cached client.

        A plain mapping is wrapped in a ``ConfigStore`` with the registry defaults.

        Raises:
            KeyError: If the schema registry URL is not configured
            ValueError: If the URL list is empty
        """
        if not isinstance(config, ConfigStore):
            config = ConfigStore(
                config, defaults=REGISTRY_DEFAULTS, reserved_prefixes=SUBSYSTEM_PREFIXES
            )

        # Fail at construction rather than on first get()
        parse_base_urls(config[SCHEMA_REGISTRY_URL_PROPERTY])

        return cls(
            config,
            lambda: RestTransport(config[SCHEMA_REGISTRY_URL_PROPERTY]),
            SslContextBuilder(),
            CachedRegistryClientFactory(),
        )

    @property
    def prefix(self) -> str:
        return self._prefix

    def effective_config(self) -> Mapping[str, Any]:
        """Resolved schema registry configuration for the current snapshot."""
        return self._config.resolve(self._prefix)

    def get(self) -> ClientT:
        """Build a new client.

        Raises:
            Whatever the TLS builder, transport supplier or client factory raise.
        """
        effective = self.effective_config()

        self._tls_builder.configure(effective)
        context = self._tls_builder.build_context()

        transport = self._transport_supplier()
        transport.set_ssl_socket_factory(context.socket_factory())

        client = self._client_factory.create(transport, IDENTITY_MAP_CAPACITY, effective)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Created schema registry client",
                extra={
                    "prefix": self._prefix,
                    "identity_map_capacity": IDENTITY_MAP_CAPACITY,
                    "config": redact_config(effective),
                },
            )
        return client
