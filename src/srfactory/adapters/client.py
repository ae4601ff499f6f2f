"""Schema registry client with a bounded identity map."""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Any, Mapping, Optional
from urllib.parse import unquote, urlparse

from pydantic import ValidationError

from srfactory.adapters.transport import RestTransport
from srfactory.config.models import BasicAuthSettings
from srfactory.domain.ports import ClientFactory

logger = logging.getLogger(__name__)


def resolve_basic_auth(
    config: Mapping[str, Any], base_url: str
) -> Optional[tuple[str, str]]:
    """Resolve basic-auth credentials from client configuration.

    ``basic.auth.credentials.source`` selects where credentials come from:
    ``USER_INFO`` reads ``basic.auth.user.info`` ("user:password"), ``URL`` reads
    the userinfo of the registry URL.

    Raises:
        ValueError: If the source is unknown or the credentials are malformed
    """
    try:
        settings = BasicAuthSettings.model_validate(dict(config))
    except ValidationError as exc:
        raise ValueError(f"Invalid basic auth configuration: {exc}") from exc

    if settings.credentials_source == "NONE":
        return None

    if settings.credentials_source == "USER_INFO":
        if settings.user_info is None:
            raise ValueError("basic.auth.user.info is required when credentials source is USER_INFO")
        username, sep, password = settings.user_info.get_secret_value().partition(":")
        if not sep or not username:
            raise ValueError("basic.auth.user.info must be formatted as 'username:password'")
        return username, password

    parsed = urlparse(base_url)
    if not parsed.username:
        raise ValueError("Registry URL carries no user info for credentials source URL")
    return unquote(parsed.username), unquote(parsed.password or "")


class CachedRegistryClient:
    """Registry client caching schemas by id.

    The identity map holds at most ``identity_map_capacity`` schemas and evicts
    the least recently used entry when full.
    """

    def __init__(
        self,
        transport: RestTransport,
        identity_map_capacity: int,
        config: Mapping[str, Any],
    ) -> None:
        if identity_map_capacity < 1:
            raise ValueError(f"identity_map_capacity must be >= 1, got {identity_map_capacity}")
        self.transport = transport
        self.identity_map_capacity = identity_map_capacity
        self.config = dict(config)
        self._schemas_by_id: OrderedDict[int, str] = OrderedDict()

        credentials = resolve_basic_auth(self.config, transport.base_url)
        if credentials is not None:
            transport.set_basic_auth(*credentials)

    def get_schema_by_id(self, schema_id: int) -> str:
        """Return the schema registered under ``schema_id``."""
        schema = self._schemas_by_id.get(schema_id)
        if schema is not None:
            self._schemas_by_id.move_to_end(schema_id)
            return schema

        response = self.transport.request("GET", f"/schemas/ids/{schema_id}")
        schema = response.json()["schema"]
        self._remember(schema_id, schema)
        return schema

    def cached_ids(self) -> list[int]:
        return list(self._schemas_by_id)

    def close(self) -> None:
        self._schemas_by_id.clear()
        self.transport.close()

    def _remember(self, schema_id: int, schema: str) -> None:
        self._schemas_by_id[schema_id] = schema
        self._schemas_by_id.move_to_end(schema_id)
        while len(self._schemas_by_id) > self.identity_map_capacity:
            evicted, _ = self._schemas_by_id.popitem(last=False)
            logger.debug("Evicted schema from identity map", extra={"schema_id": evicted})


class CachedRegistryClientFactory(ClientFactory[CachedRegistryClient]):
    """Default client factory producing ``CachedRegistryClient`` instances."""

    def create(
        self,
        transport: RestTransport,
        identity_map_capacity: int,
        config: Mapping[str, Any],
    ) -> CachedRegistryClient:
        return CachedRegistryClient(transport, identity_map_capacity, config)
