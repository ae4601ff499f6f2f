from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol, TypeVar

ClientT = TypeVar("ClientT", covariant=True)


class TlsContext(Protocol):
    def socket_factory(self) -> Any: ...


class TlsContextBuilder(Protocol):
    def configure(self, config: Mapping[str, Any]) -> None: ...

    def build_context(self) -> TlsContext: ...


class Transport(Protocol):
    def set_ssl_socket_factory(self, factory: Any) -> None: ...


TransportSupplier = Callable[[], Transport]


class ClientFactory(Protocol[ClientT]):
    def create(
        self,
        transport: Transport,
        identity_map_capacity: int,
        config: Mapping[str, Any],
    ) -> ClientT: ...
