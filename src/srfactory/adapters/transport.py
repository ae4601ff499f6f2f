"""HTTP transport for schema registry endpoints backed by httpx."""

from __future__ import annotations

import logging
import ssl
from typing import Any, Optional, Sequence

import httpx

from srfactory.domain.ports import Transport

logger = logging.getLogger(__name__)


def parse_base_urls(base_urls: str | Sequence[str]) -> list[str]:
    """Split a comma-separated URL list, dropping blanks and trailing slashes.

    Raises:
        ValueError: If no URL remains
    """
    if isinstance(base_urls, str):
        candidates = base_urls.split(",")
    else:
        candidates = list(base_urls)
    urls = [u.strip().rstrip("/") for u in candidates if u and u.strip()]
    if not urls:
        raise ValueError("At least one schema registry URL is required")
    return urls


class RestTransport(Transport):
    """Transport handle for a schema registry.

    Holds the TLS socket factory and credentials installed before use; the
    underlying ``httpx.Client`` is created on first request. Requests go to the
    last URL that answered; connection failures move on to the next URL in the
    list. HTTP error statuses are returned by the server and never fail over.
    """

    def __init__(
        self,
        base_urls: str | Sequence[str],
        *,
        timeout: float = 30.0,
        http_transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_urls = parse_base_urls(base_urls)
        self.timeout = timeout
        self._http_transport = http_transport
        self._ssl_socket_factory: Optional[ssl.SSLContext] = None
        self._auth: Optional[httpx.BasicAuth] = None
        self._client: Optional[httpx.Client] = None
        self._active = 0

    @property
    def base_url(self) -> str:
        """URL the next request is sent to first."""
        return self.base_urls[self._active]

    @property
    def ssl_socket_factory(self) -> Optional[ssl.SSLContext]:
        return self._ssl_socket_factory

    def set_ssl_socket_factory(self, factory: ssl.SSLContext) -> None:
        """Install the TLS context used for https connections."""
        self._ssl_socket_factory = factory
        self._reset_client()

    def set_basic_auth(self, username: str, password: str) -> None:
        self._auth = httpx.BasicAuth(username, password)
        self._reset_client()

    @property
    def has_basic_auth(self) -> bool:
        return self._auth is not None

    def http_client(self) -> httpx.Client:
        """Return the shared ``httpx.Client``, creating it on first use."""
        if self._client is None:
            verify: Any = self._ssl_socket_factory if self._ssl_socket_factory is not None else True
            self._client = httpx.Client(
                verify=verify,
                auth=self._auth,
                timeout=self.timeout,
                transport=self._http_transport,
            )
            logger.debug(
                "Created registry HTTP client",
                extra={"base_urls": self.base_urls, "tls": self._ssl_socket_factory is not None},
            )
        return self._client

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request, trying each base URL in turn on connection failure.

        Raises:
            httpx.HTTPStatusError: If the registry answers with an error status
            httpx.TransportError: The last connection error, if no URL answered
        """
        count = len(self.base_urls)
        order = [(self._active + offset) % count for offset in range(count)]
        for index in order[:-1]:
            try:
                return self._send(index, method, path, **kwargs)
            except httpx.TransportError as exc:
                logger.warning(
                    "Schema registry unreachable, trying next URL",
                    extra={"base_url": self.base_urls[index], "error": str(exc)},
                )
        return self._send(order[-1], method, path, **kwargs)

    def _send(self, index: int, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = self.base_urls[index] + "/" + path.lstrip("/")
        response = self.http_client().request(method, url, **kwargs)
        self._active = index
        response.raise_for_status()
        return response

    def close(self) -> None:
        self._reset_client()

    def _reset_client(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
