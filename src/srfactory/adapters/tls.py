"""TLS context builder backed by the standard ``ssl`` module.

Key and trust material may be supplied as PEM files or PKCS#12 stores; PKCS#12
stores are decoded with ``cryptography`` since ``ssl`` only loads PEM.
"""

from __future__ import annotations

import logging
import os
import ssl
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.serialization import pkcs12
from pydantic import SecretStr, ValidationError

from srfactory.config.models import SslSettings
from srfactory.domain.ports import TlsContextBuilder

logger = logging.getLogger(__name__)

_TLS_VERSIONS = {
    "TLSv1": ssl.TLSVersion.TLSv1,
    "TLSv1.1": ssl.TLSVersion.TLSv1_1,
    "TLSv1.2": ssl.TLSVersion.TLSv1_2,
    "TLSv1.3": ssl.TLSVersion.TLSv1_3,
}

_STORE_TYPES = ("PEM", "PKCS12")


class TlsConfigError(ValueError):
    """TLS configuration values that cannot be turned into a context."""


@dataclass(frozen=True)
class TlsContext:
    """Built TLS context.

    Attributes:
        ssl_context: Client-side ``ssl.SSLContext``
    """

    ssl_context: ssl.SSLContext

    def socket_factory(self) -> ssl.SSLContext:
        """Object transports use to wrap their sockets."""
        return self.ssl_context


def _secret_bytes(secret: SecretStr | None) -> bytes | None:
    if secret is None:
        return None
    return secret.get_secret_value().encode()


def _load_pkcs12(location: str, password: SecretStr | None) -> tuple[Any, Any, list[Any]]:
    data = Path(location).read_bytes()
    key, cert, additional = pkcs12.load_key_and_certificates(data, _secret_bytes(password))
    return key, cert, list(additional or [])


def _check_store_type(kind: str, store_type: str) -> None:
    if store_type not in _STORE_TYPES:
        raise TlsConfigError(
            f"Unsupported ssl.{kind}.type {store_type!r}. Expected one of {_STORE_TYPES}"
        )


class SslContextBuilder(TlsContextBuilder):
    """Builds client TLS contexts from resolved ``ssl.*`` configuration.

    Two-phase: ``configure()`` parses and keeps the settings, ``build_context()``
    loads key material and returns a fresh context on every call.
    """

    def __init__(self) -> None:
        self._settings: SslSettings | None = None

    @property
    def settings(self) -> SslSettings | None:
        return self._settings

    def configure(self, config: Mapping[str, Any]) -> None:
        """Parse TLS settings from an effective configuration.

        Raises:
            TlsConfigError: If a TLS value is invalid
        """
        try:
            settings = SslSettings.model_validate(dict(config))
        except ValidationError as exc:
            raise TlsConfigError(f"Invalid TLS configuration: {exc}") from exc

        _check_store_type("keystore", settings.keystore_type)
        _check_store_type("truststore", settings.truststore_type)
        self._settings = settings

    def build_context(self) -> TlsContext:
        """Build a client TLS context from the configured settings.

        Raises:
            RuntimeError: If called before configure()
            TlsConfigError: If protocol bounds or stores are unusable
            OSError: If a store file cannot be read
            ssl.SSLError: If OpenSSL rejects the key material or ciphers
        """
        settings = self._settings
        if settings is None:
            raise RuntimeError("configure() must be called before build_context()")

        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        self._apply_protocol_bounds(context, settings)

        if not settings.endpoint_identification_algorithm:
            context.check_hostname = False

        if settings.cipher_suites:
            context.set_ciphers(":".join(settings.cipher_suites))

        self._load_truststore(context, settings)
        self._load_keystore(context, settings)

        logger.debug(
            "Built TLS context",
            extra={
                "protocol": settings.protocol,
                "enabled_protocols": settings.enabled_protocols,
                "check_hostname": context.check_hostname,
                "keystore": settings.keystore_location,
                "truststore": settings.truststore_location,
            },
        )
        return TlsContext(context)

    def _apply_protocol_bounds(self, context: ssl.SSLContext, settings: SslSettings) -> None:
        versions = [_TLS_VERSIONS[p] for p in settings.enabled_protocols]
        minimum, maximum = min(versions), max(versions)
        if settings.protocol != "TLS":
            maximum = min(maximum, _TLS_VERSIONS[settings.protocol])
        if maximum < minimum:
            raise TlsConfigError(
                f"ssl.protocol {settings.protocol!r} is below every enabled protocol "
                f"{settings.enabled_protocols}"
            )
        context.minimum_version = minimum
        context.maximum_version = maximum

    def _load_truststore(self, context: ssl.SSLContext, settings: SslSettings) -> None:
        location = settings.truststore_location
        if location is None:
            context.load_default_certs(ssl.Purpose.SERVER_AUTH)
            return

        if settings.truststore_type == "PEM":
            context.load_verify_locations(cafile=location)
            return

        _, cert, additional = _load_pkcs12(location, settings.truststore_password)
        certs = [c for c in [cert, *additional] if c is not None]
        if not certs:
            raise TlsConfigError(f"Truststore {location!r} contains no certificates")
        cadata = "".join(c.public_bytes(serialization.Encoding.PEM).decode() for c in certs)
        context.load_verify_locations(cadata=cadata)

    def _load_keystore(self, context: ssl.SSLContext, settings: SslSettings) -> None:
        location = settings.keystore_location
        if location is None:
            return

        if settings.keystore_type == "PEM":
            password = settings.key_password or settings.keystore_password
            context.load_cert_chain(certfile=location, password=_secret_bytes(password))
            return

        key, cert, additional = _load_pkcs12(location, settings.keystore_password)
        if key is None or cert is None:
            raise TlsConfigError(f"Keystore {location!r} must hold a private key and certificate")

        # ssl only loads chains from files; the key is re-encrypted with a one-off password
        transient_password = os.urandom(32).hex().encode()
        key_pem = key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.BestAvailableEncryption(transient_password),
        )
        chain_pem = b"".join(
            c.public_bytes(serialization.Encoding.PEM) for c in [cert, *additional]
        )
        with tempfile.TemporaryDirectory(prefix="srfactory-tls-") as tmp:
            chain_path = Path(tmp) / "chain.pem"
            key_path = Path(tmp) / "key.pem"
            chain_path.write_bytes(chain_pem)
            key_path.write_bytes(key_pem)
            context.load_cert_chain(
                certfile=str(chain_path), keyfile=str(key_path), password=transient_password
            )
