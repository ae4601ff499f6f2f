"""Pydantic models and constants for schema registry configuration."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

# Subsystem namespaces
SCHEMA_REGISTRY_PREFIX = "ksql.schema.registry."
STREAMS_PREFIX = "ksql.streams."
CONNECT_PREFIX = "ksql.connect."
SUBSYSTEM_PREFIXES = (SCHEMA_REGISTRY_PREFIX, STREAMS_PREFIX, CONNECT_PREFIX)

SCHEMA_REGISTRY_URL_PROPERTY = f"{SCHEMA_REGISTRY_PREFIX}url"

TLS_PROTOCOLS = ("TLS", "TLSv1", "TLSv1.1", "TLSv1.2", "TLSv1.3")

REGISTRY_DEFAULTS: dict[str, Any] = {
    SCHEMA_REGISTRY_URL_PROPERTY: "http://localhost:8081",
    "ssl.protocol": "TLSv1.3",
    "ssl.enabled.protocols": "TLSv1.2,TLSv1.3",
    "ssl.keystore.type": "PKCS12",
    "ssl.truststore.type": "PKCS12",
    "ssl.endpoint.identification.algorithm": "https",
}


def _split_list(value: Any) -> Any:
    # Kafka-style list values arrive as comma-separated strings
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class SslSettings(BaseModel):
    """TLS settings read from an effective configuration.

    Field aliases are the dotted configuration keys; unrelated keys are ignored.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    protocol: str = Field(default="TLSv1.3", alias="ssl.protocol")
    enabled_protocols: list[str] = Field(
        default_factory=lambda: ["TLSv1.2", "TLSv1.3"], alias="ssl.enabled.protocols"
    )
    cipher_suites: list[str] = Field(
        default_factory=list,
        alias="ssl.cipher.suites",
        description=(
            "OpenSSL cipher names such as ECDHE-RSA-AES128-GCM-SHA256, applied to "
            "TLS 1.2 and below. TLS 1.3 suites always use OpenSSL defaults."
        ),
    )
    keystore_type: str = Field(default="PKCS12", alias="ssl.keystore.type")
    keystore_location: str | None = Field(None, alias="ssl.keystore.location")
    keystore_password: SecretStr | None = Field(None, alias="ssl.keystore.password")
    key_password: SecretStr | None = Field(None, alias="ssl.key.password")
    truststore_type: str = Field(default="PKCS12", alias="ssl.truststore.type")
    truststore_location: str | None = Field(None, alias="ssl.truststore.location")
    truststore_password: SecretStr | None = Field(None, alias="ssl.truststore.password")
    endpoint_identification_algorithm: str = Field(
        default="https", alias="ssl.endpoint.identification.algorithm"
    )

    @field_validator("enabled_protocols", "cipher_suites", mode="before")
    @classmethod
    def split_comma_lists(cls, v: Any) -> Any:
        """Accept comma-separated strings for list values."""
        return _split_list(v)

    @field_validator("cipher_suites")
    @classmethod
    def validate_cipher_names(cls, v: list[str]) -> list[str]:
        """Reject IANA-style suite names, which OpenSSL does not understand."""
        iana = [name for name in v if name.startswith(("TLS_", "SSL_"))]
        if iana:
            raise ValueError(
                f"ssl.cipher.suites takes OpenSSL cipher names, got IANA names {iana}"
            )
        return v

    @field_validator("protocol")
    @classmethod
    def validate_protocol(cls, v: str) -> str:
        """Only TLS protocol names are accepted."""
        if v not in TLS_PROTOCOLS:
            raise ValueError(f"Unsupported ssl.protocol {v!r}. Expected one of {TLS_PROTOCOLS}")
        return v

    @field_validator("enabled_protocols")
    @classmethod
    def validate_enabled_protocols(cls, v: list[str]) -> list[str]:
        """Enabled protocols must be concrete TLS versions."""
        if not v:
            raise ValueError("ssl.enabled.protocols must not be empty")
        unknown = [p for p in v if p not in TLS_PROTOCOLS[1:]]
        if unknown:
            raise ValueError(f"Unsupported ssl.enabled.protocols: {unknown}")
        return v

    @field_validator("keystore_type", "truststore_type")
    @classmethod
    def normalize_store_type(cls, v: str) -> str:
        return v.upper()

    @field_validator("keystore_location", "truststore_location")
    @classmethod
    def blank_location_is_none(cls, v: str | None) -> str | None:
        return v or None


class BasicAuthSettings(BaseModel):
    """Basic authentication settings for the registry client."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    credentials_source: Literal["URL", "USER_INFO", "NONE"] = Field(
        default="NONE", alias="basic.auth.credentials.source"
    )
    user_info: SecretStr | None = Field(None, alias="basic.auth.user.info")

    @field_validator("credentials_source", mode="before")
    @classmethod
    def normalize_source(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper() or "NONE"
        return v
