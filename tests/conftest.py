"""Shared pytest fixtures for srfactory tests."""

import datetime
from dataclasses import dataclass
from pathlib import Path
from unittest.mock import MagicMock, Mock

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

from srfactory.config import SCHEMA_REGISTRY_PREFIX


@pytest.fixture
def prefix() -> str:
    """Schema registry namespace prefix."""
    return SCHEMA_REGISTRY_PREFIX


@pytest.fixture
def collaborators():
    """Mock collaborators attached to one manager so call order can be asserted.

    Example:
        def test_order(collaborators):
            factory = RegistryClientFactory(config, collaborators.supplier, ...)
            factory.get()
            assert [c[0] for c in collaborators.manager.mock_calls] == [...]
    """
    manager = Mock()

    tls_context = MagicMock(name="tls_context")
    socket_factory = object()
    tls_context.socket_factory.return_value = socket_factory

    tls_builder = MagicMock(name="tls_builder")
    tls_builder.build_context.return_value = tls_context

    transport = MagicMock(name="transport")
    supplier = MagicMock(name="supplier", return_value=transport)

    client = MagicMock(name="client")
    client_factory = MagicMock(name="client_factory")
    client_factory.create.return_value = client

    manager.attach_mock(tls_builder, "tls_builder")
    manager.attach_mock(supplier, "supplier")
    manager.attach_mock(transport, "transport")
    manager.attach_mock(client_factory, "client_factory")

    @dataclass
    class Collaborators:
        manager: Mock
        tls_builder: MagicMock
        tls_context: MagicMock
        socket_factory: object
        supplier: MagicMock
        transport: MagicMock
        client_factory: MagicMock
        client: MagicMock

    return Collaborators(
        manager=manager,
        tls_builder=tls_builder,
        tls_context=tls_context,
        socket_factory=socket_factory,
        supplier=supplier,
        transport=transport,
        client_factory=client_factory,
        client=client,
    )


@dataclass
class TlsMaterial:
    """Self-signed certificate and key written in several store formats."""

    cert_pem: Path
    key_pem: Path
    combined_pem: Path
    keystore_p12: Path
    truststore_p12: Path
    password: str


@pytest.fixture(scope="session")
def tls_material(tmp_path_factory: pytest.TempPathFactory) -> TlsMaterial:
    """Generate a throwaway EC key and self-signed certificate."""
    directory = tmp_path_factory.mktemp("tls")
    password = "changeit"

    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "localhost")])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .add_extension(x509.SubjectAlternativeName([x509.DNSName("localhost")]), critical=False)
        .sign(key, hashes.SHA256())
    )

    cert_bytes = cert.public_bytes(serialization.Encoding.PEM)
    key_bytes = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.BestAvailableEncryption(password.encode()),
    )

    material = TlsMaterial(
        cert_pem=directory / "cert.pem",
        key_pem=directory / "key.pem",
        combined_pem=directory / "keystore.pem",
        keystore_p12=directory / "keystore.p12",
        truststore_p12=directory / "truststore.p12",
        password=password,
    )
    material.cert_pem.write_bytes(cert_bytes)
    material.key_pem.write_bytes(key_bytes)
    material.combined_pem.write_bytes(cert_bytes + key_bytes)
    material.keystore_p12.write_bytes(
        pkcs12.serialize_key_and_certificates(
            b"client",
            key,
            cert,
            None,
            serialization.BestAvailableEncryption(password.encode()),
        )
    )
    material.truststore_p12.write_bytes(
        pkcs12.serialize_key_and_certificates(
            b"ca",
            None,
            None,
            [cert],
            serialization.BestAvailableEncryption(password.encode()),
        )
    )
    return material


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test (no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (default collaborators wired)"
    )
