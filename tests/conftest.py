"""Shared test fixtures for jwtreg."""

import logging
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePrivateKey
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.x509.oid import NameOID

from jwtreg.crypto.keys import generate_ec_keypair, generate_rsa_keypair
from jwtreg.crypto.types import SigningKeyData


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment variables out of test settings."""
    for name in (
        "JWTREG_PEM_FILES",
        "JWTREG_PEM_PASSWORD",
        "JWTREG_HMAC_SECRETS",
        "JWTREG_LEEWAY_SECONDS",
        "JWTREG_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_root_level() -> Iterator[None]:
    """Undo root logger level changes made by configure_logging."""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


@pytest.fixture(scope="session")
def rsa_keypair() -> SigningKeyData:
    """RSA keypair shared across the test session."""
    return generate_rsa_keypair()


@pytest.fixture(scope="session")
def other_rsa_keypair() -> SigningKeyData:
    """A second, unrelated RSA keypair."""
    return generate_rsa_keypair()


@pytest.fixture(scope="session")
def ec_keypair() -> SigningKeyData:
    """P-256 keypair shared across the test session."""
    return generate_ec_keypair("P-256")


@pytest.fixture
def rsa_private_key(rsa_keypair: SigningKeyData) -> RSAPrivateKey:
    """Private key object of ``rsa_keypair``."""
    key = serialization.load_pem_private_key(
        rsa_keypair.private_key_pem.encode(), password=None
    )
    assert isinstance(key, RSAPrivateKey)
    return key


@pytest.fixture
def ec_private_key(ec_keypair: SigningKeyData) -> EllipticCurvePrivateKey:
    """Private key object of ``ec_keypair``."""
    key = serialization.load_pem_private_key(
        ec_keypair.private_key_pem.encode(), password=None
    )
    assert isinstance(key, EllipticCurvePrivateKey)
    return key


@pytest.fixture
def certificate_pem(rsa_private_key: RSAPrivateKey) -> str:
    """Self-signed certificate for the session RSA key."""
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "jwtreg test")])
    now = datetime.now(UTC)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(rsa_private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=1))
        .sign(rsa_private_key, hashes.SHA256())
    )
    return cert.public_bytes(serialization.Encoding.PEM).decode()
