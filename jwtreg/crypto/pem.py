"""PEM block parsing, protected PEM loading, and public key extraction."""

import base64
import binascii
import re
from collections.abc import Iterator
from typing import NamedTuple

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePrivateKey
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.hazmat.primitives.asymmetric.types import PublicKeyTypes

from jwtreg.crypto.errors import (
    KeyLoadError,
    PEMDecryptError,
    PEMPolicyError,
    UnsupportedKeyError,
)

_BLOCK = re.compile(
    rb"-----BEGIN (?P<label>[^-\r\n]+)-----\r?\n"
    rb"(?P<body>.*?)"
    rb"-----END (?P=label)-----",
    re.DOTALL,
)

# Label to the private key class its block must hold.
_PRIVATE_LABELS: dict[str, type] = {
    "RSA PRIVATE KEY": RSAPrivateKey,
    "EC PRIVATE KEY": EllipticCurvePrivateKey,
}


class PEMBlock(NamedTuple):
    """One ``BEGIN``/``END`` delimited block."""

    label: str
    headers: dict[str, str]
    body: bytes
    pem: bytes

    @property
    def encrypted(self) -> bool:
        """Whether the block carries RFC 1421 encryption headers."""
        return self.headers.get("Proc-Type", "").replace(" ", "") == "4,ENCRYPTED"


def _split_headers(body: bytes) -> tuple[dict[str, str], bytes]:
    lines = body.splitlines()
    if not lines or b":" not in lines[0]:
        return {}, body
    headers: dict[str, str] = {}
    for i, line in enumerate(lines):
        if not line.strip():
            return headers, b"\n".join(lines[i + 1 :])
        name, _, value = line.decode("ascii", "replace").partition(":")
        headers[name.strip()] = value.strip()
    return headers, b""


def iter_blocks(data: bytes) -> Iterator[PEMBlock]:
    """Yield the PEM blocks of ``data`` in order, skipping text in between."""
    for found in _BLOCK.finditer(data):
        headers, body = _split_headers(found.group("body"))
        yield PEMBlock(
            found.group("label").decode("ascii"), headers, body, found.group(0)
        )


def check_protection(block: PEMBlock, password: bytes = b"") -> None:
    """Enforce that protection of ``block`` agrees with ``password``.

    A non-empty ``password`` demands protection: unencrypted blocks are then
    rejected instead of loaded as-is.
    """
    if not block.encrypted and password:
        raise PEMPolicyError(
            f"unencrypted {block.label} block rejected due to password expectation"
        )
    if block.encrypted and not password:
        raise PEMDecryptError(f"{block.label} block is encrypted, no password given")


def block_der(block: PEMBlock) -> bytes:
    """Return the DER content of an unencrypted ``block``."""
    try:
        return base64.b64decode(b"".join(block.body.split()), validate=True)
    except binascii.Error:
        raise KeyLoadError(f"{block.label} block is not valid base64") from None


def _private_public_key(block: PEMBlock, password: bytes) -> PublicKeyTypes:
    # Legacy DEK-Info decryption is left to the cryptography loader.
    key = serialization.load_pem_private_key(block.pem, password=password or None)
    if not isinstance(key, _PRIVATE_LABELS[block.label]):
        raise KeyLoadError(f"{block.label} block holds a {type(key).__name__}")
    return key.public_key()


def _parse(block: PEMBlock, password: bytes) -> PublicKeyTypes:
    match block.label:
        case "RSA PRIVATE KEY" | "EC PRIVATE KEY":
            return _private_public_key(block, password)
        case "CERTIFICATE" | "PUBLIC KEY" if block.encrypted:
            raise PEMDecryptError(f"encrypted {block.label} blocks are not supported")
        case "CERTIFICATE":
            return x509.load_der_x509_certificate(block_der(block)).public_key()
        case "PUBLIC KEY":
            return serialization.load_der_public_key(block_der(block))
        case _:
            raise UnsupportedKeyError(f"unknown PEM type {block.label!r}")


def block_public_key(block: PEMBlock, password: bytes = b"") -> PublicKeyTypes:
    """Extract the public key of ``block``.

    Private keys are reduced to their public half; the private key object is
    dropped before returning.
    """
    check_protection(block, password)
    try:
        return _parse(block, password)
    except UnsupportedAlgorithm as exc:
        if block.encrypted:
            raise PEMDecryptError(
                f"unsupported encryption on {block.label} block: {exc}"
            ) from exc
        raise UnsupportedKeyError(
            f"unsupported key in {block.label} block: {exc}"
        ) from exc
    except (ValueError, TypeError) as exc:
        if block.encrypted:
            raise PEMDecryptError(
                f"{block.label} block could not be decrypted, wrong password?"
            ) from exc
        raise KeyLoadError(f"malformed {block.label} block: {exc}") from exc
