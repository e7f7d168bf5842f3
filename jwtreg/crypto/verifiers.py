"""Per-family signature verification against candidate credentials.

Each verifier returns as soon as one candidate validates the signature and
raises :class:`SignatureMismatchError` once the candidates are exhausted. The
error does not tell a wrong key apart from a wrong signature.
"""

from collections.abc import Callable, Sequence
from types import MappingProxyType
from typing import Any

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.asymmetric import ec, padding
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePublicKey
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from cryptography.hazmat.primitives.asymmetric.utils import (
    Prehashed,
    encode_dss_signature,
)

from jwtreg.crypto.algorithms import Algorithm, Family
from jwtreg.crypto.errors import MalformedTokenError, SignatureMismatchError


def _digest(content: bytes, algorithm: Algorithm) -> bytes:
    h = hashes.Hash(algorithm.hash())
    h.update(content)
    return h.finalize()


def verify_hmac(
    content: bytes,
    signature: bytes,
    algorithm: Algorithm,
    candidates: Sequence[bytes],
) -> None:
    """Check an HMAC signature against each secret in constant time."""
    for secret in candidates:
        mac = hmac.HMAC(secret, algorithm.hash())
        mac.update(content)
        try:
            mac.verify(signature)
        except InvalidSignature:
            continue
        return
    raise SignatureMismatchError()


def verify_rsa(
    content: bytes,
    signature: bytes,
    algorithm: Algorithm,
    candidates: Sequence[RSAPublicKey],
) -> None:
    """Check an RSASSA-PKCS1-v1_5 signature against each public key."""
    digest = _digest(content, algorithm)
    for key in candidates:
        try:
            key.verify(
                signature,
                digest,
                padding.PKCS1v15(),
                Prehashed(algorithm.hash()),
            )
        except InvalidSignature:
            continue
        return
    raise SignatureMismatchError()


def verify_ecdsa(
    content: bytes,
    signature: bytes,
    algorithm: Algorithm,
    candidates: Sequence[EllipticCurvePublicKey],
) -> None:
    """Check a raw ``r || s`` ECDSA signature against each public key."""
    size = algorithm.coordinate_size
    if len(signature) != 2 * size:
        raise MalformedTokenError(
            f"{algorithm.name} signature must be {2 * size} bytes,"
            f" got {len(signature)}"
        )
    r = int.from_bytes(signature[:size], "big")
    s = int.from_bytes(signature[size:], "big")
    der = encode_dss_signature(r, s)

    digest = _digest(content, algorithm)
    for key in candidates:
        try:
            key.verify(der, digest, ec.ECDSA(Prehashed(algorithm.hash())))
        except InvalidSignature:
            continue
        return
    raise SignatureMismatchError()


VERIFIERS: MappingProxyType[Family, Callable[[bytes, bytes, Algorithm, Any], None]] = (
    MappingProxyType(
        {
            Family.HMAC: verify_hmac,
            Family.RSA: verify_rsa,
            Family.ECDSA: verify_ecdsa,
        }
    )
)
