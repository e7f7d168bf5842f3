"""Signing key generation, PEM encryption, and JWK conversion."""

import base64
import json

import uuid_utils
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePublicKey
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from cryptography.hazmat.primitives.asymmetric.types import PublicKeyTypes

from jwtreg.crypto.errors import UnsupportedKeyError
from jwtreg.crypto.types import JWKEntry, JWKSResponse, KeySet, SigningKeyData

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537

# JWK curve name to (curve class, JWS algorithm, coordinate size).
EC_CURVES: dict[str, tuple[type[ec.EllipticCurve], str, int]] = {
    "P-256": (ec.SECP256R1, "ES256", 32),
    "P-384": (ec.SECP384R1, "ES384", 48),
    "P-521": (ec.SECP521R1, "ES512", 66),
}


def _keypair_data(
    private_key: rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey,
) -> SigningKeyData:
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = (
        private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )
    kid = str(uuid_utils.uuid7())
    return SigningKeyData(
        kid=kid, private_key_pem=private_pem, public_key_pem=public_pem
    )


def generate_rsa_keypair() -> SigningKeyData:
    """Generate a new RSA-2048 keypair for JWT signing."""
    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=RSA_KEY_SIZE,
    )
    return _keypair_data(private_key)


def generate_ec_keypair(curve: str = "P-256") -> SigningKeyData:
    """Generate a new ECDSA keypair on a JWK-named curve."""
    if curve not in EC_CURVES:
        raise UnsupportedKeyError(f"unsupported curve {curve!r}")
    curve_cls, _, _ = EC_CURVES[curve]
    return _keypair_data(ec.generate_private_key(curve_cls()))


def encrypt_private_key_pem(private_pem: str, password: str) -> str:
    """Re-encode a PEM private key as a password-protected legacy PEM block."""
    key = serialization.load_pem_private_key(private_pem.encode(), password=None)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.BestAvailableEncryption(password.encode()),
    ).decode()


def _int_to_base64url(value: int, size: int = 0) -> str:
    """Encode an integer as base64url without padding."""
    byte_length = max(size, (value.bit_length() + 7) // 8)
    raw = value.to_bytes(byte_length, byteorder="big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _ec_curve(key: EllipticCurvePublicKey) -> tuple[str, str, int]:
    for name, (curve_cls, alg, size) in EC_CURVES.items():
        if isinstance(key.curve, curve_cls):
            return name, alg, size
    raise UnsupportedKeyError(f"unsupported curve {key.curve.name!r}")


def public_key_to_jwk(key: PublicKeyTypes, kid: str | None = None) -> JWKEntry:
    """Convert a public key to JWK format.

    Without ``kid`` the RFC 7638 thumbprint is used.
    """
    match key:
        case RSAPublicKey():
            numbers = key.public_numbers()
            entry = JWKEntry(
                kty="RSA",
                alg="RS256",
                n=_int_to_base64url(numbers.n),
                e=_int_to_base64url(numbers.e),
            )
        case EllipticCurvePublicKey():
            crv, alg, size = _ec_curve(key)
            numbers = key.public_numbers()
            entry = JWKEntry(
                kty="EC",
                alg=alg,
                crv=crv,
                x=_int_to_base64url(numbers.x, size),
                y=_int_to_base64url(numbers.y, size),
            )
        case _:
            raise UnsupportedKeyError(f"unsupported key type {type(key).__name__}")
    entry.kid = kid or jwk_thumbprint(entry)
    return entry


def jwk_thumbprint(entry: JWKEntry) -> str:
    """RFC 7638 SHA-256 thumbprint of a public JWK."""
    if entry.kty == "RSA":
        members = {"e": entry.e, "kty": entry.kty, "n": entry.n}
    else:
        members = {"crv": entry.crv, "kty": entry.kty, "x": entry.x, "y": entry.y}
    digest = hashes.Hash(hashes.SHA256())
    digest.update(json.dumps(members, separators=(",", ":"), sort_keys=True).encode())
    return base64.urlsafe_b64encode(digest.finalize()).rstrip(b"=").decode()


def keyset_to_jwks(keys: KeySet) -> JWKSResponse:
    """Publish the asymmetric keys of a snapshot as a JWKS document.

    HMAC secrets are never exported.
    """
    entries = [public_key_to_jwk(key) for key in keys.rsa_keys]
    entries.extend(public_key_to_jwk(key) for key in keys.ecdsa_keys)
    return JWKSResponse(keys=entries)
