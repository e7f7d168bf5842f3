"""Closed algorithm tables for the HMAC, RSA, and ECDSA families."""

from enum import StrEnum
from types import MappingProxyType
from typing import NamedTuple

from cryptography.hazmat.primitives import hashes

from jwtreg.crypto.errors import UnknownAlgorithmError

UNSECURED_ALG = "none"


class Family(StrEnum):
    """Signature algorithm family."""

    HMAC = "HMAC"
    RSA = "RSA"
    ECDSA = "ECDSA"


class Algorithm(NamedTuple):
    """A JWS algorithm identifier resolved to its primitive parameters."""

    name: str
    family: Family
    hash: type[hashes.HashAlgorithm]
    # Byte length of r and s in a raw ECDSA signature; 0 for other families.
    coordinate_size: int = 0


HMAC_ALGS: MappingProxyType[str, Algorithm] = MappingProxyType(
    {
        "HS256": Algorithm("HS256", Family.HMAC, hashes.SHA256),
        "HS384": Algorithm("HS384", Family.HMAC, hashes.SHA384),
        "HS512": Algorithm("HS512", Family.HMAC, hashes.SHA512),
    }
)

RSA_ALGS: MappingProxyType[str, Algorithm] = MappingProxyType(
    {
        "RS256": Algorithm("RS256", Family.RSA, hashes.SHA256),
        "RS384": Algorithm("RS384", Family.RSA, hashes.SHA384),
        "RS512": Algorithm("RS512", Family.RSA, hashes.SHA512),
    }
)

ECDSA_ALGS: MappingProxyType[str, Algorithm] = MappingProxyType(
    {
        "ES256": Algorithm("ES256", Family.ECDSA, hashes.SHA256, 32),
        "ES384": Algorithm("ES384", Family.ECDSA, hashes.SHA384, 48),
        "ES512": Algorithm("ES512", Family.ECDSA, hashes.SHA512, 66),
    }
)

# Lookup order of the orchestrator.
FAMILY_TABLES: tuple[MappingProxyType[str, Algorithm], ...] = (
    HMAC_ALGS,
    RSA_ALGS,
    ECDSA_ALGS,
)


def match(alg: str, table: MappingProxyType[str, Algorithm]) -> Algorithm:
    """Resolve ``alg`` within a single family table.

    Raises :class:`UnknownAlgorithmError` when the identifier is not part of
    the table. There is no fallback hash and no fallback family.
    """
    try:
        return table[alg]
    except KeyError:
        raise UnknownAlgorithmError(f"algorithm {alg!r} not in family") from None


def lookup(alg: str) -> Algorithm:
    """Resolve ``alg`` by trying every family table in turn."""
    for table in FAMILY_TABLES:
        try:
            return match(alg, table)
        except UnknownAlgorithmError:
            continue
    raise UnknownAlgorithmError(f"algorithm {alg!r} not recognized in any family")


def supported_algorithms() -> list[str]:
    """List every identifier across the three families."""
    return [name for table in FAMILY_TABLES for name in table]
