"""Token verification against a snapshot of registered credentials."""

from jwtreg.crypto import compact
from jwtreg.crypto.algorithms import UNSECURED_ALG, lookup
from jwtreg.crypto.errors import UnsecuredTokenError
from jwtreg.crypto.types import KeySet, VerifiedToken
from jwtreg.crypto.verifiers import VERIFIERS


def check(keys: KeySet, token: bytes | str) -> VerifiedToken:
    """Verify ``token`` and return its claims if, and only if, the signature
    checks out.

    The header algorithm selects exactly one family; only that family's
    credentials are tried. Unsecured tokens are always rejected. Temporal
    claims are not enforced here, see :meth:`Claims.validate_temporal`.
    """
    parsed = compact.split(token)

    alg = parsed.header.alg
    if alg == UNSECURED_ALG:
        raise UnsecuredTokenError("unsecured token rejected")
    algorithm = lookup(alg)

    verify = VERIFIERS[algorithm.family]
    verify(
        parsed.content,
        parsed.signature,
        algorithm,
        keys.candidates(algorithm.family),
    )

    claims = compact.parse_claims(parsed.payload)
    return VerifiedToken(claims=claims, key_id=parsed.header.kid, raw=parsed.payload)
