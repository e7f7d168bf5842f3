"""JWT issuance restricted to the supported algorithm families."""

from datetime import UTC, datetime
from typing import Any

import jwt

from jwtreg.crypto.algorithms import Algorithm, lookup
from jwtreg.crypto.types import Claims


class TokenIssuer:
    """Creates signed JWT tokens with a single key and algorithm.

    ``key`` is the HMAC secret for HS* algorithms, and a PEM private key or
    private key object for RS* and ES* algorithms.
    """

    def __init__(self, key: Any, algorithm: str, kid: str | None = None) -> None:
        self._algorithm: Algorithm = lookup(algorithm)
        self._key = key
        self._kid = kid

    @property
    def algorithm(self) -> str:
        """JWS algorithm identifier used for signing."""
        return self._algorithm.name

    def issue(self, claims: Claims, ttl_seconds: int | None = None) -> str:
        """Sign ``claims`` into a compact token.

        With ``ttl_seconds`` the iat and exp claims are set from the current
        time, replacing any values in ``claims``.
        """
        payload = claims.model_dump(exclude_none=True)
        if ttl_seconds is not None:
            now = int(datetime.now(UTC).timestamp())
            payload["iat"] = now
            payload["exp"] = now + ttl_seconds
        headers = {"kid": self._kid} if self._kid is not None else None
        return jwt.encode(
            payload,
            self._key,
            algorithm=self._algorithm.name,
            headers=headers,
        )
