"""Type definitions for tokens, claims, key sets, and JWKS documents."""

from datetime import UTC, datetime

from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePublicKey
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from pydantic import BaseModel, ConfigDict

from jwtreg.crypto.algorithms import Family
from jwtreg.crypto.errors import TokenExpiredError, TokenNotYetValidError


def _to_datetime(value: float | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(value, UTC)


class TokenHeader(BaseModel):
    """JOSE header of a compact token."""

    model_config = ConfigDict(extra="allow")

    alg: str
    kid: str | None = None
    typ: str | None = None
    cty: str | None = None
    crit: list[str] | None = None


class Claims(BaseModel):
    """JWT claims set with the registered claims typed.

    Any other member of the payload is kept as an extra field.
    NumericDate values are seconds since the epoch.
    """

    model_config = ConfigDict(extra="allow")

    iss: str | None = None
    sub: str | None = None
    aud: str | list[str] | None = None
    exp: float | None = None
    nbf: float | None = None
    iat: float | None = None
    jti: str | None = None

    @property
    def audiences(self) -> list[str]:
        """Audience claim normalized to a list."""
        if self.aud is None:
            return []
        if isinstance(self.aud, str):
            return [self.aud]
        return list(self.aud)

    @property
    def expires_at(self) -> datetime | None:
        """Expiry as an aware UTC datetime."""
        return _to_datetime(self.exp)

    @property
    def not_before(self) -> datetime | None:
        """Start of validity as an aware UTC datetime."""
        return _to_datetime(self.nbf)

    @property
    def issued_at(self) -> datetime | None:
        """Issue time as an aware UTC datetime."""
        return _to_datetime(self.iat)

    def validate_temporal(
        self, at: datetime | None = None, leeway: float = 0
    ) -> None:
        """Raise when ``at`` falls outside the nbf/exp window."""
        now = (at or datetime.now(UTC)).timestamp()
        if self.exp is not None and now >= self.exp + leeway:
            raise TokenExpiredError("token expired")
        if self.nbf is not None and now < self.nbf - leeway:
            raise TokenNotYetValidError("token not valid yet")

    def valid(self, at: datetime | None = None, leeway: float = 0) -> bool:
        """Whether ``at`` falls within the nbf/exp window."""
        try:
            self.validate_temporal(at, leeway)
        except (TokenExpiredError, TokenNotYetValidError):
            return False
        return True


class VerifiedToken(BaseModel):
    """Claims of a token whose signature checked out."""

    claims: Claims
    key_id: str | None = None
    raw: bytes


class KeySet(BaseModel):
    """Immutable snapshot of registered credentials."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    secrets: tuple[bytes, ...] = ()
    rsa_keys: tuple[RSAPublicKey, ...] = ()
    ecdsa_keys: tuple[EllipticCurvePublicKey, ...] = ()

    def candidates(
        self, family: Family
    ) -> tuple[bytes, ...] | tuple[RSAPublicKey, ...] | tuple[EllipticCurvePublicKey, ...]:
        """Credentials eligible for ``family``, in registration order."""
        match family:
            case Family.HMAC:
                return self.secrets
            case Family.RSA:
                return self.rsa_keys
            case Family.ECDSA:
                return self.ecdsa_keys


class KeyCounts(BaseModel):
    """Number of credentials per family."""

    secrets: int
    rsa: int
    ecdsa: int


class SigningKeyData(BaseModel):
    """A keypair for JWT signing, PEM encoded."""

    kid: str
    private_key_pem: str
    public_key_pem: str


class JWKEntry(BaseModel):
    """Single public JWK entry in a JWKS document."""

    kty: str
    use: str = "sig"
    alg: str
    kid: str | None = None
    n: str | None = None
    e: str | None = None
    crv: str | None = None
    x: str | None = None
    y: str | None = None


class JWKSResponse(BaseModel):
    """JSON Web Key Set document."""

    keys: list[JWKEntry]
