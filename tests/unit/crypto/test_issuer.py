"""Tests for token issuance."""

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from jwtreg.crypto.errors import UnknownAlgorithmError
from jwtreg.crypto.issuer import TokenIssuer
from jwtreg.crypto.register import KeyRegister
from jwtreg.crypto.types import Claims

SECRET = b"0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"


@pytest.fixture(scope="module")
def rsa_key() -> rsa.RSAPrivateKey:
    """RSA signing key for this module."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="module")
def ec_keys() -> dict[str, ec.EllipticCurvePrivateKey]:
    """ECDSA signing keys per algorithm."""
    return {
        "ES256": ec.generate_private_key(ec.SECP256R1()),
        "ES384": ec.generate_private_key(ec.SECP384R1()),
        "ES512": ec.generate_private_key(ec.SECP521R1()),
    }


class TestRoundTrip:
    """Tests for issue-then-check across all algorithms."""

    @pytest.mark.parametrize("alg", ["HS256", "HS384", "HS512"])
    def test_hmac(self, alg: str) -> None:
        reg = KeyRegister()
        reg.add_secret(SECRET)
        token = TokenIssuer(SECRET, alg).issue(Claims(sub="alice"))
        assert reg.check(token).claims.sub == "alice"

    @pytest.mark.parametrize("alg", ["RS256", "RS384", "RS512"])
    def test_rsa(self, alg: str, rsa_key: rsa.RSAPrivateKey) -> None:
        reg = KeyRegister()
        reg.add_rsa(rsa_key.public_key())
        token = TokenIssuer(rsa_key, alg).issue(Claims(sub="alice"))
        assert reg.check(token).claims.sub == "alice"

    @pytest.mark.parametrize("alg", ["ES256", "ES384", "ES512"])
    def test_ecdsa(
        self, alg: str, ec_keys: dict[str, ec.EllipticCurvePrivateKey]
    ) -> None:
        reg = KeyRegister()
        for key in ec_keys.values():
            reg.add_ecdsa(key.public_key())
        token = TokenIssuer(ec_keys[alg], alg).issue(Claims(sub="alice"))
        assert reg.check(token).claims.sub == "alice"


class TestIssue:
    """Tests for TokenIssuer."""

    def test_ttl_sets_temporal_claims(self) -> None:
        token = TokenIssuer(SECRET, "HS256").issue(Claims(sub="a"), ttl_seconds=60)
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert payload["exp"] - payload["iat"] == 60

    def test_none_claims_omitted(self) -> None:
        token = TokenIssuer(SECRET, "HS256").issue(Claims(sub="a"))
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert payload == {"sub": "a"}

    def test_kid_header(self) -> None:
        token = TokenIssuer(SECRET, "HS256", kid="k1").issue(Claims(sub="a"))
        assert jwt.get_unverified_header(token)["kid"] == "k1"

    @pytest.mark.parametrize("alg", ["none", "PS256", "EdDSA"])
    def test_unsupported_algorithm(self, alg: str) -> None:
        with pytest.raises(UnknownAlgorithmError):
            TokenIssuer(SECRET, alg)

    def test_algorithm_property(self) -> None:
        assert TokenIssuer(SECRET, "RS256").algorithm == "RS256"
