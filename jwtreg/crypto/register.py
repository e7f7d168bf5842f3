"""Registry of credentials recognized for token verification."""

import logging
import threading

from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePublicKey
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from cryptography.hazmat.primitives.asymmetric.types import PublicKeyTypes

from jwtreg.crypto import pem
from jwtreg.crypto.check import check
from jwtreg.crypto.errors import KeyLoadError, UnsupportedKeyError
from jwtreg.crypto.types import KeyCounts, KeySet, VerifiedToken

logger = logging.getLogger(__name__)


class KeyRegister:
    """Holds HMAC secrets and RSA/ECDSA public keys.

    Credentials are only ever appended. Private keys passed in through
    :meth:`load_pem` are reduced to their public key; the register never
    holds private material. Verification runs on an immutable
    :class:`KeySet` snapshot, so concurrent :meth:`check` calls are safe
    while a load is in progress.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._secrets: list[bytes] = []
        self._rsa_keys: list[RSAPublicKey] = []
        self._ecdsa_keys: list[EllipticCurvePublicKey] = []

    def add_secret(self, secret: bytes | str) -> None:
        """Register an HMAC secret."""
        if isinstance(secret, str):
            secret = secret.encode()
        with self._lock:
            self._secrets.append(bytes(secret))

    def add_rsa(self, key: RSAPublicKey) -> None:
        """Register an RSA public key."""
        with self._lock:
            self._rsa_keys.append(key)

    def add_ecdsa(self, key: EllipticCurvePublicKey) -> None:
        """Register an ECDSA public key."""
        with self._lock:
            self._ecdsa_keys.append(key)

    def add_public_key(self, key: PublicKeyTypes) -> None:
        """Register a public key of either asymmetric family."""
        match key:
            case RSAPublicKey():
                self.add_rsa(key)
            case EllipticCurvePublicKey():
                self.add_ecdsa(key)
            case _:
                raise UnsupportedKeyError(
                    f"unsupported key type {type(key).__name__}"
                )

    def load_pem(self, data: bytes | str, password: bytes | str = b"") -> int:
        """Add keys from PEM-encoded data and return the number of blocks.

        Accepts certificates, public keys, and RSA or EC private keys in any
        combination. A non-empty ``password`` requires every block to be
        encrypted. On failure the raised :class:`KeyLoadError` reports the
        count in ``loaded``; keys added before the failing block remain.
        """
        if isinstance(data, str):
            data = data.encode()
        if isinstance(password, str):
            password = password.encode()

        n = 0
        for block in pem.iter_blocks(data):
            try:
                self.add_public_key(pem.block_public_key(block, password))
            except KeyLoadError as exc:
                exc.loaded = n
                raise
            logger.debug("registered key from %s block", block.label)
            n += 1
        return n

    def counts(self) -> KeyCounts:
        """Number of registered credentials per family."""
        with self._lock:
            return KeyCounts(
                secrets=len(self._secrets),
                rsa=len(self._rsa_keys),
                ecdsa=len(self._ecdsa_keys),
            )

    def snapshot(self) -> KeySet:
        """Immutable copy of the current credentials."""
        with self._lock:
            return KeySet(
                secrets=tuple(self._secrets),
                rsa_keys=tuple(self._rsa_keys),
                ecdsa_keys=tuple(self._ecdsa_keys),
            )

    def check(self, token: bytes | str) -> VerifiedToken:
        """Verify ``token`` against the registered credentials."""
        return check(self.snapshot(), token)
