"""Exception types raised by token verification and key loading.

Every type extends the PyJWT hierarchy, so code that already rejects
``jwt.InvalidTokenError`` rejects these failures as well.
"""

import jwt


class MalformedTokenError(jwt.DecodeError):
    """Token structure, encoding, or JSON content is invalid."""


class UnsecuredTokenError(jwt.InvalidAlgorithmError):
    """Token declares the unsecured "none" algorithm."""


class UnknownAlgorithmError(jwt.InvalidAlgorithmError):
    """Algorithm identifier is not in any supported family."""


class SignatureMismatchError(jwt.InvalidSignatureError):
    """No registered credential validates the token signature."""

    def __init__(self) -> None:
        super().__init__("signature mismatch")


class TokenExpiredError(jwt.ExpiredSignatureError):
    """Claims set expired."""


class TokenNotYetValidError(jwt.ImmatureSignatureError):
    """Claims set is not valid yet."""


class KeyLoadError(jwt.InvalidKeyError):
    """Key material could not be registered.

    ``loaded`` holds the number of PEM blocks registered before the failure.
    """

    def __init__(self, message: str, loaded: int = 0) -> None:
        super().__init__(message)
        self.loaded = loaded


class PEMDecryptError(KeyLoadError):
    """Encrypted PEM block with a missing or wrong password."""


class PEMPolicyError(KeyLoadError):
    """Unencrypted PEM block while a password was supplied."""


class UnsupportedKeyError(KeyLoadError):
    """PEM label or key algorithm outside the supported families."""
