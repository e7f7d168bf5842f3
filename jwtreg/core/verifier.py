"""Token verification including the temporal claims."""

from datetime import datetime

from jwtreg.core.bootstrap import build_register, configure_logging
from jwtreg.core.settings import RegisterSettings
from jwtreg.crypto.register import KeyRegister
from jwtreg.crypto.types import VerifiedToken


class TokenVerifier:
    """Checks signatures with a register, then enforces exp and nbf."""

    def __init__(self, register: KeyRegister, leeway_seconds: int = 0) -> None:
        self._register = register
        self._leeway = leeway_seconds

    @classmethod
    def from_settings(
        cls, settings: RegisterSettings | None = None
    ) -> "TokenVerifier":
        """Build a verifier from settings, configuring logging first."""
        settings = settings or RegisterSettings()
        configure_logging(settings.log_level)
        return cls(build_register(settings), settings.leeway_seconds)

    @property
    def register(self) -> KeyRegister:
        """Underlying key register."""
        return self._register

    def verify(self, token: bytes | str, at: datetime | None = None) -> VerifiedToken:
        """Verify the signature and the time window of ``token``."""
        result = self._register.check(token)
        result.claims.validate_temporal(at, self._leeway)
        return result
