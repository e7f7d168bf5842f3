"""Startup wiring: logging setup and register construction from settings."""

import logging

from jwtreg.core.settings import RegisterSettings
from jwtreg.crypto.errors import KeyLoadError
from jwtreg.crypto.register import KeyRegister

logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    """Configure standard library logging for an entry point.

    Without ``level`` the ``JWTREG_LOG_LEVEL`` setting is used.
    """
    level = level or RegisterSettings().log_level
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.INFO))


def build_register(settings: RegisterSettings | None = None) -> KeyRegister:
    """Build a register from the configured PEM files and HMAC secrets.

    Load errors propagate so that startup fails; the failing file is noted
    on the exception.
    """
    settings = settings or RegisterSettings()
    register = KeyRegister()
    password = settings.pem_password.get_secret_value()

    for path in settings.get_pem_file_list():
        try:
            n = register.load_pem(path.read_bytes(), password)
        except KeyLoadError as exc:
            logger.error(
                "key load from %s failed after %d blocks: %s", path, exc.loaded, exc
            )
            exc.add_note(f"while loading {path}")
            raise
        logger.info("loaded %d PEM blocks from %s", n, path)

    for secret in settings.get_hmac_secret_list():
        register.add_secret(secret)

    counts = register.counts()
    logger.info(
        "key register ready: %d secrets, %d RSA keys, %d ECDSA keys",
        counts.secrets,
        counts.rsa,
        counts.ecdsa,
    )
    return register
