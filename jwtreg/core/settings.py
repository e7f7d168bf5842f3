"""Register settings loaded from environment variables."""

from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

LEEWAY_SECONDS_DEFAULT = 0


class RegisterSettings(BaseSettings):
    """Key material and verification settings."""

    model_config = SettingsConfigDict(env_prefix="JWTREG_")

    pem_files: str = ""
    pem_password: SecretStr = SecretStr("")
    hmac_secrets: SecretStr = SecretStr("")
    leeway_seconds: int = LEEWAY_SECONDS_DEFAULT
    log_level: str = "INFO"

    def get_pem_file_list(self) -> list[Path]:
        """Parse comma-separated PEM file paths."""
        if not self.pem_files:
            return []
        return [Path(p.strip()) for p in self.pem_files.split(",") if p.strip()]

    def get_hmac_secret_list(self) -> list[bytes]:
        """Parse comma-separated HMAC secrets."""
        raw = self.hmac_secrets.get_secret_value()
        if not raw:
            return []
        return [s.strip().encode() for s in raw.split(",") if s.strip()]
