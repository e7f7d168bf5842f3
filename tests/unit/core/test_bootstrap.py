"""Tests for building a register from settings."""

import logging
from pathlib import Path

import pytest
from pydantic import SecretStr

from jwtreg.core.bootstrap import build_register, configure_logging
from jwtreg.core.settings import RegisterSettings
from jwtreg.crypto.errors import KeyLoadError, PEMPolicyError
from jwtreg.crypto.keys import encrypt_private_key_pem
from jwtreg.crypto.types import SigningKeyData


class TestBuildRegister:
    """Tests for build_register."""

    def test_empty_settings(self) -> None:
        counts = build_register(RegisterSettings()).counts()
        assert (counts.secrets, counts.rsa, counts.ecdsa) == (0, 0, 0)

    def test_loads_files_and_secrets(
        self,
        tmp_path: Path,
        rsa_keypair: SigningKeyData,
        ec_keypair: SigningKeyData,
    ) -> None:
        rsa_file = tmp_path / "rsa.pem"
        rsa_file.write_text(rsa_keypair.public_key_pem)
        ec_file = tmp_path / "ec.pem"
        ec_file.write_text(ec_keypair.private_key_pem)
        settings = RegisterSettings(
            pem_files=f"{rsa_file},{ec_file}",
            hmac_secrets=SecretStr("s3cr3t"),
        )
        counts = build_register(settings).counts()
        assert (counts.secrets, counts.rsa, counts.ecdsa) == (1, 1, 1)

    def test_encrypted_file(
        self, tmp_path: Path, rsa_keypair: SigningKeyData
    ) -> None:
        path = tmp_path / "key.pem"
        path.write_text(encrypt_private_key_pem(rsa_keypair.private_key_pem, "pw"))
        settings = RegisterSettings(pem_files=str(path), pem_password=SecretStr("pw"))
        assert build_register(settings).counts().rsa == 1

    def test_load_error_names_file(
        self,
        tmp_path: Path,
        rsa_keypair: SigningKeyData,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        path = tmp_path / "plain.pem"
        path.write_text(rsa_keypair.public_key_pem)
        settings = RegisterSettings(pem_files=str(path), pem_password=SecretStr("pw"))
        with caplog.at_level(logging.ERROR), pytest.raises(PEMPolicyError) as info:
            build_register(settings)
        assert isinstance(info.value, KeyLoadError)
        assert any(str(path) in note for note in info.value.__notes__)
        assert "plain.pem" in caplog.text

    def test_missing_file(self, tmp_path: Path) -> None:
        settings = RegisterSettings(pem_files=str(tmp_path / "absent.pem"))
        with pytest.raises(FileNotFoundError):
            build_register(settings)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_accepts_unknown_level(self) -> None:
        configure_logging("not-a-level")
        assert logging.getLogger().level == logging.INFO

    def test_explicit_level(self) -> None:
        configure_logging("warning")
        assert logging.getLogger().level == logging.WARNING

    def test_level_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JWTREG_LOG_LEVEL", "ERROR")
        configure_logging()
        assert logging.getLogger().level == logging.ERROR
