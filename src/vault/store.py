"""
Vault Store - JSON persistence for the encrypted secret and its verifier.

Each record is an opaque blob stored under a fixed logical key. Records are
written atomically (temp file + replace) with owner-only permissions.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from models import AuthenticationFailure, ValidationError, VaultEmpty
from .crypto import (
    EncryptedSecretPayload,
    PasswordVerifierRecord,
    KDF_PBKDF2,
    encrypt_secret,
    decrypt_secret,
    create_password_verifier,
    check_password,
)

logger = logging.getLogger(__name__)

# Logical record keys
SECRET_KEY = "cypher.vault.mnemonic"
VERIFIER_KEY = "cypher.vault.passwordVerifier"

# Secure file permissions (Unix only)
SECURE_FILE_MODE = 0o600  # Owner read/write only


def set_secure_permissions(filepath: Path) -> None:
    """
    Set restrictive file permissions on Unix systems.

    No-op on Windows (NTFS uses ACLs, not Unix permissions).
    """
    if os.name == 'posix':
        try:
            os.chmod(filepath, SECURE_FILE_MODE)
        except OSError:
            # Best effort - don't fail save operation if chmod fails
            pass


class VaultStore:
    """
    Holds one encrypted secret and one password verifier.

    Usage:
        store = VaultStore(get_vault_dir())
        store.initialize("recovery words ...", "my-password")

        store.check_password("my-password")   # True, secret untouched
        phrase = store.unlock("my-password")
    """

    def __init__(self, directory: Path, iterations: Optional[int] = None, kdf: str = KDF_PBKDF2):
        """
        Args:
            directory: Where record files live
            iterations: KDF cost for newly written records (None = KDF default)
            kdf: KDF tag for newly written records
        """
        self.directory = Path(directory)
        self.iterations = iterations
        self.kdf = kdf

    def record_path(self, key: str) -> Path:
        """File path for a logical record key."""
        return self.directory / f"{key}.json"

    # Raw record access

    def _write(self, key: str, data: dict) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        filepath = self.record_path(key)

        temp_path = filepath.with_suffix('.tmp')
        with open(temp_path, 'w') as f:
            json.dump(data, f, indent=2)
        set_secure_permissions(temp_path)

        temp_path.replace(filepath)
        set_secure_permissions(filepath)

    def _read(self, key: str) -> Optional[dict]:
        filepath = self.record_path(key)
        if not filepath.exists():
            return None
        try:
            with open(filepath, 'r') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Corrupted vault record: {key}") from e

    def load_payload(self) -> EncryptedSecretPayload:
        data = self._read(SECRET_KEY)
        if data is None:
            raise VaultEmpty()
        return EncryptedSecretPayload.from_dict(data)

    def load_verifier(self) -> PasswordVerifierRecord:
        data = self._read(VERIFIER_KEY)
        if data is None:
            raise VaultEmpty()
        return PasswordVerifierRecord.from_dict(data)

    def save_payload(self, payload: EncryptedSecretPayload) -> None:
        self._write(SECRET_KEY, payload.to_dict())

    def save_verifier(self, record: PasswordVerifierRecord) -> None:
        self._write(VERIFIER_KEY, record.to_dict())

    # Vault operations

    def has_secret(self) -> bool:
        """Check if an encrypted secret is stored."""
        return self.record_path(SECRET_KEY).exists()

    def initialize(self, secret: str, password: str) -> None:
        """Encrypt and store a secret, replacing any existing one."""
        payload = encrypt_secret(secret, password, self.iterations, self.kdf)
        verifier = create_password_verifier(password, self.iterations, self.kdf)
        self.save_payload(payload)
        self.save_verifier(verifier)
        logger.info("Vault initialized")

    def check_password(self, password: str) -> bool:
        """Check a password using only the verifier record."""
        return check_password(password, self.load_verifier())

    def unlock(self, password: str) -> str:
        """
        Return the stored secret.

        Raises:
            VaultEmpty: nothing stored
            AuthenticationFailure: wrong password or tampered record
        """
        if not self.check_password(password):
            logger.info("Vault unlock rejected")
            raise AuthenticationFailure()
        secret = decrypt_secret(self.load_payload(), password)
        logger.info("Vault unlocked")
        return secret

    def change_password(self, old_password: str, new_password: str) -> None:
        """Re-encrypt the secret and replace the verifier under a new password."""
        secret = self.unlock(old_password)
        self.initialize(secret, new_password)
        logger.info("Vault password changed")

    def reset(self) -> bool:
        """Delete both records. Returns True if anything was removed."""
        removed = False
        for key in (SECRET_KEY, VERIFIER_KEY):
            filepath = self.record_path(key)
            if filepath.exists():
                filepath.unlink()
                removed = True
        if removed:
            logger.info("Vault reset")
        return removed
