"""
Vault package - Local credential vault for Cypher.

Contains:
- derive_key: PBKDF2 / Argon2id derivation with purpose separation
- encrypt_secret, decrypt_secret: AES-256-GCM secret storage
- create_password_verifier, check_password: Password checks without decryption
- VaultStore: On-disk records under fixed logical keys
- VaultWorker: Future-returning wrapper for slow derivations
"""

from .crypto import (
    EncryptedSecretPayload,
    PasswordVerifierRecord,
    derive_key,
    encrypt_secret,
    decrypt_secret,
    create_password_verifier,
    check_password,
    VAULT_VERSION,
    ALGORITHM_AES_GCM,
    KDF_PBKDF2,
    KDF_ARGON2ID,
    PBKDF2_ITERATIONS,
    PURPOSE_ENCRYPTION,
    PURPOSE_VERIFICATION,
)
from .store import VaultStore, SECRET_KEY, VERIFIER_KEY
from .worker import VaultWorker

__all__ = [
    "EncryptedSecretPayload",
    "PasswordVerifierRecord",
    "derive_key",
    "encrypt_secret",
    "decrypt_secret",
    "create_password_verifier",
    "check_password",
    "VAULT_VERSION",
    "ALGORITHM_AES_GCM",
    "KDF_PBKDF2",
    "KDF_ARGON2ID",
    "PBKDF2_ITERATIONS",
    "PURPOSE_ENCRYPTION",
    "PURPOSE_VERIFICATION",
    "VaultStore",
    "SECRET_KEY",
    "VERIFIER_KEY",
    "VaultWorker",
]
