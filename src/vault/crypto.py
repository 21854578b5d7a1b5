"""
Vault Crypto - Password-protected storage of a local recovery phrase.

Industry-standard security:
- PBKDF2-HMAC-SHA256 key derivation (120,000 iterations by default)
- Argon2id key derivation (memory-hard) for records that ask for it
- AES-256-GCM authenticated encryption
- Separate salted password verifier, so a password can be checked
  without ever touching the encrypted secret

The encryption key and the verification digest come from independent
salts and distinct derivation contexts, so a leaked verifier is useless
for decrypting the secret.
"""

import hmac
import secrets
from dataclasses import dataclass
from typing import Optional

# Cryptography
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from argon2.low_level import hash_secret_raw, Type

from models import AuthenticationFailure, ValidationError
from utils import utc_now_iso


# ============================================
# Security Constants
# ============================================

VAULT_VERSION = 1

ALGORITHM_AES_GCM = "AES-GCM"

KDF_PBKDF2 = "PBKDF2-SHA256"
KDF_ARGON2ID = "argon2id"
SUPPORTED_KDFS = (KDF_PBKDF2, KDF_ARGON2ID)

# PBKDF2 cost (tunable per deployment)
PBKDF2_ITERATIONS = 120_000

# Argon2id parameters; "iterations" on a record is the Argon2 time cost
ARGON2_TIME_COST = 3
ARGON2_MEMORY_COST = 65536  # 64 MB
ARGON2_PARALLELISM = 4

KEY_SIZE = 32  # 256 bits for AES-256
SALT_SIZE = 16
AES_IV_SIZE = 12  # 96 bits (recommended for GCM)

# Derivation purposes
PURPOSE_ENCRYPTION = "encryption-key"
PURPOSE_VERIFICATION = "verification-digest"
PURPOSES = (PURPOSE_ENCRYPTION, PURPOSE_VERIFICATION)


# ============================================
# Key Derivation
# ============================================

def default_iterations(kdf: str) -> int:
    """Default cost parameter for a KDF tag."""
    return ARGON2_TIME_COST if kdf == KDF_ARGON2ID else PBKDF2_ITERATIONS


def derive_key(
    password: str,
    salt: bytes,
    iterations: int = PBKDF2_ITERATIONS,
    purpose: str = PURPOSE_ENCRYPTION,
    kdf: str = KDF_PBKDF2
) -> bytes:
    """
    Derive 32 bytes from a password for one purpose.

    The purpose label is bound into the salt, so the same password and salt
    still give unrelated outputs for encryption and verification.

    Raises: ValidationError for an unknown purpose or KDF tag.
    """
    if purpose not in PURPOSES:
        raise ValidationError(f"Unknown key purpose: {purpose}")
    if iterations < 1:
        raise ValidationError("KDF iterations must be positive")

    context_salt = f"cypher/{purpose}:".encode('ascii') + salt
    secret = password.encode('utf-8')

    if kdf == KDF_PBKDF2:
        return PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_SIZE,
            salt=context_salt,
            iterations=iterations,
        ).derive(secret)

    if kdf == KDF_ARGON2ID:
        return hash_secret_raw(
            secret=secret,
            salt=context_salt,
            time_cost=iterations,
            memory_cost=ARGON2_MEMORY_COST,
            parallelism=ARGON2_PARALLELISM,
            hash_len=KEY_SIZE,
            type=Type.ID
        )

    raise ValidationError(f"Unsupported KDF: {kdf}")


# ============================================
# Records
# ============================================

def _require(data: dict, key: str, kind: type):
    value = data.get(key)
    if not isinstance(value, kind) or isinstance(value, bool):
        raise ValidationError(f"Malformed vault record: bad or missing '{key}'")
    return value


def _require_hex(data: dict, key: str) -> bytes:
    try:
        return bytes.fromhex(_require(data, key, str))
    except ValueError as e:
        raise ValidationError(f"Malformed vault record: '{key}' is not hex") from e


@dataclass(frozen=True)
class EncryptedSecretPayload:
    """An encrypted secret. cipher_text includes the 16-byte GCM tag."""
    version: int
    algorithm: str
    kdf: str
    iterations: int
    salt: bytes
    iv: bytes
    cipher_text: bytes
    created_at: str

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "algorithm": self.algorithm,
            "kdf": self.kdf,
            "iterations": self.iterations,
            "salt": self.salt.hex(),
            "iv": self.iv.hex(),
            "cipherText": self.cipher_text.hex(),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EncryptedSecretPayload":
        """Parse a stored payload. Raises ValidationError if malformed."""
        if not isinstance(data, dict):
            raise ValidationError("Malformed vault record")
        payload = cls(
            version=_require(data, "version", int),
            algorithm=_require(data, "algorithm", str),
            kdf=_require(data, "kdf", str),
            iterations=_require(data, "iterations", int),
            salt=_require_hex(data, "salt"),
            iv=_require_hex(data, "iv"),
            cipher_text=_require_hex(data, "cipherText"),
            created_at=data.get("createdAt", ""),
        )
        payload.validate()
        return payload

    def validate(self) -> None:
        """Check structure only; says nothing about the password."""
        if self.version != VAULT_VERSION:
            raise ValidationError(f"Unsupported vault version: {self.version}")
        if self.algorithm != ALGORITHM_AES_GCM:
            raise ValidationError(f"Unsupported algorithm: {self.algorithm}")
        if self.kdf not in SUPPORTED_KDFS:
            raise ValidationError(f"Unsupported KDF: {self.kdf}")
        if self.iterations < 1 or not self.salt or len(self.iv) != AES_IV_SIZE:
            raise ValidationError("Malformed vault record")


@dataclass(frozen=True)
class PasswordVerifierRecord:
    """Salted password digest, stored apart from the encrypted secret."""
    version: int
    kdf: str
    iterations: int
    salt: bytes
    hash: bytes

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "kdf": self.kdf,
            "iterations": self.iterations,
            "salt": self.salt.hex(),
            "hash": self.hash.hex(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PasswordVerifierRecord":
        """Parse a stored verifier. Raises ValidationError if malformed."""
        if not isinstance(data, dict):
            raise ValidationError("Malformed verifier record")
        record = cls(
            version=_require(data, "version", int),
            kdf=_require(data, "kdf", str),
            iterations=_require(data, "iterations", int),
            salt=_require_hex(data, "salt"),
            hash=_require_hex(data, "hash"),
        )
        if record.version != VAULT_VERSION:
            raise ValidationError(f"Unsupported verifier version: {record.version}")
        if record.kdf not in SUPPORTED_KDFS:
            raise ValidationError(f"Unsupported KDF: {record.kdf}")
        if record.iterations < 1 or not record.salt or len(record.hash) != KEY_SIZE:
            raise ValidationError("Malformed verifier record")
        return record


# ============================================
# Encryption
# ============================================

def encrypt_secret(
    plaintext: str,
    password: str,
    iterations: Optional[int] = None,
    kdf: str = KDF_PBKDF2
) -> EncryptedSecretPayload:
    """
    Encrypt a secret (e.g. a recovery phrase) with a password.

    Salt and IV are drawn fresh on every call.
    """
    if not plaintext:
        raise ValidationError("Secret must not be empty")
    if not password:
        raise ValidationError("Password must not be empty")

    iterations = iterations or default_iterations(kdf)
    salt = secrets.token_bytes(SALT_SIZE)
    iv = secrets.token_bytes(AES_IV_SIZE)
    key = derive_key(password, salt, iterations, PURPOSE_ENCRYPTION, kdf)

    aesgcm = AESGCM(key)
    cipher_text = aesgcm.encrypt(iv, plaintext.encode('utf-8'), None)

    return EncryptedSecretPayload(
        version=VAULT_VERSION,
        algorithm=ALGORITHM_AES_GCM,
        kdf=kdf,
        iterations=iterations,
        salt=salt,
        iv=iv,
        cipher_text=cipher_text,
        created_at=utc_now_iso(),
    )


def decrypt_secret(payload: EncryptedSecretPayload, password: str) -> str:
    """
    Decrypt a secret with a password.

    Raises:
        AuthenticationFailure: wrong password or tampered ciphertext
        ValidationError: unsupported or malformed record
    """
    payload.validate()
    key = derive_key(password or "", payload.salt, payload.iterations, PURPOSE_ENCRYPTION, payload.kdf)

    aesgcm = AESGCM(key)
    try:
        plaintext = aesgcm.decrypt(payload.iv, payload.cipher_text, None)
        return plaintext.decode('utf-8')
    except (InvalidTag, UnicodeDecodeError) as e:
        raise AuthenticationFailure() from e


# ============================================
# Password Verifier
# ============================================

def create_password_verifier(
    password: str,
    iterations: Optional[int] = None,
    kdf: str = KDF_PBKDF2
) -> PasswordVerifierRecord:
    """Create a verifier record for a password with its own fresh salt."""
    if not password:
        raise ValidationError("Password must not be empty")

    iterations = iterations or default_iterations(kdf)
    salt = secrets.token_bytes(SALT_SIZE)
    digest = derive_key(password, salt, iterations, PURPOSE_VERIFICATION, kdf)

    return PasswordVerifierRecord(
        version=VAULT_VERSION,
        kdf=kdf,
        iterations=iterations,
        salt=salt,
        hash=digest,
    )


def check_password(password: str, record: PasswordVerifierRecord) -> bool:
    """
    Check a password against a verifier record.

    Uses only the verifier; the encrypted secret is never read.
    """
    if not password:
        return False
    digest = derive_key(password, record.salt, record.iterations, PURPOSE_VERIFICATION, record.kdf)
    return hmac.compare_digest(digest, record.hash)
