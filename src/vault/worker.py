"""
Vault Worker - runs expensive key derivations off the caller's thread.

Every call returns a concurrent.futures.Future; callers bound the wait with
future.result(timeout=...). Operations run independently on a small pool,
so one slow derivation never serializes the others.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

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

DEFAULT_MAX_WORKERS = 4


class VaultWorker:
    """Thread pool front-end for vault crypto."""

    def __init__(self, max_workers: int = DEFAULT_MAX_WORKERS, iterations: Optional[int] = None, kdf: str = KDF_PBKDF2):
        self.iterations = iterations
        self.kdf = kdf
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="vault")

    def encrypt(self, plaintext: str, password: str) -> "Future[EncryptedSecretPayload]":
        return self._executor.submit(encrypt_secret, plaintext, password, self.iterations, self.kdf)

    def decrypt(self, payload: EncryptedSecretPayload, password: str) -> "Future[str]":
        return self._executor.submit(decrypt_secret, payload, password)

    def create_verifier(self, password: str) -> "Future[PasswordVerifierRecord]":
        return self._executor.submit(create_password_verifier, password, self.iterations, self.kdf)

    def check(self, password: str, record: PasswordVerifierRecord) -> "Future[bool]":
        return self._executor.submit(check_password, password, record)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; optionally wait for running derivations."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "VaultWorker":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()
