"""
Error taxonomy shared by the registry, chain providers, vault and API.

Each error carries a machine-readable code; the API server maps codes to
HTTP statuses.
"""

from typing import Optional


class CypherError(Exception):
    """Base class for all expected Cypher failures."""

    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CypherError):
    """Malformed or out-of-range input, rejected before any state is touched."""

    code = "invalid_payload"

    def __init__(
        self,
        message: str = "Invalid payload",
        field_errors: Optional[dict[str, list[str]]] = None,
        form_errors: Optional[list[str]] = None
    ):
        super().__init__(message)
        self.field_errors = field_errors or {}
        self.form_errors = form_errors or []

    def details(self) -> dict:
        """Flattened error details: {"formErrors": [...], "fieldErrors": {...}}"""
        return {
            "formErrors": list(self.form_errors),
            "fieldErrors": {k: list(v) for k, v in self.field_errors.items()},
        }


class WalletNotFound(CypherError):
    """No wallet is registered under the given identifier."""

    code = "wallet_not_found"

    def __init__(self, wallet_id: str):
        super().__init__(f"Wallet not found: {wallet_id}")
        self.wallet_id = wallet_id


class ProviderError(CypherError):
    """
    A chain provider call failed.

    Covers transport failures, RPC error envelopes and missing results.
    The variants are distinguished by message text only.
    """

    code = "provider_error"

    def __init__(self, provider: str, message: str):
        super().__init__(message)
        self.provider = provider


class AuthenticationFailure(CypherError):
    """
    Wrong password, failed verifier check or failed integrity tag.

    Always carries the same message so callers cannot tell which check failed.
    """

    code = "authentication_failed"

    def __init__(self):
        super().__init__("Incorrect password")


class VaultEmpty(CypherError):
    """No vault records have been written yet."""

    code = "vault_empty"

    def __init__(self):
        super().__init__("No secret is stored in the vault")
