"""
Models package - Data models for Cypher.

Contains:
- WalletRecord: Registered watch-only wallet identity
- WalletBalance, WalletTx: Derived balance and activity views
- WalletRegistry: In-memory wallet ID -> record mapping
- Error taxonomy shared across packages
"""

from .wallet import (
    WalletRecord,
    WalletBalance,
    WalletTx,
    format_atomic,
    MODE_VIEW_KEY,
    MODE_LOCAL,
    DIRECTION_IN,
    DIRECTION_OUT,
    STATUS_PENDING,
    STATUS_CONFIRMED,
)
from .registry import WalletRegistry
from .errors import (
    CypherError,
    ValidationError,
    WalletNotFound,
    ProviderError,
    AuthenticationFailure,
    VaultEmpty,
)

__all__ = [
    "WalletRecord",
    "WalletBalance",
    "WalletTx",
    "format_atomic",
    "MODE_VIEW_KEY",
    "MODE_LOCAL",
    "DIRECTION_IN",
    "DIRECTION_OUT",
    "STATUS_PENDING",
    "STATUS_CONFIRMED",
    "WalletRegistry",
    "CypherError",
    "ValidationError",
    "WalletNotFound",
    "ProviderError",
    "AuthenticationFailure",
    "VaultEmpty",
]
