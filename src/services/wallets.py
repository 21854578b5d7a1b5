"""
Wallet Service - Boundary operations for watch-only wallets.

Validates input before the registry is touched, looks wallets up, and
forwards balance/history queries to the process's chain provider.
"""

import logging
import math
from typing import Any, Optional

from chain import ChainProvider, clamp_limit, DEFAULT_TX_LIMIT
from models import (
    WalletRecord,
    WalletBalance,
    WalletTx,
    WalletRegistry,
    ValidationError,
    WalletNotFound,
    ProviderError,
)

logger = logging.getLogger(__name__)

MIN_ADDRESS_LENGTH = 20
MIN_VIEW_KEY_LENGTH = 20
MAX_LABEL_LENGTH = 100


def _validate_restore_height(value: Any, errors: dict[str, list[str]]) -> int:
    if value is None:
        return 0
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        errors.setdefault("restoreHeight", []).append("restore height must be an integer")
        return 0
    if value < 0:
        errors.setdefault("restoreHeight", []).append("restore height must be non-negative")
        return 0
    return value


def parse_limit(raw: Optional[str], default: int = DEFAULT_TX_LIMIT) -> int:
    """Parse a ?limit= query value. Non-numeric input falls back to the default."""
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        value = float(raw)
    except ValueError:
        return default
    if not math.isfinite(value):
        return default
    return int(value)


class WalletService:
    """Registration, lookup and chain queries for watch-only wallets."""

    def __init__(self, registry: WalletRegistry, provider: ChainProvider):
        self.registry = registry
        self.provider = provider

    @property
    def provider_name(self) -> str:
        return self.provider.name

    def register_wallet(
        self,
        address: Any,
        view_key: Any = None,
        restore_height: Any = None
    ) -> WalletRecord:
        """
        Import a watch-only wallet by address and optional view key.

        Raises: ValidationError (nothing is registered)
        """
        errors: dict[str, list[str]] = {}

        if not isinstance(address, str):
            errors["address"] = ["address is required"]
        elif len(address) < MIN_ADDRESS_LENGTH:
            errors["address"] = ["address looks too short"]

        if view_key is not None:
            if not isinstance(view_key, str):
                errors["viewKey"] = ["view key must be a string"]
            elif len(view_key) < MIN_VIEW_KEY_LENGTH:
                errors["viewKey"] = ["view key looks too short"]

        height = _validate_restore_height(restore_height, errors)

        if errors:
            raise ValidationError(field_errors=errors)

        return self.registry.register(address, view_key, height)

    def register_local_wallet(self, label: Any, restore_height: Any = None) -> WalletRecord:
        """
        Register a wallet whose recovery phrase stays on the client.

        Raises: ValidationError (nothing is registered)
        """
        errors: dict[str, list[str]] = {}

        if not isinstance(label, str):
            errors["walletLabel"] = ["wallet label is required"]
        elif not 1 <= len(label) <= MAX_LABEL_LENGTH:
            errors["walletLabel"] = [f"wallet label must be 1-{MAX_LABEL_LENGTH} characters"]

        height = _validate_restore_height(restore_height, errors)

        if errors:
            raise ValidationError(field_errors=errors)

        return self.registry.register_local(label, height)

    def get_wallet(self, wallet_id: str) -> WalletRecord:
        """Raises: WalletNotFound"""
        wallet = self.registry.lookup(wallet_id)
        if wallet is None:
            raise WalletNotFound(wallet_id)
        return wallet

    def get_balance(self, wallet_id: str) -> WalletBalance:
        """
        Raises:
            WalletNotFound: unknown wallet ID
            ProviderError: the provider call failed
        """
        wallet = self.get_wallet(wallet_id)
        return self._call_provider(self.provider.get_balance, wallet)

    def get_transactions(self, wallet_id: str, limit: int = DEFAULT_TX_LIMIT) -> list[WalletTx]:
        """
        Most recent first; limit is clamped into [1, 50].

        Raises:
            WalletNotFound: unknown wallet ID
            ProviderError: the provider call failed
        """
        wallet = self.get_wallet(wallet_id)
        return self._call_provider(self.provider.get_transactions, wallet, clamp_limit(limit))

    def _call_provider(self, method, *args):
        """Run a provider call, reporting unexpected failures as ProviderError."""
        try:
            return method(*args)
        except ProviderError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected error from provider {self.provider_name}")
            raise ProviderError(self.provider_name, str(e) or "Unknown provider error") from e
