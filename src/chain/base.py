"""
Chain Provider contract.

A provider answers "balance" and "transaction history" for one wallet.
Exactly one provider is bound per process (see chain.resolver).
"""

from typing import Protocol, runtime_checkable

from models import WalletRecord, WalletBalance, WalletTx

DEFAULT_TX_LIMIT = 10
MAX_TX_LIMIT = 50


def clamp_limit(limit: int) -> int:
    """Clamp a transaction limit into [1, MAX_TX_LIMIT]."""
    return min(max(int(limit), 1), MAX_TX_LIMIT)


@runtime_checkable
class ChainProvider(Protocol):
    """Capability shared by every chain data source."""

    name: str

    def get_balance(self, wallet: WalletRecord) -> WalletBalance:
        ...

    def get_transactions(self, wallet: WalletRecord, limit: int = DEFAULT_TX_LIMIT) -> list[WalletTx]:
        ...
