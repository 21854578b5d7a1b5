"""
Wallet Registry - in-memory mapping of wallet IDs to wallet records.

Records live for the process lifetime only. Registration is atomic with
respect to identifier assignment.
"""

import logging
import threading
import uuid
from typing import Optional

from .wallet import WalletRecord, MODE_VIEW_KEY, MODE_LOCAL

logger = logging.getLogger(__name__)


class WalletRegistry:
    """Thread-safe registry of watch-only wallets."""

    def __init__(self):
        self._wallets: dict[str, WalletRecord] = {}
        self._lock = threading.Lock()

    def _generate_id(self) -> str:
        """Generate an identifier not yet in use. Caller holds the lock."""
        while True:
            wallet_id = str(uuid.uuid4())
            if wallet_id not in self._wallets:
                return wallet_id

    def register(
        self,
        address: str,
        view_key: Optional[str] = None,
        restore_height: int = 0
    ) -> WalletRecord:
        """Register a wallet imported by address and (optional) view key."""
        with self._lock:
            record = WalletRecord.create(
                address=address,
                view_key=view_key,
                restore_height=restore_height,
                mode=MODE_VIEW_KEY,
                wallet_id=self._generate_id(),
            )
            self._wallets[record.id] = record
        logger.info(f"Registered watch-only wallet {record.id}")
        return record

    def register_local(self, label: str, restore_height: int = 0) -> WalletRecord:
        """
        Register a wallet whose recovery phrase stays on the client.

        The address is a placeholder until local address derivation exists.
        """
        with self._lock:
            wallet_id = self._generate_id()
            record = WalletRecord.create(
                address=f"pending-address:{label}:{wallet_id}",
                restore_height=restore_height,
                label=label,
                mode=MODE_LOCAL,
                wallet_id=wallet_id,
            )
            self._wallets[record.id] = record
        logger.info(f"Registered local wallet {record.id}")
        return record

    def lookup(self, wallet_id: str) -> Optional[WalletRecord]:
        """Get a wallet record by ID, or None if unknown."""
        return self._wallets.get(wallet_id)

    def __len__(self) -> int:
        return len(self._wallets)

    def __contains__(self, wallet_id: str) -> bool:
        return wallet_id in self._wallets
