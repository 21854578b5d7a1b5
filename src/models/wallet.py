"""
Wallet models.

WalletRecord is the identity the provider layer operates on. WalletBalance
and WalletTx are derived on every query and never stored.

Atomic amounts are plain ints internally and decimal-integer strings on the
wire (1_000_000_000_000 atomic units = 1 XMR).
"""

import uuid
from dataclasses import dataclass, field
from typing import Optional

from utils import utc_now_iso


# Registration modes
MODE_VIEW_KEY = "view-key"
MODE_LOCAL = "mnemonic-local"

# Transaction directions and statuses
DIRECTION_IN = "in"
DIRECTION_OUT = "out"
STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"


def format_atomic(amount: int) -> str:
    """Render atomic units as a non-negative decimal-integer string."""
    return str(max(0, int(amount)))


@dataclass(frozen=True)
class WalletRecord:
    """A registered watch-only wallet. Immutable once created."""
    id: str
    address: str
    restore_height: int
    created_at: str                   # ISO format, set once at registration
    view_key: Optional[str] = field(default=None, repr=False)  # never serialized outward
    label: Optional[str] = None       # Local-mode label
    mode: str = MODE_VIEW_KEY

    @classmethod
    def create(
        cls,
        address: str,
        view_key: Optional[str] = None,
        restore_height: int = 0,
        label: Optional[str] = None,
        mode: str = MODE_VIEW_KEY,
        wallet_id: Optional[str] = None
    ) -> "WalletRecord":
        """Create a new wallet record with a fresh identifier."""
        return cls(
            id=wallet_id or str(uuid.uuid4()),
            address=address,
            restore_height=restore_height,
            created_at=utc_now_iso(),
            view_key=view_key,
            label=label,
            mode=mode,
        )

    def to_public_dict(self) -> dict:
        """Outward-facing view. Never includes the view key."""
        return {
            "id": self.id,
            "address": self.address,
            "restoreHeight": self.restore_height,
            "createdAt": self.created_at,
        }


@dataclass
class WalletBalance:
    """Balance snapshot for one wallet, recomputed per query."""
    network: str
    balance_atomic: int               # Total, including pending
    unlocked_atomic: int              # Spendable subset
    synced_height: int
    last_updated_at: str

    def to_dict(self) -> dict:
        return {
            "network": self.network,
            "balanceAtomic": format_atomic(self.balance_atomic),
            "unlockedAtomic": format_atomic(self.unlocked_atomic),
            "syncedHeight": self.synced_height,
            "lastUpdatedAt": self.last_updated_at,
        }


@dataclass
class WalletTx:
    """One incoming or outgoing transfer as seen by a watch-only wallet."""
    txid: str
    direction: str                    # in | out
    amount_atomic: int
    fee_atomic: int                   # Zero for incoming
    height: int
    confirmations: int
    timestamp: str                    # ISO format
    status: str                       # pending | confirmed

    def to_dict(self) -> dict:
        return {
            "txid": self.txid,
            "direction": self.direction,
            "amountAtomic": format_atomic(self.amount_atomic),
            "feeAtomic": format_atomic(self.fee_atomic),
            "height": self.height,
            "confirmations": self.confirmations,
            "timestamp": self.timestamp,
            "status": self.status,
        }
