"""
Simulator Provider - believable, deterministic chain data with no network.

Values are seeded from the wallet identity so repeated queries look
consistent, but nothing is persisted. Amounts are in atomic units
(1 XMR = 10^12).
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from models import (
    WalletRecord,
    WalletBalance,
    WalletTx,
    DIRECTION_IN,
    DIRECTION_OUT,
    STATUS_PENDING,
    STATUS_CONFIRMED,
)
from utils import format_iso
from .base import DEFAULT_TX_LIMIT, clamp_limit
from .hashing import pseudo_hash


# ============================================
# Simulation Constants
# ============================================

BASE_HEIGHT = 2_850_000
HEIGHT_JITTER = 10_000            # Balance synced-height spread
TX_HEIGHT_JITTER = 5_000          # History base-height spread
TIP_OFFSET = 120                  # Blocks between history base and chain tip

UNLOCKED_BASE = 1_500_000_000_000     # ~1.5 XMR
UNLOCKED_RANGE = 900_000_000_000      # up to ~2.4 XMR
PENDING_AMOUNT = 80_000_000_000       # ~0.08 XMR, only for even seeds

IN_AMOUNT_BASE = 50_000_000_000
IN_AMOUNT_RANGE = 250_000_000_000
OUT_AMOUNT_BASE = 20_000_000_000
OUT_AMOUNT_RANGE = 120_000_000_000
OUT_FEE_BASE = 1_500_000
OUT_FEE_RANGE = 900_000

MAX_BLOCK_STEP = 7                # Height gap between entries: 1..7
MIN_HOURS_STEP = 4                # Time gap between entries: 4..11 hours
HOURS_STEP_RANGE = 8

CONFIRMATION_THRESHOLD = 10


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SimulatorProvider:
    """Deterministic offline provider."""

    name = "mock"

    def __init__(self, network: str = "stagenet", clock: Optional[Callable[[], datetime]] = None):
        """
        Args:
            network: Network label reported in balances
            clock: Returns the current aware datetime (injectable for tests)
        """
        self.network = network
        self._clock = clock or _utc_now

    def synced_height(self, wallet: WalletRecord) -> int:
        """Synced height for a wallet; never below its restore height."""
        seed = self._balance_seed(wallet)
        return max(wallet.restore_height, BASE_HEIGHT + seed % HEIGHT_JITTER)

    @staticmethod
    def _balance_seed(wallet: WalletRecord) -> int:
        return pseudo_hash(wallet.id + wallet.address + wallet.created_at)

    def get_balance(self, wallet: WalletRecord) -> WalletBalance:
        seed = self._balance_seed(wallet)

        unlocked = UNLOCKED_BASE + seed % UNLOCKED_RANGE
        pending = PENDING_AMOUNT if seed % 2 == 0 else 0

        return WalletBalance(
            network=self.network,
            balance_atomic=unlocked + pending,
            unlocked_atomic=unlocked,
            synced_height=self.synced_height(wallet),
            last_updated_at=format_iso(self._clock()),
        )

    def tip_height(self, wallet: WalletRecord) -> int:
        """Simulated chain tip used for confirmation counts."""
        seed = pseudo_hash(wallet.id + wallet.address + "txs")
        base_height = max(wallet.restore_height, BASE_HEIGHT + seed % TX_HEIGHT_JITTER)
        return base_height + TIP_OFFSET

    def get_transactions(self, wallet: WalletRecord, limit: int = DEFAULT_TX_LIMIT) -> list[WalletTx]:
        """
        Most recent first. Each entry is re-seeded from (id, index, seed) so an
        entry at a given index is stable across calls and limits.
        """
        seed = pseudo_hash(wallet.id + wallet.address + "txs")
        tip = self.tip_height(wallet)
        now = self._clock()

        txs: list[WalletTx] = []
        height = tip
        hours_back = 0

        for i in range(clamp_limit(limit)):
            tx_seed = pseudo_hash(f"{wallet.id}:{i}:{seed}")
            direction = DIRECTION_OUT if i % 3 == 0 else DIRECTION_IN

            # Heights and times step back cumulatively so ordering is strict
            if i > 0:
                height -= 1 + tx_seed % MAX_BLOCK_STEP
            hours_back += MIN_HOURS_STEP + tx_seed % HOURS_STEP_RANGE

            confirmations = max(0, tip - height)
            status = STATUS_PENDING if confirmations < CONFIRMATION_THRESHOLD else STATUS_CONFIRMED

            if direction == DIRECTION_IN:
                amount = IN_AMOUNT_BASE + tx_seed % IN_AMOUNT_RANGE
                fee = 0
            else:
                amount = OUT_AMOUNT_BASE + tx_seed % OUT_AMOUNT_RANGE
                fee = OUT_FEE_BASE + tx_seed % OUT_FEE_RANGE

            txs.append(WalletTx(
                txid=f"mock_{wallet.id[:6]}_{i}_{tx_seed:x}",
                direction=direction,
                amount_atomic=amount,
                fee_atomic=fee,
                height=height,
                confirmations=confirmations,
                timestamp=format_iso(now - timedelta(hours=hours_back)),
                status=status,
            ))

        return txs
