"""
Chain package - Wallet balance and activity sources.

Contains:
- ChainProvider: Capability shared by all sources
- SimulatorProvider: Deterministic offline data
- DaemonProvider: Remote daemon JSON-RPC client
- resolve_provider: One-time provider binding from settings
"""

from .base import ChainProvider, clamp_limit, DEFAULT_TX_LIMIT, MAX_TX_LIMIT
from .hashing import pseudo_hash
from .simulator import SimulatorProvider, CONFIRMATION_THRESHOLD
from .daemon import DaemonProvider
from .resolver import resolve_provider

__all__ = [
    "ChainProvider",
    "clamp_limit",
    "DEFAULT_TX_LIMIT",
    "MAX_TX_LIMIT",
    "pseudo_hash",
    "SimulatorProvider",
    "CONFIRMATION_THRESHOLD",
    "DaemonProvider",
    "resolve_provider",
]
