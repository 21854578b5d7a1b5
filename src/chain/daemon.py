"""
Remote Node Provider - JSON-RPC client for a Monero daemon.

The daemon alone cannot compute a wallet's balance from an address and view
key, so this provider currently proves connectivity and reports the remote
chain height. Balances are zero and history is empty until a wallet-scanning
layer is integrated; callers must not treat its balances as accurate.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import requests

from config import DEFAULT_DAEMON_URL, DEFAULT_DAEMON_TIMEOUT
from models import WalletRecord, WalletBalance, WalletTx, ProviderError
from utils import format_iso
from .base import DEFAULT_TX_LIMIT

logger = logging.getLogger(__name__)


class DaemonProvider:
    """Provider backed by a remote daemon's /json_rpc endpoint."""

    name = "real-daemon-v0"

    def __init__(
        self,
        daemon_url: str = DEFAULT_DAEMON_URL,
        timeout: float = DEFAULT_DAEMON_TIMEOUT,
        network: str = "stagenet"
    ):
        """
        Args:
            daemon_url: Daemon base URL, e.g. http://127.0.0.1:38081
            timeout: Seconds before a single RPC call is abandoned
            network: Network label reported in balances
        """
        self.daemon_url = daemon_url.rstrip("/")
        self.timeout = timeout
        self.network = network

    @property
    def rpc_url(self) -> str:
        return f"{self.daemon_url}/json_rpc"

    def _fail(self, message: str) -> ProviderError:
        logger.warning(f"Daemon RPC failed ({self.name}): {message}")
        return ProviderError(self.name, message)

    def rpc(self, method: str, params: Optional[dict[str, Any]] = None) -> Any:
        """
        Call a daemon JSON-RPC method and return its result.

        Each call is an independent, time-bounded request (no shared session).

        Raises:
            ProviderError: transport failure, non-2xx status, RPC error
                envelope, unparseable body or missing result
        """
        payload = {
            "jsonrpc": "2.0",
            "id": "0",
            "method": method,
            "params": params or {},
        }

        try:
            response = requests.post(self.rpc_url, json=payload, timeout=self.timeout)
        except requests.Timeout as e:
            raise self._fail(f"Daemon RPC timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise self._fail(f"Daemon RPC unreachable: {e}") from e

        if not 200 <= response.status_code < 300:
            raise self._fail(f"Daemon RPC HTTP {response.status_code}")

        try:
            envelope = response.json()
        except ValueError as e:
            raise self._fail("Daemon RPC returned invalid JSON") from e

        if not isinstance(envelope, dict):
            raise self._fail("Daemon RPC returned no result")

        error = envelope.get("error")
        if error is not None:
            message = error.get("message") if isinstance(error, dict) else None
            raise self._fail(message or "Daemon RPC error")

        result = envelope.get("result")
        if result is None:
            raise self._fail("Daemon RPC returned no result")

        return result

    def get_height(self) -> int:
        """Current daemon chain height (via get_info)."""
        info = self.rpc("get_info")
        height = info.get("height") if isinstance(info, dict) else None
        try:
            return int(height or 0)
        except (TypeError, ValueError):
            return 0

    def get_balance(self, wallet: WalletRecord) -> WalletBalance:
        synced_height = self.get_height()
        return WalletBalance(
            network=self.network,
            balance_atomic=0,
            unlocked_atomic=0,
            synced_height=synced_height,
            last_updated_at=format_iso(datetime.now(timezone.utc)),
        )

    def get_transactions(self, wallet: WalletRecord, limit: int = DEFAULT_TX_LIMIT) -> list[WalletTx]:
        # TODO: return scanned transfers once a wallet-scanning backend (wallet-rpc or light-wallet server) is wired in
        self.get_height()
        return []
