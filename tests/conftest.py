"""
Pytest fixtures for Cypher tests.

Every test gets its own data directory and a clean provider environment.
"""

from datetime import datetime, timezone

import pytest

from chain import SimulatorProvider
from models import WalletRecord, WalletRegistry
from services import ApiServer, WalletService

FIXED_NOW = datetime(2026, 2, 8, 14, 32, 15, tzinfo=timezone.utc)

ENV_VARS = (
    "CHAIN_PROVIDER", "MONERO_DAEMON_URL", "DAEMON_RPC_TIMEOUT", "CYPHER_NETWORK",
    "PORT", "CYPHER_ALLOW_LAN", "CYPHER_RATE_LIMIT", "CYPHER_KDF_ITERATIONS",
    "CYPHER_LOG_LEVEL", "CYPHER_LOG_RETENTION_DAYS",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point the data dir at tmp_path and clear provider/server settings."""
    monkeypatch.setenv("CYPHER_DATA_DIR", str(tmp_path / "data"))
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def wallet():
    """A view-key wallet with a fixed identity."""
    return WalletRecord(
        id="3f2c9a1e-8b4d-4c6e-9f0a-1b2c3d4e5f60",
        address="a" * 20,
        restore_height=100,
        created_at="2026-01-01T00:00:00.000Z",
        view_key="b" * 20,
    )


@pytest.fixture
def simulator():
    return SimulatorProvider(network="stagenet", clock=lambda: FIXED_NOW)


@pytest.fixture
def registry():
    return WalletRegistry()


@pytest.fixture
def service(registry, simulator):
    return WalletService(registry, simulator)


@pytest.fixture
def live_server(service):
    """Threaded API server on a free localhost port. Yields its base URL."""
    server = ApiServer(service)
    server.start(port=0)
    try:
        yield f"http://127.0.0.1:{server.port}"
    finally:
        server.stop()
