"""
Tests for the HTTP API, against a live server on a free localhost port.
"""

import pytest
import requests

from models import ProviderError, WalletRegistry
from services import ApiServer, WalletService

TIMEOUT = 5


def _import(base_url, **overrides):
    body = {"address": "a" * 20, "viewKey": "b" * 20, "restoreHeight": 100}
    body.update(overrides)
    return requests.post(f"{base_url}/wallets/import", json=body, timeout=TIMEOUT)


class DownProvider:
    name = "real-daemon-v0"

    def get_balance(self, wallet):
        raise ProviderError(self.name, "Daemon RPC unreachable: connection refused")

    def get_transactions(self, wallet, limit=10):
        raise ProviderError(self.name, "Daemon RPC unreachable: connection refused")


@pytest.fixture
def down_server():
    server = ApiServer(WalletService(WalletRegistry(), DownProvider()))
    server.start(port=0)
    try:
        yield f"http://127.0.0.1:{server.port}"
    finally:
        server.stop()


def test_health(live_server):
    response = requests.get(f"{live_server}/health", timeout=TIMEOUT)
    assert response.status_code == 200
    assert response.json() == {"ok": True, "service": "cypher-api", "provider": "mock"}
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_import_scenario(live_server):
    response = _import(live_server)
    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["watchOnly"] is True
    wallet_id = data["walletId"]

    wallet = requests.get(f"{live_server}/wallets/{wallet_id}", timeout=TIMEOUT)
    assert wallet.status_code == 200
    assert wallet.json()["wallet"] == {
        "id": wallet_id,
        "address": "a" * 20,
        "restoreHeight": 100,
        "createdAt": wallet.json()["wallet"]["createdAt"],
    }
    assert "b" * 20 not in wallet.text

    balance = requests.get(f"{live_server}/wallets/{wallet_id}/balance", timeout=TIMEOUT).json()
    assert balance["ok"] is True
    assert balance["walletId"] == wallet_id
    assert balance["source"] == "mock"
    assert balance["network"] == "stagenet"
    assert balance["syncedHeight"] >= 100
    assert isinstance(balance["balanceAtomic"], str)
    assert int(balance["unlockedAtomic"]) <= int(balance["balanceAtomic"])


def test_transactions_limit(live_server):
    wallet_id = _import(live_server).json()["walletId"]

    def txs(query=""):
        return requests.get(f"{live_server}/wallets/{wallet_id}/txs{query}", timeout=TIMEOUT).json()

    assert len(txs()["txs"]) == 10
    assert len(txs("?limit=3")["txs"]) == 3
    assert len(txs("?limit=0")["txs"]) == 1
    assert len(txs("?limit=500")["txs"]) == 50
    assert len(txs("?limit=abc")["txs"]) == 10

    body = txs("?limit=2")
    assert body["source"] == "mock"
    assert body["walletId"] == wallet_id
    assert body["txs"][0]["height"] > body["txs"][1]["height"]


def test_register_local(live_server):
    response = requests.post(
        f"{live_server}/wallets/register-local",
        json={"walletLabel": "savings", "restoreHeight": 5},
        timeout=TIMEOUT,
    )
    data = response.json()
    assert response.status_code == 200
    assert data["walletLabel"] == "savings"
    assert data["mode"] == "mnemonic-local"

    wallet = requests.get(f"{live_server}/wallets/{data['walletId']}", timeout=TIMEOUT).json()["wallet"]
    assert wallet["address"].startswith("pending-address:savings:")


@pytest.mark.parametrize("path", ["/wallets/missing", "/wallets/missing/balance", "/wallets/missing/txs"])
def test_unknown_wallet(live_server, path):
    response = requests.get(f"{live_server}{path}", timeout=TIMEOUT)
    assert response.status_code == 404
    assert response.json() == {"ok": False, "error": "wallet_not_found"}


def test_unknown_route(live_server):
    response = requests.get(f"{live_server}/nope", timeout=TIMEOUT)
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_invalid_payload(live_server):
    response = _import(live_server, address="short", restoreHeight=-1)
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "invalid_payload"
    assert "address" in data["details"]["fieldErrors"]
    assert "restoreHeight" in data["details"]["fieldErrors"]


@pytest.mark.parametrize("body", [b"{not json", b"[1, 2]", b"", b"\xff\xfe{"])
def test_body_must_be_json_object(live_server, body):
    response = requests.post(
        f"{live_server}/wallets/import",
        data=body,
        headers={"Content-Type": "application/json"},
        timeout=TIMEOUT,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_payload"


def test_method_not_allowed(live_server):
    get_import = requests.get(f"{live_server}/wallets/import", timeout=TIMEOUT)
    assert get_import.status_code == 405
    assert get_import.headers["Allow"] == "POST"

    post_health = requests.post(f"{live_server}/health", json={}, timeout=TIMEOUT)
    assert post_health.status_code == 405

    post_wallet = requests.post(f"{live_server}/wallets/some-id/balance", json={}, timeout=TIMEOUT)
    assert post_wallet.status_code == 405
    assert post_wallet.headers["Allow"] == "GET"


def test_cors_preflight(live_server):
    response = requests.options(f"{live_server}/wallets/import", timeout=TIMEOUT)
    assert response.status_code == 200
    assert "POST" in response.headers["Access-Control-Allow-Methods"]


def test_provider_failure_maps_to_502(down_server):
    wallet_id = _import(down_server).json()["walletId"]

    balance = requests.get(f"{down_server}/wallets/{wallet_id}/balance", timeout=TIMEOUT)
    assert balance.status_code == 502
    assert balance.json() == {
        "ok": False,
        "error": "provider_balance_error",
        "provider": "real-daemon-v0",
        "message": "Daemon RPC unreachable: connection refused",
    }

    txs = requests.get(f"{down_server}/wallets/{wallet_id}/txs", timeout=TIMEOUT)
    assert txs.status_code == 502
    assert txs.json()["error"] == "provider_txs_error"

    # Registration and health stay available while the provider is down
    health = requests.get(f"{down_server}/health", timeout=TIMEOUT).json()
    assert health["provider"] == "real-daemon-v0"


def test_rate_limit(service):
    server = ApiServer(service, requests_per_minute=2)
    server.start(port=0)
    try:
        url = f"http://127.0.0.1:{server.port}/health"
        assert requests.get(url, timeout=TIMEOUT).status_code == 200
        assert requests.get(url, timeout=TIMEOUT).status_code == 200
        limited = requests.get(url, timeout=TIMEOUT)
        assert limited.status_code == 429
        assert limited.headers["Retry-After"] == "60"
    finally:
        server.stop()
    assert server.is_running is False


@pytest.mark.parametrize("path", ["/wallets/import", "/wallets/register-local"])
def test_registration_routes_accept_post(live_server, path):
    """Registration paths also fit the wallet-id pattern and must still route to POST."""
    body = {"address": "a" * 20, "walletLabel": "savings"}
    response = requests.post(f"{live_server}{path}", json=body, timeout=TIMEOUT)
    assert response.status_code == 200
    assert response.json()["ok"] is True
