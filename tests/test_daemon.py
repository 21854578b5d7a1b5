"""
Tests for the remote daemon JSON-RPC provider.

requests.post is mocked; no daemon is contacted.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from chain import DaemonProvider
from models import ProviderError


def _response(status_code=200, body=None, json_error=None):
    response = MagicMock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def provider():
    return DaemonProvider("http://node.example:38081/", timeout=3.5)


def test_rpc_request_shape(provider):
    with patch("chain.daemon.requests.post") as mock_post:
        mock_post.return_value = _response(body={"id": "0", "jsonrpc": "2.0", "result": {"height": 1}})
        provider.rpc("get_info")

    mock_post.assert_called_once()
    args, kwargs = mock_post.call_args
    assert args[0] == "http://node.example:38081/json_rpc"
    assert kwargs["json"] == {"jsonrpc": "2.0", "id": "0", "method": "get_info", "params": {}}
    assert kwargs["timeout"] == 3.5


def test_balance_reports_daemon_height(provider, wallet):
    with patch("chain.daemon.requests.post") as mock_post:
        mock_post.return_value = _response(body={"result": {"height": 3_100_000}})
        balance = provider.get_balance(wallet)

    assert balance.synced_height == 3_100_000
    assert balance.balance_atomic == 0
    assert balance.unlocked_atomic == 0
    assert balance.to_dict()["balanceAtomic"] == "0"


def test_balance_height_may_be_below_restore_height(provider, wallet):
    """The raw remote height is reported as-is."""
    with patch("chain.daemon.requests.post") as mock_post:
        mock_post.return_value = _response(body={"result": {"height": 50}})
        assert provider.get_balance(wallet).synced_height == 50


def test_transactions_empty_after_successful_probe(provider, wallet):
    with patch("chain.daemon.requests.post") as mock_post:
        mock_post.return_value = _response(body={"result": {"height": 3_100_000}})
        assert provider.get_transactions(wallet, 10) == []
    assert mock_post.called


def test_transactions_fail_when_daemon_unreachable(provider, wallet):
    with patch("chain.daemon.requests.post", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(ProviderError):
            provider.get_transactions(wallet, 10)


@pytest.mark.parametrize("response,message", [
    (_response(status_code=500), "Daemon RPC HTTP 500"),
    (_response(body={"error": {"code": -1, "message": "busy"}}), "busy"),
    (_response(body={"error": {"code": -1}}), "Daemon RPC error"),
    (_response(body={"error": {}, "result": {"height": 7}}), "Daemon RPC error"),
    (_response(body={"id": "0", "jsonrpc": "2.0"}), "Daemon RPC returned no result"),
    (_response(body={"result": None}), "Daemon RPC returned no result"),
    (_response(json_error=ValueError("bad json")), "Daemon RPC returned invalid JSON"),
])
def test_rpc_failures_become_provider_errors(provider, response, message):
    with patch("chain.daemon.requests.post", return_value=response):
        with pytest.raises(ProviderError) as exc_info:
            provider.rpc("get_info")

    assert exc_info.value.message == message
    assert exc_info.value.provider == "real-daemon-v0"


def test_timeout_is_reported(provider):
    with patch("chain.daemon.requests.post", side_effect=requests.Timeout()):
        with pytest.raises(ProviderError) as exc_info:
            provider.rpc("get_info")

    assert "timed out" in exc_info.value.message
    assert "3.5" in exc_info.value.message


def test_connection_error_is_reported(provider):
    with patch("chain.daemon.requests.post", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(ProviderError) as exc_info:
            provider.rpc("get_info")

    assert exc_info.value.message.startswith("Daemon RPC unreachable")
