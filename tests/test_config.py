"""
Tests for environment settings and provider resolution.
"""

import pytest

from chain import DaemonProvider, SimulatorProvider, resolve_provider
from config import Settings, load_settings, resolve_provider_mode, DEFAULT_DAEMON_URL, DEFAULT_PORT


def test_defaults_with_empty_environment():
    settings = load_settings(use_dotenv=False)
    assert settings.provider_mode == "mock"
    assert settings.daemon_url == DEFAULT_DAEMON_URL
    assert settings.port == DEFAULT_PORT
    assert settings.allow_lan is False
    assert settings.bind_address == "127.0.0.1"
    assert settings.kdf_iterations == 120_000
    assert settings.network == "stagenet"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CHAIN_PROVIDER", "REAL")
    monkeypatch.setenv("MONERO_DAEMON_URL", "http://node.example:18081/")
    monkeypatch.setenv("DAEMON_RPC_TIMEOUT", "2.5")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("CYPHER_ALLOW_LAN", "true")
    monkeypatch.setenv("CYPHER_NETWORK", "mainnet")

    settings = load_settings(use_dotenv=False)

    assert settings.provider_mode == "real"
    assert settings.daemon_url == "http://node.example:18081"
    assert settings.daemon_timeout == 2.5
    assert settings.port == 9000
    assert settings.bind_address == "0.0.0.0"
    assert settings.network == "mainnet"


@pytest.mark.parametrize("name,value", [
    ("PORT", "not-a-port"),
    ("CYPHER_RATE_LIMIT", "0"),
    ("DAEMON_RPC_TIMEOUT", "-1"),
    ("CYPHER_NETWORK", "testnet-ish"),
])
def test_invalid_values_fall_back_to_defaults(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    assert load_settings(use_dotenv=False) == Settings()


@pytest.mark.parametrize("raw,expected", [
    (None, "mock"),
    ("", "mock"),
    ("mock", "mock"),
    ("real", "real"),
    (" Real ", "real"),
    ("remote", "mock"),
])
def test_resolve_provider_mode(raw, expected):
    assert resolve_provider_mode(raw) == expected


def test_resolver_defaults_to_simulator():
    provider = resolve_provider(Settings())
    assert isinstance(provider, SimulatorProvider)
    assert provider.name == "mock"


def test_resolver_builds_daemon_provider():
    settings = Settings(provider_mode="real", daemon_url="http://node.example:38081", daemon_timeout=4.0)
    provider = resolve_provider(settings)

    assert isinstance(provider, DaemonProvider)
    assert provider.name == "real-daemon-v0"
    assert provider.rpc_url == "http://node.example:38081/json_rpc"
    assert provider.timeout == 4.0


def test_resolver_falls_back_for_unknown_mode():
    assert isinstance(resolve_provider(Settings(provider_mode="chaos")), SimulatorProvider)
