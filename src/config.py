"""
Settings - environment configuration for the Cypher API.

- CHAIN_PROVIDER: mock | real (default: mock, unknown values fall back to mock)
- MONERO_DAEMON_URL: remote daemon base URL for the real provider
- DAEMON_RPC_TIMEOUT: seconds before a daemon call is abandoned
- CYPHER_NETWORK: stagenet | mainnet
- PORT / CYPHER_ALLOW_LAN / CYPHER_RATE_LIMIT: API server binding
- CYPHER_KDF_ITERATIONS: PBKDF2 cost for new vault records
- CYPHER_LOG_LEVEL / CYPHER_LOG_RETENTION_DAYS: logging
- Loads .env from the working directory or project root when available.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_ROOT = Path(__file__).resolve().parent.parent

PROVIDER_MOCK = "mock"
PROVIDER_REAL = "real"
PROVIDER_MODES = (PROVIDER_MOCK, PROVIDER_REAL)

NETWORKS = ("stagenet", "mainnet")

DEFAULT_DAEMON_URL = "http://127.0.0.1:38081"
DEFAULT_DAEMON_TIMEOUT = 10.0
DEFAULT_PORT = 8787
DEFAULT_RATE_LIMIT = 300
DEFAULT_KDF_ITERATIONS = 120_000

_TRUTHY = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, resolved once at startup."""
    provider_mode: str = PROVIDER_MOCK
    daemon_url: str = DEFAULT_DAEMON_URL
    daemon_timeout: float = DEFAULT_DAEMON_TIMEOUT
    network: str = "stagenet"
    port: int = DEFAULT_PORT
    allow_lan: bool = False
    rate_limit: int = DEFAULT_RATE_LIMIT
    kdf_iterations: int = DEFAULT_KDF_ITERATIONS
    log_level: str = "INFO"
    log_retention_days: int = 0

    @property
    def bind_address(self) -> str:
        return "0.0.0.0" if self.allow_lan else "127.0.0.1"


def load_env() -> None:
    """Load .env files without overriding real environment variables. Safe to call repeatedly."""
    load_dotenv(Path.cwd() / ".env", override=False)
    load_dotenv(_ROOT / ".env", override=False)


def _env(name: str) -> str:
    return (os.getenv(name) or "").strip()


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = _env(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default
    if value < minimum:
        logger.warning(f"Ignoring out-of-range {name}={value}, using {default}")
        return default
    return value


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default
    return value if value > 0 else default


def resolve_provider_mode(raw: Optional[str]) -> str:
    """
    Normalize a CHAIN_PROVIDER value.

    Unknown values fall back to the simulator rather than failing startup.
    """
    mode = (raw or PROVIDER_MOCK).strip().lower()
    if mode in PROVIDER_MODES:
        return mode
    logger.warning(f"Unknown CHAIN_PROVIDER {raw!r}, falling back to {PROVIDER_MOCK}")
    return PROVIDER_MOCK


def load_settings(use_dotenv: bool = True) -> Settings:
    """Build Settings from the environment (and .env when use_dotenv is set)."""
    if use_dotenv:
        load_env()

    network = _env("CYPHER_NETWORK").lower() or "stagenet"
    if network not in NETWORKS:
        logger.warning(f"Unknown CYPHER_NETWORK {network!r}, using stagenet")
        network = "stagenet"

    return Settings(
        provider_mode=resolve_provider_mode(os.getenv("CHAIN_PROVIDER")),
        daemon_url=(_env("MONERO_DAEMON_URL") or DEFAULT_DAEMON_URL).rstrip("/"),
        daemon_timeout=_env_float("DAEMON_RPC_TIMEOUT", DEFAULT_DAEMON_TIMEOUT),
        network=network,
        port=_env_int("PORT", DEFAULT_PORT),
        allow_lan=_env("CYPHER_ALLOW_LAN").lower() in _TRUTHY,
        rate_limit=_env_int("CYPHER_RATE_LIMIT", DEFAULT_RATE_LIMIT, minimum=1),
        kdf_iterations=_env_int("CYPHER_KDF_ITERATIONS", DEFAULT_KDF_ITERATIONS, minimum=1),
        log_level=(_env("CYPHER_LOG_LEVEL") or "INFO").upper(),
        log_retention_days=_env_int("CYPHER_LOG_RETENTION_DAYS", 0),
    )
