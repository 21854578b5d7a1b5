"""
Cypher API Server - HTTP front-end for the watch-only wallet read model.

Provides endpoints for:
- /health - Health check (reports the bound chain provider)
- /wallets/import - Register a wallet by address + view key
- /wallets/register-local - Register a wallet whose phrase stays local
- /wallets/{id} - Wallet identity (never includes the view key)
- /wallets/{id}/balance - Balance from the chain provider
- /wallets/{id}/txs?limit=N - Recent transactions, most recent first
"""

import json
import logging
import re
import threading
import time
from collections import defaultdict
from http.server import HTTPServer, BaseHTTPRequestHandler
from socketserver import ThreadingMixIn
from typing import Optional
from urllib.parse import urlparse, parse_qs, unquote

from config import DEFAULT_PORT, DEFAULT_RATE_LIMIT
from models import CypherError, ValidationError, ProviderError
from .wallets import WalletService, parse_limit

logger = logging.getLogger(__name__)

SERVICE_NAME = "cypher-api"


class RateLimiter:
    """
    Simple rate limiter to prevent abuse.

    Limits requests per IP per minute.
    """

    def __init__(self, requests_per_minute: int = DEFAULT_RATE_LIMIT):
        self.requests_per_minute = requests_per_minute
        self._request_times: dict[str, list[float]] = defaultdict(list)
        self._lock = threading.Lock()

    def is_rate_limited(self, client_ip: str) -> bool:
        """Check if client has exceeded rate limit."""
        now = time.time()
        window_start = now - 60

        with self._lock:
            # Clean old entries
            self._request_times[client_ip] = [
                t for t in self._request_times[client_ip]
                if t > window_start
            ]
            if len(self._request_times[client_ip]) >= self.requests_per_minute:
                return True
            self._request_times[client_ip].append(now)
            return False

    def reset(self):
        """Reset all rate limiting state."""
        with self._lock:
            self._request_times.clear()


# Map error codes to appropriate HTTP status codes
ERROR_CODE_TO_HTTP_STATUS = {
    # 400 Bad Request - client errors, malformed request
    "invalid_payload": 400,
    "invalid_json": 400,

    # 404 Not Found - resource doesn't exist
    "wallet_not_found": 404,
    "not_found": 404,

    "method_not_allowed": 405,
    "payload_too_large": 413,

    # 429 Too Many Requests
    "rate_limit_exceeded": 429,

    # 502 Bad Gateway - the chain provider failed
    "provider_balance_error": 502,
    "provider_txs_error": 502,
    "provider_error": 502,
}


def get_http_status_for_error(error_code: str) -> int:
    """Get the appropriate HTTP status code for an error code."""
    return ERROR_CODE_TO_HTTP_STATUS.get(error_code, 500)


# Maximum request body size (1MB - registration payloads are tiny)
MAX_CONTENT_LENGTH = 1 * 1024 * 1024

WALLET_PATH = re.compile(r'^/wallets/([^/]+)(/balance|/txs)?/?$')

GET_ENDPOINTS = frozenset(["/health"])
POST_ENDPOINTS = frozenset(["/wallets/import", "/wallets/register-local"])


class ApiRequestHandler(BaseHTTPRequestHandler):
    """HTTP request handler for wallet read-model requests."""

    server: "ThreadedHTTPServer"

    def log_message(self, format, *args):
        """Suppress default logging."""
        pass

    @property
    def wallet_service(self) -> WalletService:
        return self.server.wallet_service

    def _send_json_response(self, status: int, data: dict, headers: Optional[dict] = None):
        """Send a JSON response."""
        body = json.dumps(data).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Access-Control-Allow-Origin", "*")
        for name, value in (headers or {}).items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(body)

    def _send_error(self, code: str, headers: Optional[dict] = None, **extra):
        """Send {"ok": false, "error": code, ...} with the mapped status."""
        self._send_json_response(
            get_http_status_for_error(code),
            {"ok": False, "error": code, **extra},
            headers,
        )

    def _get_client_ip(self) -> str:
        """Get the client IP address."""
        return self.client_address[0]

    def _check_rate_limit(self) -> bool:
        """Check rate limit and send 429 if exceeded. Returns True if request should proceed."""
        if self.server.rate_limiter.is_rate_limited(self._get_client_ip()):
            self._send_error("rate_limit_exceeded", {"Retry-After": "60"}, retry_after=60)
            return False
        return True

    def _content_length(self) -> int:
        try:
            return max(0, int(self.headers.get("Content-Length", 0)))
        except ValueError:
            return 0

    def _discard_body(self):
        """Consume an unused request body so the connection closes cleanly."""
        content_length = self._content_length()
        if 0 < content_length <= MAX_CONTENT_LENGTH:
            self.rfile.read(content_length)

    def _read_json_body(self) -> Optional[dict]:
        """Read and parse the request body. Sends the error response and returns None on failure."""
        content_length = self._content_length()

        if content_length > MAX_CONTENT_LENGTH:
            self._send_error("payload_too_large", message=f"Payload too large (max {MAX_CONTENT_LENGTH} bytes)")
            return None

        raw = self.rfile.read(content_length) if content_length > 0 else b""

        try:
            data = json.loads(raw.decode()) if raw else None
        except (json.JSONDecodeError, UnicodeDecodeError):
            data = None

        if not isinstance(data, dict):
            self._send_error(
                "invalid_payload",
                details=ValidationError(form_errors=["Expected a JSON object"]).details()
            )
            return None
        return data

    # ============================================
    # Routes
    # ============================================

    def do_GET(self):
        """Handle GET requests."""
        if not self._check_rate_limit():
            return

        parsed = urlparse(self.path)
        path = parsed.path

        if path in POST_ENDPOINTS:
            self._send_error("method_not_allowed", {"Allow": "POST"}, allowed_methods=["POST"])
            return

        if path == "/health":
            self._send_json_response(200, {
                "ok": True,
                "service": SERVICE_NAME,
                "provider": self.wallet_service.provider_name,
            })
            return

        match = WALLET_PATH.match(path)
        if not match:
            self._send_error("not_found")
            return

        wallet_id = unquote(match.group(1))
        action = match.group(2)

        if action is None:
            self._handle_get_wallet(wallet_id)
        elif action == "/balance":
            self._handle_get_balance(wallet_id)
        else:
            query = parse_qs(parsed.query)
            limit = parse_limit(query.get("limit", [None])[0])
            self._handle_get_transactions(wallet_id, limit)

    def do_POST(self):
        """Handle POST requests - wallet registration."""
        path = urlparse(self.path).path

        if path not in POST_ENDPOINTS:
            self._discard_body()

        if not self._check_rate_limit():
            return

        if path not in POST_ENDPOINTS:
            # /wallets/import also fits WALLET_PATH, so registration routes are matched first
            if path in GET_ENDPOINTS or WALLET_PATH.match(path):
                self._send_error("method_not_allowed", {"Allow": "GET"}, allowed_methods=["GET"])
            else:
                self._send_error("not_found")
            return

        request_data = self._read_json_body()
        if request_data is None:
            return

        try:
            if path == "/wallets/import":
                record = self.wallet_service.register_wallet(
                    request_data.get("address"),
                    request_data.get("viewKey"),
                    request_data.get("restoreHeight"),
                )
                response = {"ok": True, "walletId": record.id, "watchOnly": True}
            else:
                record = self.wallet_service.register_local_wallet(
                    request_data.get("walletLabel"),
                    request_data.get("restoreHeight"),
                )
                response = {
                    "ok": True,
                    "walletId": record.id,
                    "walletLabel": record.label,
                    "mode": record.mode,
                }
        except ValidationError as e:
            self._send_error(e.code, details=e.details())
            return

        self._send_json_response(200, response)

    def do_OPTIONS(self):
        """Handle CORS preflight."""
        self.send_response(200)
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Access-Control-Allow-Methods", "GET, POST, OPTIONS")
        self.send_header("Access-Control-Allow-Headers", "Content-Type")
        self.send_header("Content-Length", "0")
        self.end_headers()

    def _handle_get_wallet(self, wallet_id: str):
        try:
            wallet = self.wallet_service.get_wallet(wallet_id)
        except CypherError as e:
            self._send_error(e.code)
            return
        self._send_json_response(200, {"ok": True, "wallet": wallet.to_public_dict()})

    def _handle_get_balance(self, wallet_id: str):
        try:
            balance = self.wallet_service.get_balance(wallet_id)
        except ProviderError as e:
            self._send_error("provider_balance_error", provider=e.provider, message=e.message)
            return
        except CypherError as e:
            self._send_error(e.code)
            return

        self._send_json_response(200, {
            "ok": True,
            "walletId": wallet_id,
            **balance.to_dict(),
            "source": self.wallet_service.provider_name,
        })

    def _handle_get_transactions(self, wallet_id: str, limit: int):
        try:
            txs = self.wallet_service.get_transactions(wallet_id, limit)
        except ProviderError as e:
            self._send_error("provider_txs_error", provider=e.provider, message=e.message)
            return
        except CypherError as e:
            self._send_error(e.code)
            return

        self._send_json_response(200, {
            "ok": True,
            "walletId": wallet_id,
            "txs": [tx.to_dict() for tx in txs],
            "source": self.wallet_service.provider_name,
        })


class ThreadedHTTPServer(ThreadingMixIn, HTTPServer):
    """HTTP server that handles each request in a separate thread.

    A stalled daemon call only ever holds its own request thread.
    """
    daemon_threads = True  # Don't block shutdown waiting for threads

    def __init__(self, server_address, wallet_service: WalletService, rate_limiter: RateLimiter):
        super().__init__(server_address, ApiRequestHandler)
        self.wallet_service = wallet_service
        self.rate_limiter = rate_limiter


class ApiServer:
    """Manages the HTTP server lifecycle."""

    def __init__(self, wallet_service: WalletService, requests_per_minute: int = DEFAULT_RATE_LIMIT):
        self.wallet_service = wallet_service
        self.rate_limiter = RateLimiter(requests_per_minute)
        self._server: Optional[ThreadedHTTPServer] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> Optional[int]:
        """Bound port (useful when started on port 0)."""
        return self._server.server_address[1] if self._server else None

    @property
    def is_running(self) -> bool:
        return self._server is not None

    def _bind(self, port: int, allow_lan: bool) -> ThreadedHTTPServer:
        bind_address = "0.0.0.0" if allow_lan else "127.0.0.1"
        self._server = ThreadedHTTPServer((bind_address, port), self.wallet_service, self.rate_limiter)
        self.rate_limiter.reset()
        logger.info(
            f"Cypher API listening on http://{bind_address}:{self.port} "
            f"(provider: {self.wallet_service.provider_name})"
        )
        return self._server

    def start(self, port: int = DEFAULT_PORT, allow_lan: bool = False) -> None:
        """
        Start serving in a background thread.

        Args:
            port: Port to listen on (0 picks a free port)
            allow_lan: If True, bind to 0.0.0.0 (all interfaces). If False, localhost only.

        Raises: OSError if the port cannot be bound
        """
        if self._server:
            return
        server = self._bind(port, allow_lan)
        self._thread = threading.Thread(target=server.serve_forever, daemon=True)
        self._thread.start()

    def serve_forever(self, port: int = DEFAULT_PORT, allow_lan: bool = False) -> None:
        """Serve on the calling thread until interrupted."""
        server = self._bind(port, allow_lan)
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logger.info("Shutting down")
        finally:
            server.server_close()
            self._server = None

    def stop(self):
        """Stop the HTTP server."""
        if self._server:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
            self._thread = None
            logger.info("Cypher API stopped")
