"""
Cypher - Watch-only wallet read model and local credential vault.

Entry point for the application.

Usage:
    cypher serve                 # Run the API (provider from CHAIN_PROVIDER)
    cypher vault init            # Encrypt a recovery phrase under a password
    cypher vault check           # Check a password against the verifier only
    cypher vault unlock          # Decrypt and print the recovery phrase
    cypher vault passwd          # Change the vault password
    cypher vault reset --yes     # Delete vault records
    cypher popup                 # PyQt6 smoke-test popup for /health
"""

import argparse
import getpass
import logging
import sys

from chain import resolve_provider
from config import Settings, load_settings
from models import CypherError, WalletRegistry
from services import ApiServer, WalletService
from services.logging import configure_logging
from utils import get_vault_dir
from vault import VaultStore

logger = logging.getLogger(__name__)


def build_service(settings: Settings) -> WalletService:
    """Wire the registry and the one provider bound for this process."""
    return WalletService(WalletRegistry(), resolve_provider(settings))


def cmd_serve(settings: Settings, args: argparse.Namespace) -> int:
    server = ApiServer(build_service(settings), requests_per_minute=settings.rate_limit)
    port = args.port if args.port is not None else settings.port
    try:
        server.serve_forever(port=port, allow_lan=settings.allow_lan)
    except OSError as e:
        logger.error(f"Failed to start server: {e}")
        return 1
    return 0


def _prompt_new_password() -> str:
    password = getpass.getpass("New vault password: ")
    if password != getpass.getpass("Confirm password: "):
        raise CypherError("Passwords do not match")
    return password


def cmd_vault(settings: Settings, args: argparse.Namespace) -> int:
    store = VaultStore(get_vault_dir(), iterations=settings.kdf_iterations)

    if args.vault_command == "init":
        if store.has_secret() and not args.force:
            print("Vault already holds a secret (use --force to replace it)", file=sys.stderr)
            return 1
        secret = getpass.getpass("Recovery phrase: ").strip()
        store.initialize(secret, _prompt_new_password())
        print("Vault initialized")
        return 0

    if args.vault_command == "check":
        ok = store.check_password(getpass.getpass("Vault password: "))
        print("Password correct" if ok else "Incorrect password")
        return 0 if ok else 1

    if args.vault_command == "unlock":
        print(store.unlock(getpass.getpass("Vault password: ")))
        return 0

    if args.vault_command == "passwd":
        old_password = getpass.getpass("Current vault password: ")
        store.change_password(old_password, _prompt_new_password())
        print("Vault password changed")
        return 0

    if args.vault_command == "reset":
        if not args.yes:
            print("Refusing to delete vault records without --yes", file=sys.stderr)
            return 1
        print("Vault reset" if store.reset() else "Vault was already empty")
        return 0

    return 2


def cmd_popup(settings: Settings, args: argparse.Namespace) -> int:
    from ui.popup import run_popup

    api_url = args.api_url or f"http://localhost:{settings.port}"
    return run_popup(api_url)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cypher", description="Watch-only wallet API and local vault")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the wallet API server")
    serve.add_argument("--port", type=int, default=None, help="Override PORT")
    serve.set_defaults(handler=cmd_serve)

    vault = sub.add_parser("vault", help="Manage the local credential vault")
    vault_sub = vault.add_subparsers(dest="vault_command", required=True)
    init = vault_sub.add_parser("init", help="Encrypt a recovery phrase")
    init.add_argument("--force", action="store_true", help="Replace an existing secret")
    vault_sub.add_parser("check", help="Check a password (secret is not decrypted)")
    vault_sub.add_parser("unlock", help="Decrypt and print the recovery phrase")
    vault_sub.add_parser("passwd", help="Change the vault password")
    reset = vault_sub.add_parser("reset", help="Delete vault records")
    reset.add_argument("--yes", action="store_true", help="Confirm deletion")
    vault.set_defaults(handler=cmd_vault)

    popup = sub.add_parser("popup", help="Open the API smoke-test popup")
    popup.add_argument("--api-url", default=None, help="API base URL")
    popup.set_defaults(handler=cmd_popup)

    return parser


def main(argv=None) -> int:
    """Application entry point."""
    args = build_parser().parse_args(argv)
    settings = load_settings()

    # Configure logging before anything else
    configure_logging(settings.log_level, settings.log_retention_days)

    try:
        return args.handler(settings, args)
    except CypherError as e:
        print(e.message, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
