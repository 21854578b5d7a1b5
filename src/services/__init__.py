"""
Services package - Backend services for Cypher.

Contains:
- WalletService: Registration, lookup and chain queries
- ApiServer: HTTP server for the wallet read model
"""

from .wallets import WalletService, parse_limit
from .server import ApiServer, RateLimiter, SERVICE_NAME

__all__ = [
    "WalletService",
    "parse_limit",
    "ApiServer",
    "RateLimiter",
    "SERVICE_NAME",
]
