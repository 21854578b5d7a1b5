"""
Shared utility functions for Cypher.

Contains path helpers and timestamp formatting used across packages.
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path


def get_app_dir() -> Path:
    """Get the application data directory (CYPHER_DATA_DIR overrides)."""
    override = (os.getenv("CYPHER_DATA_DIR") or "").strip()
    if override:
        app_dir = Path(override).expanduser()
    elif getattr(sys, 'frozen', False):
        # Running as compiled
        app_dir = Path(sys.executable).parent / "data"
    else:
        # Running from source checkout
        app_dir = Path(__file__).parent.parent / "data"

    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def get_vault_dir() -> Path:
    """Get the vault record storage directory."""
    return get_app_dir() / "vault"


def get_logs_dir() -> Path:
    """Get the logs directory."""
    logs_dir = get_app_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2026-02-08T14:32:15.123Z"""
    return format_iso(datetime.now(timezone.utc))


def format_iso(moment: datetime) -> str:
    """Format an aware datetime the way the API emits timestamps."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
