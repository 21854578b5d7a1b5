"""
UI package - PyQt6 smoke-test popup for the Cypher API.

Contains:
- Theme: Popup colors and fonts
- fetch_health: Qt-free /health client
- SmokeTestWindow (ui.popup): The popup window itself, imported lazily
  so headless callers never load Qt
"""

from .theme import Theme
from .health import fetch_health, DEFAULT_API_URL

__all__ = [
    "Theme",
    "fetch_health",
    "DEFAULT_API_URL",
]
