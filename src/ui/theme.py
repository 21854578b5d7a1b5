"""
UI Theme - Colors and fonts for the Cypher popup.
"""


class Theme:
    """Popup palette."""

    # Status panel
    PANEL_BG = "#111827"
    PANEL_TEXT = "#e5e7eb"
    PANEL_RADIUS = 6

    # Typography
    FONT = "Arial"
    MONO_FONT = "JetBrains Mono"

    MIN_POPUP_WIDTH = 320
