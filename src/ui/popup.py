"""
Smoke Test Popup - One button that calls the API health endpoint.
"""

import sys

from PyQt6.QtCore import QThread, pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QApplication, QWidget, QVBoxLayout, QLabel, QPushButton, QPlainTextEdit
)

from .health import fetch_health, DEFAULT_API_URL
from .theme import Theme


class HealthCheckThread(QThread):
    """Background thread for the health request."""

    status_ready = pyqtSignal(str)

    def __init__(self, api_url: str):
        super().__init__()
        self.api_url = api_url

    def run(self):
        self.status_ready.emit(fetch_health(self.api_url))


class SmokeTestWindow(QWidget):
    """Popup that reports whether the API is reachable."""

    def __init__(self, api_url: str = DEFAULT_API_URL):
        super().__init__()
        self.api_url = api_url
        self._thread = None

        self.setWindowTitle("Cypher")
        self.setMinimumWidth(Theme.MIN_POPUP_WIDTH)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)

        title = QLabel("Cypher API Smoke Test")
        title.setFont(QFont(Theme.FONT, 14, QFont.Weight.Bold))
        layout.addWidget(title)

        self.test_btn = QPushButton("Test API")
        self.test_btn.clicked.connect(self.test_api)
        layout.addWidget(self.test_btn)

        self.status_view = QPlainTextEdit("Not tested")
        self.status_view.setReadOnly(True)
        self.status_view.setFont(QFont(Theme.MONO_FONT, 10))
        self.status_view.setStyleSheet(
            f"background: {Theme.PANEL_BG}; color: {Theme.PANEL_TEXT}; "
            f"border-radius: {Theme.PANEL_RADIUS}px; padding: 10px;"
        )
        layout.addWidget(self.status_view)

    def test_api(self):
        self.test_btn.setEnabled(False)
        self.status_view.setPlainText("Calling API...")
        self._thread = HealthCheckThread(self.api_url)
        self._thread.status_ready.connect(self.on_status)
        self._thread.start()

    def on_status(self, text: str):
        self.status_view.setPlainText(text)
        self.test_btn.setEnabled(True)


def run_popup(api_url: str = DEFAULT_API_URL) -> int:
    """Show the popup and run the Qt event loop."""
    app = QApplication(sys.argv)
    app.setApplicationName("Cypher")

    window = SmokeTestWindow(api_url)
    window.show()
    return app.exec()
