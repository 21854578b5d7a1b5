"""
Health check client used by the popup.

Kept free of Qt imports so it can run (and be tested) headless.
"""

import json

import requests

DEFAULT_API_URL = "http://localhost:8787"
HEALTH_TIMEOUT = 5.0


def fetch_health(api_url: str = DEFAULT_API_URL, timeout: float = HEALTH_TIMEOUT) -> str:
    """
    Call GET /health and return the text the popup displays.

    Returns pretty-printed JSON on success, or "API call failed: <reason>".
    """
    try:
        response = requests.get(f"{api_url.rstrip('/')}/health", timeout=timeout)
        data = response.json()
    except requests.RequestException as e:
        return f"API call failed: {e}"
    except ValueError:
        return "API call failed: response was not JSON"
    return json.dumps(data, indent=2)
