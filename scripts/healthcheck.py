"""
Container health check: GET /health must answer {"status": "ok"}.
"""

from __future__ import annotations

import os

import httpx


def main() -> int:
    port = os.getenv("PORT", "8000")
    path = os.getenv("HEALTHCHECK_PATH", "/health")
    url = f"http://127.0.0.1:{port}{path}"

    try:
        response = httpx.get(url, timeout=2.0)
        return 0 if response.is_success and response.json().get("status") == "ok" else 1
    except (httpx.HTTPError, ValueError):
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
