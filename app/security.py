"""
app/security.py

Request-token and origin checks guarding the check endpoint.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from datetime import date, datetime, timezone

from fastapi import Request

from app.config import SecuritySettings

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-Indexy-Token"
FALLBACK_CLIENT_IP = "127.0.0.1"


def generate_request_token(secret: str, *, today: date | None = None) -> str:
    """
    Daily-rotating token: HMAC-SHA256(secret, YYYY-MM-DD in UTC), hex encoded.
    """

    day = today or datetime.now(timezone.utc).date()
    return hmac.new(secret.encode("utf-8"), day.isoformat().encode("utf-8"), hashlib.sha256).hexdigest()


def validate_request(request: Request, settings: SecuritySettings, *, today: date | None = None) -> bool:
    if settings.enforce_origin:
        origin = request.headers.get("origin")
        if origin and not origin.startswith(settings.allowed_origin):
            logger.warning("Rejected request from origin %s", origin)
            return False

    presented = request.headers.get(TOKEN_HEADER)
    if not presented:
        return False

    expected = generate_request_token(settings.secret, today=today)
    return hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client is not None and request.client.host:
        return request.client.host
    return FALLBACK_CLIENT_IP
