"""
tests/test_security.py

Request token rotation, origin enforcement and client IP resolution.
"""

from __future__ import annotations

from datetime import date

from starlette.requests import Request

from app.config import SecuritySettings
from app.security import (
    FALLBACK_CLIENT_IP,
    TOKEN_HEADER,
    client_ip,
    generate_request_token,
    validate_request,
)

TODAY = date(2026, 10, 19)


def _request(headers: dict[str, str] | None = None, client: tuple[str, int] | None = ("198.51.100.4", 5000)) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/check",
        "headers": [(key.lower().encode(), value.encode()) for key, value in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


class TestRequestToken:
    def test_deterministic_per_day(self) -> None:
        assert generate_request_token("s", today=TODAY) == generate_request_token("s", today=TODAY)

    def test_rotates_daily(self) -> None:
        assert generate_request_token("s", today=TODAY) != generate_request_token("s", today=date(2026, 10, 20))

    def test_depends_on_secret(self) -> None:
        assert generate_request_token("a", today=TODAY) != generate_request_token("b", today=TODAY)

    def test_is_hex_sha256(self) -> None:
        token = generate_request_token("s", today=TODAY)
        assert len(token) == 64
        int(token, 16)


class TestValidateRequest:
    def test_valid_token(self) -> None:
        settings = SecuritySettings(secret="s")
        request = _request({TOKEN_HEADER: generate_request_token("s", today=TODAY)})
        assert validate_request(request, settings, today=TODAY)

    def test_missing_or_stale_token(self) -> None:
        settings = SecuritySettings(secret="s")
        assert not validate_request(_request(), settings, today=TODAY)
        stale = generate_request_token("s", today=date(2026, 10, 18))
        assert not validate_request(_request({TOKEN_HEADER: stale}), settings, today=TODAY)

    def test_origin_ignored_outside_production(self) -> None:
        settings = SecuritySettings(secret="s", environment="local")
        request = _request({TOKEN_HEADER: generate_request_token("s", today=TODAY), "Origin": "https://evil.test"})
        assert validate_request(request, settings, today=TODAY)

    def test_foreign_origin_rejected_in_production(self) -> None:
        settings = SecuritySettings(secret="s", allowed_origin="https://indexy.app", environment="production")
        token = generate_request_token("s", today=TODAY)

        assert not validate_request(_request({TOKEN_HEADER: token, "Origin": "https://evil.test"}), settings, today=TODAY)
        assert validate_request(_request({TOKEN_HEADER: token, "Origin": "https://indexy.app"}), settings, today=TODAY)
        assert validate_request(_request({TOKEN_HEADER: token}), settings, today=TODAY)


class TestClientIp:
    def test_first_forwarded_entry(self) -> None:
        assert client_ip(_request({"X-Forwarded-For": "203.0.113.9, 10.0.0.1"})) == "203.0.113.9"

    def test_peer_address(self) -> None:
        assert client_ip(_request()) == "198.51.100.4"

    def test_fallback(self) -> None:
        assert client_ip(_request(client=None)) == FALLBACK_CLIENT_IP
