"""
app/auth.py

Password hashing and JWT session cookies.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, HTTPException, Request, Response, status
from passlib.hash import bcrypt

from app.config import AuthSettings, get_auth_settings

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class SessionPrincipal:
    user_id: uuid.UUID
    email: str
    name: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def hash_password(password: str) -> str:
    return bcrypt.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.verify(password, password_hash)
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def create_session_token(
    principal: SessionPrincipal,
    settings: AuthSettings,
    *,
    now: datetime | None = None,
) -> str:
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(principal.user_id),
        "email": principal.email,
        "name": principal.name,
        "role": principal.role,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.max_age_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.algorithm)


def decode_session_token(token: str, settings: AuthSettings) -> SessionPrincipal | None:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.algorithm])
        return SessionPrincipal(
            user_id=uuid.UUID(str(payload["sub"])),
            email=str(payload.get("email", "")),
            name=str(payload.get("name", "")),
            role=str(payload.get("role", "user")),
        )
    except (jwt.PyJWTError, KeyError, ValueError) as exc:
        logger.warning("Ignoring invalid session token: %s", exc)
        return None


def set_session_cookie(response: Response, token: str, settings: AuthSettings) -> None:
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=settings.max_age_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response, settings: AuthSettings) -> None:
    response.delete_cookie(key=settings.cookie_name, path="/")


def get_session(request: Request) -> SessionPrincipal | None:
    """
    Resolve the caller from the session cookie; None for guests.
    """

    settings = get_auth_settings()
    token = request.cookies.get(settings.cookie_name)
    if not token:
        return None
    return decode_session_token(token, settings)


def require_session(session: SessionPrincipal | None = Depends(get_session)) -> SessionPrincipal:
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return session


def require_admin(session: SessionPrincipal | None = Depends(get_session)) -> SessionPrincipal:
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    if not session.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return session
