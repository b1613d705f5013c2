"""
app/services/account_service.py

Registration, login and session issuance for user accounts.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from sqlalchemy.orm import Session

from app.auth import SessionPrincipal, hash_password, verify_password
from db.models.app_setting import SettingKey
from db.models.user import User
from db.repositories.setting_repository import SettingRepository
from db.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class SignupDisabledError(Exception):
    """Raised when public registration has been switched off by an admin."""


def to_principal(user: User) -> SessionPrincipal:
    return SessionPrincipal(user_id=user.id, email=user.email, name=user.name, role=user.role)


class AccountService:
    """
    Owns password policy and account persistence.
    """

    def register(self, *, db: Session, name: str, email: str, password: str) -> User:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if "@" not in email:
            raise ValueError("A valid email address is required")

        signup = SettingRepository(db).get(SettingKey.PUBLIC_SIGNUP)
        if signup is not None and signup != "true":
            raise SignupDisabledError("Public signup is disabled")

        try:
            user = UserRepository(db).create_user(
                email=email,
                password_hash=hash_password(password),
                name=name,
            )
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info("Registered user %s", user.email)
        return user

    def authenticate(self, *, db: Session, email: str, password: str) -> User | None:
        user = UserRepository(db).get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login for %s", email.strip().lower())
            return None
        return user

    def get_user(self, *, db: Session, principal: SessionPrincipal) -> User | None:
        return UserRepository(db).get_by_id(principal.user_id)


@lru_cache(maxsize=1)
def get_account_service() -> AccountService:
    return AccountService()
