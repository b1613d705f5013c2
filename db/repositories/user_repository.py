"""
Repository for user accounts.
"""

from __future__ import annotations

import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from db.models.user import User, UserPlan, UserRole
from db.repositories.errors import UserAlreadyExistsError, UserNotFoundError


class UserRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        role: str = UserRole.USER,
    ) -> User:
        normalized = email.strip().lower()
        if self.get_by_email(normalized) is not None:
            raise UserAlreadyExistsError(f"User already exists: {normalized}")

        user = User(
            email=normalized,
            password_hash=password_hash,
            name=name.strip(),
            plan=UserPlan.FREE,
            role=role,
        )
        self._session.add(user)
        try:
            self._session.flush()
        except IntegrityError as exc:
            raise UserAlreadyExistsError(f"User already exists: {normalized}") from exc
        self._session.refresh(user)
        return user

    def get_by_id(self, user_id: uuid.UUID) -> User | None:
        return self._session.get(User, user_id)

    def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email.strip().lower())
        return self._session.scalars(stmt).first()

    def list_users(self, *, limit: int = 500) -> list[User]:
        stmt = select(User).order_by(User.created_at.desc()).limit(max(1, limit))
        return list(self._session.scalars(stmt).all())

    def count_users(self) -> int:
        return int(self._session.scalar(select(func.count(User.id))) or 0)

    def set_plan(self, *, email: str, plan: str) -> User:
        user = self.get_by_email(email)
        if user is None:
            raise UserNotFoundError(f"User not found: {email}")
        user.plan = plan
        self._session.flush()
        return user

    def set_role(self, *, email: str, role: str) -> User:
        user = self.get_by_email(email)
        if user is None:
            raise UserNotFoundError(f"User not found: {email}")
        user.role = role
        self._session.flush()
        return user
