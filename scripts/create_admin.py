"""
Create an admin account, or promote an existing user to admin.
"""

from __future__ import annotations

import argparse
import getpass
import json

from app.auth import hash_password
from app.services.account_service import MIN_PASSWORD_LENGTH
from db.models.user import UserRole
from db.repositories.user_repository import UserRepository
from db.session import session_scope


def main() -> int:
    parser = argparse.ArgumentParser(description="Create or promote an admin user.")
    parser.add_argument("email")
    parser.add_argument("--name", default="Admin")
    args = parser.parse_args()

    with session_scope() as db:
        repository = UserRepository(db)
        user = repository.get_by_email(args.email)
        if user is None:
            password = getpass.getpass("Password: ")
            if len(password) < MIN_PASSWORD_LENGTH:
                parser.error(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
            user = repository.create_user(
                email=args.email,
                password_hash=hash_password(password),
                name=args.name,
                role=UserRole.ADMIN,
            )
            action = "created"
        else:
            repository.set_role(email=args.email, role=UserRole.ADMIN)
            action = "promoted"

        print(json.dumps({"email": user.email, "role": user.role, "action": action}))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
