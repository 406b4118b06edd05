"""One-time script to create (or reset) the admin account.

Usage:
    python -m retailpos.create_admin
"""

from __future__ import annotations

import getpass

from sqlalchemy import func

from retailpos.app.core.config import settings
from retailpos.app.core.database import Store
from retailpos.app.core.security import get_password_hash, validate_password_strength
from retailpos.app.models.user import RoleEnum, User


def main() -> None:
    username = input("Username [admin]: ").strip() or "admin"
    password = getpass.getpass("Password: ")
    if not password:
        print("Error: password cannot be empty.")
        return
    pw_error = validate_password_strength(password)
    if pw_error:
        print(f"Error: {pw_error}")
        return

    store = Store(settings.DATABASE_URL)
    db = store.session()
    try:
        existing = db.query(User).filter(
            func.lower(User.username) == username.lower()
        ).first()
        if existing:
            if existing.role != RoleEnum.ADMIN:
                print(f"Error: '{username}' exists with role {existing.role.value}; roles cannot be changed.")
                return
            existing.hashed_password = get_password_hash(password)
            db.commit()
            print("Admin user already exists, password reset.")
            print(f"  ID:       {existing.id}")
            print(f"  Username: {existing.username}")
            return

        user = User(
            username=username,
            hashed_password=get_password_hash(password),
            role=RoleEnum.ADMIN,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        print("Admin user created successfully!")
        print(f"  ID:       {user.id}")
        print(f"  Username: {username}")
        print(f"  Role:     {RoleEnum.ADMIN.value}")
    finally:
        db.close()
        store.dispose()


if __name__ == "__main__":
    main()
