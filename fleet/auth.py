"""Account creation and password sign-in against the users table."""

import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from .errors import FormError
from .rows import user_from_row
from .store import Store
from .user import User

logger = logging.getLogger(__name__)


def create_user(
    store: Store, email: str, password: str, full_name: Optional[str] = None
) -> User:
    """Register an account. Emails are stored lowercased."""
    email = (email or "").strip().lower()
    if not email:
        raise FormError("Email is required")
    if not password:
        raise FormError("Password is required")
    row = store.insert(
        "users",
        {
            "email": email,
            "full_name": full_name,
            "password_hash": generate_password_hash(password),
        },
    )
    logger.info("created user %s", email)
    return user_from_row(row)


def get_user(store: Store, user_id: Optional[str]) -> Optional[User]:
    """The user behind a session id, or None when signed out or unknown."""
    if not user_id:
        return None
    row = store.table("users").eq("id", user_id).first()
    return user_from_row(row) if row else None


def find_user(store: Store, email: str) -> Optional[User]:
    row = store.table("users").eq("email", (email or "").strip().lower()).first()
    return user_from_row(row) if row else None


def authenticate(store: Store, email: str, password: str) -> Optional[User]:
    """Return the user when the password matches, otherwise None."""
    user = find_user(store, email)
    if user is None or not check_password_hash(user.password_hash, password or ""):
        return None
    return user
