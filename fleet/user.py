"""User class for account identity."""
from typing import Optional


class User:
    """A signed-in account. Owns vehicles."""

    def __init__(
            self,
            email: str,
            password_hash: str = "",
            full_name: Optional[str] = None,
            id: Optional[str] = None,
            created_at: Optional[str] = None,
    ):
        self.id = id
        self.email = email
        self.password_hash = password_hash
        self.full_name = full_name
        self.created_at = created_at

    @property
    def display_name(self) -> str:
        return self.full_name or self.email
