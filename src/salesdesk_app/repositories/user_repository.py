"""User profile repository."""

from __future__ import annotations

from salesdesk_app.models.user import Role, User
from salesdesk_app.repositories.db_pool import ThreadLocalConnection


class UserRepository:
    """Handles user profile persistence."""

    def __init__(self, pool: ThreadLocalConnection):
        self._pool = pool

    def get(self, user_id: str) -> User | None:
        row = self._pool.fetchone(
            "SELECT id, email, display_name, role FROM users WHERE id = ?",
            (user_id,),
        )
        if not row:
            return None
        return User(
            id=row["id"],
            email=row["email"],
            display_name=row["display_name"],
            role=Role(row["role"]),
        )

    def create(self, user: User) -> None:
        self._pool.execute(
            "INSERT INTO users (id, email, display_name, role) VALUES (?, ?, ?, ?)",
            (user.id, user.email, user.display_name, user.role.value),
        )

    def update_display_name(self, user_id: str, display_name: str) -> int:
        cursor = self._pool.execute(
            "UPDATE users SET display_name = ? WHERE id = ?",
            (display_name, user_id),
        )
        return cursor.rowcount
