"""Sign-in credentials for the local identity provider."""

from __future__ import annotations

from typing import Any

from salesdesk_app.repositories.db_pool import ThreadLocalConnection


class CredentialRepository:
    """Stores account emails with password hashes or external provider links."""

    def __init__(self, pool: ThreadLocalConnection):
        self._pool = pool

    def find_by_email(self, email: str) -> dict[str, Any] | None:
        row = self._pool.fetchone(
            """
            SELECT uid, email, password_hash, display_name, provider
            FROM credentials
            WHERE lower(email) = lower(?)
            """,
            (email.strip(),),
        )
        return dict(row) if row else None

    def find_by_uid(self, uid: str) -> dict[str, Any] | None:
        row = self._pool.fetchone(
            """
            SELECT uid, email, password_hash, display_name, provider
            FROM credentials
            WHERE uid = ?
            """,
            (uid,),
        )
        return dict(row) if row else None

    def create(
        self,
        uid: str,
        email: str,
        password_hash: str | None,
        display_name: str,
        provider: str = "password",
    ) -> None:
        self._pool.execute(
            """
            INSERT INTO credentials (uid, email, password_hash, display_name, provider)
            VALUES (?, ?, ?, ?, ?)
            """,
            (uid, email.strip(), password_hash, display_name, provider),
        )

    def update_display_name(self, uid: str, display_name: str) -> int:
        cursor = self._pool.execute(
            "UPDATE credentials SET display_name = ? WHERE uid = ?",
            (display_name, uid),
        )
        return cursor.rowcount
