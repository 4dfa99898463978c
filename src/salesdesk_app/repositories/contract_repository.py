"""Contract repository with an encrypted customer ID number."""

from __future__ import annotations

import sqlite3
import uuid
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable

from salesdesk_app.core.crypto import CryptoService
from salesdesk_app.models.contract import (
    CONTRACT_FIELDS,
    MONEY_FIELDS,
    PROMOTION_FLAGS,
    Contract,
    Gender,
    PaymentMethod,
)
from salesdesk_app.repositories.db_pool import StorageError, ThreadLocalConnection

ENCRYPTED_FIELD = "customer_id_number"
ENCRYPTED_COLUMN = "customer_id_number_encrypted"
WRITABLE_FIELDS = frozenset(CONTRACT_FIELDS) - {"id"}


def _column_for(field_name: str) -> str:
    return ENCRYPTED_COLUMN if field_name == ENCRYPTED_FIELD else field_name


class ContractRepository:
    """Handles contract persistence and retrieval."""

    def __init__(self, pool: ThreadLocalConnection, crypto_service: CryptoService):
        self._pool = pool
        self._crypto = crypto_service

    def _to_columns(self, changes: dict[str, Any]) -> dict[str, Any]:
        """Convert domain values into column values."""
        unknown = set(changes) - WRITABLE_FIELDS
        if unknown:
            raise ValueError(f"Trường không hợp lệ: {', '.join(sorted(unknown))}")

        columns: dict[str, Any] = {}
        for field_name, value in changes.items():
            if field_name == ENCRYPTED_FIELD:
                value = self._crypto.encrypt_text(value or "")
            elif field_name in MONEY_FIELDS:
                value = str(value)
            elif field_name in PROMOTION_FLAGS:
                value = 1 if value else 0
            elif isinstance(value, Enum):
                value = value.value
            columns[_column_for(field_name)] = value
        return columns

    def _from_row(self, row: sqlite3.Row) -> Contract:
        values: dict[str, Any] = {}
        for field_name in CONTRACT_FIELDS:
            if field_name == ENCRYPTED_FIELD:
                encrypted = row[ENCRYPTED_COLUMN]
                values[field_name] = self._crypto.decrypt_text(encrypted) if encrypted else ""
                continue
            value = row[field_name]
            if field_name in MONEY_FIELDS:
                value = Decimal(value)
            elif field_name in PROMOTION_FLAGS:
                value = bool(value)
            values[field_name] = value
        values["customer_gender"] = Gender(values["customer_gender"])
        values["payment_method"] = PaymentMethod(values["payment_method"])
        return Contract(**values)

    def create(self, contract: Contract) -> str:
        """Insert a contract and return its new opaque id."""
        contract_id = uuid.uuid4().hex
        columns = self._to_columns(
            {name: getattr(contract, name) for name in CONTRACT_FIELDS if name != "id"}
        )
        columns["id"] = contract_id
        names = ", ".join(columns)
        placeholders = ", ".join("?" for _ in columns)
        self._pool.execute(
            f"INSERT INTO contracts ({names}) VALUES ({placeholders})",
            tuple(columns.values()),
        )
        return contract_id

    def get(self, contract_id: str) -> Contract | None:
        """Fetch one contract by id."""
        row = self._pool.fetchone("SELECT * FROM contracts WHERE id = ?", (contract_id,))
        return self._from_row(row) if row else None

    def fetch_all(self, salesperson_id: str | None = None) -> list[Contract]:
        """Fetch all contracts, or only one salesperson's contracts."""
        if salesperson_id is None:
            rows = self._pool.fetchall("SELECT * FROM contracts ORDER BY created_at, rowid")
        else:
            rows = self._pool.fetchall(
                "SELECT * FROM contracts WHERE salesperson_id = ? ORDER BY created_at, rowid",
                (salesperson_id,),
            )
        return [self._from_row(row) for row in rows]

    def update(self, contract_id: str, changes: dict[str, Any]) -> int:
        """Apply a partial update and return affected row count."""
        if not changes:
            return 0
        columns = self._to_columns(changes)
        assignments = ", ".join(f"{name} = ?" for name in columns)
        cursor = self._pool.execute(
            f"UPDATE contracts SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
            (*columns.values(), contract_id),
        )
        return cursor.rowcount

    def batch_update(self, updates: Iterable[tuple[str, dict[str, Any]]]) -> int:
        """Apply several partial updates in one transaction."""
        prepared = [(contract_id, self._to_columns(changes)) for contract_id, changes in updates]
        affected = 0
        with self._pool.transaction() as connection:
            for contract_id, columns in prepared:
                if not columns:
                    continue
                assignments = ", ".join(f"{name} = ?" for name in columns)
                cursor = connection.execute(
                    f"UPDATE contracts SET {assignments}, updated_at = CURRENT_TIMESTAMP "
                    "WHERE id = ?",
                    (*columns.values(), contract_id),
                )
                if cursor.rowcount == 0:
                    raise StorageError(f"Contract not found: {contract_id}")
                affected += cursor.rowcount
        return affected

    def delete(self, contract_id: str) -> int:
        """Delete a contract permanently and return affected row count."""
        cursor = self._pool.execute("DELETE FROM contracts WHERE id = ?", (contract_id,))
        return cursor.rowcount
