"""Database schema management."""

from __future__ import annotations

from salesdesk_app.repositories.db_pool import ThreadLocalConnection


def initialize_schema(pool: ThreadLocalConnection) -> None:
    """Create required tables and indexes if they do not exist."""
    pool.execute(
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT NOT NULL,
            display_name TEXT NOT NULL,
            role TEXT NOT NULL DEFAULT 'salesperson',
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
        """
    )

    pool.execute(
        """
        CREATE TABLE IF NOT EXISTS credentials (
            uid TEXT PRIMARY KEY,
            email TEXT NOT NULL UNIQUE,
            password_hash TEXT,
            display_name TEXT NOT NULL,
            provider TEXT NOT NULL DEFAULT 'password',
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
        """
    )

    pool.execute(
        """
        CREATE TABLE IF NOT EXISTS contracts (
            id TEXT PRIMARY KEY,
            contract_number TEXT NOT NULL DEFAULT '',
            signing_date TEXT NOT NULL DEFAULT '',
            delivery_date TEXT NOT NULL DEFAULT '',
            salesperson_id TEXT NOT NULL DEFAULT '',
            salesperson_name TEXT NOT NULL DEFAULT '',
            customer_name TEXT NOT NULL DEFAULT '',
            customer_phone TEXT NOT NULL DEFAULT '',
            customer_date_of_birth TEXT NOT NULL DEFAULT '',
            customer_gender TEXT NOT NULL,
            customer_id_number_encrypted BLOB,
            customer_id_issue_date TEXT NOT NULL DEFAULT '',
            customer_id_issue_place TEXT NOT NULL DEFAULT '',
            customer_address TEXT NOT NULL DEFAULT '',
            vehicle_type TEXT NOT NULL DEFAULT '',
            vehicle_color TEXT NOT NULL DEFAULT '',
            vehicle_production_year INTEGER NOT NULL DEFAULT 0,
            vehicle_vin TEXT NOT NULL DEFAULT '',
            vehicle_engine_number TEXT NOT NULL DEFAULT '',
            payment_method TEXT NOT NULL,
            selling_price TEXT NOT NULL DEFAULT '0',
            promo_4percent INTEGER NOT NULL DEFAULT 0,
            promo_3percent INTEGER NOT NULL DEFAULT 0,
            promo_vf3_social INTEGER NOT NULL DEFAULT 0,
            promo_insurance INTEGER NOT NULL DEFAULT 0,
            promo_vf3_fixed INTEGER NOT NULL DEFAULT 0,
            promo_vf5_fixed INTEGER NOT NULL DEFAULT 0,
            salesperson_discount TEXT NOT NULL DEFAULT '0',
            company_discount TEXT NOT NULL DEFAULT '0',
            total_discount TEXT NOT NULL DEFAULT '0',
            final_price TEXT NOT NULL DEFAULT '0',
            payment1 TEXT NOT NULL DEFAULT '0',
            payment1_date TEXT NOT NULL DEFAULT '',
            payment2 TEXT NOT NULL DEFAULT '0',
            payment2_date TEXT NOT NULL DEFAULT '',
            payment3 TEXT NOT NULL DEFAULT '0',
            payment3_date TEXT NOT NULL DEFAULT '',
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
        """
    )

    pool.execute("CREATE INDEX IF NOT EXISTS idx_contracts_salesperson ON contracts(salesperson_id)")
    pool.execute("CREATE INDEX IF NOT EXISTS idx_credentials_email ON credentials(email)")
