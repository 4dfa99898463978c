"""Application dependency container."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from salesdesk_app.core.config import AppConfig, ensure_encryption_key, load_config
from salesdesk_app.core.crypto import CryptoService
from salesdesk_app.core.logging_config import configure_logging
from salesdesk_app.repositories.contract_repository import ContractRepository
from salesdesk_app.repositories.credential_repository import CredentialRepository
from salesdesk_app.repositories.db_pool import ThreadLocalConnection
from salesdesk_app.repositories.schema import initialize_schema
from salesdesk_app.repositories.user_repository import UserRepository
from salesdesk_app.services.auth_service import AuthSession
from salesdesk_app.services.contract_service import ContractService
from salesdesk_app.services.identity_provider import LocalIdentityProvider
from salesdesk_app.services.store import ContractStore


@dataclass
class ServiceContainer:
    """Wires repositories and services."""

    config: AppConfig
    pool: ThreadLocalConnection
    identity_provider: LocalIdentityProvider
    contract_service: ContractService
    session: AuthSession


def build_container(config: AppConfig | None = None, config_path: Path | None = None) -> ServiceContainer:
    """Build dependencies and initialize schema."""
    config = config or load_config(config_path)
    configure_logging(config.logging)
    encryption_key = ensure_encryption_key(config.encryption.key_env, config.database.path)
    crypto = CryptoService.from_base64_key(encryption_key)

    pool = ThreadLocalConnection(config)
    initialize_schema(pool)

    identity_provider = LocalIdentityProvider(CredentialRepository(pool))
    contract_service = ContractService(ContractRepository(pool, crypto), ContractStore())
    session = AuthSession(identity_provider, UserRepository(pool), contract_service)

    return ServiceContainer(
        config=config,
        pool=pool,
        identity_provider=identity_provider,
        contract_service=contract_service,
        session=session,
    )
