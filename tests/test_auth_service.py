"""Tests for the identity provider and the signed-in session."""

from __future__ import annotations

from dataclasses import replace
from datetime import date

from salesdesk_app.core.config import AppConfig, DatabaseConfig, EncryptionConfig, LoggingConfig
from salesdesk_app.core.crypto import CryptoService
from salesdesk_app.models.user import Identity
from salesdesk_app.repositories.contract_repository import ContractRepository
from salesdesk_app.repositories.credential_repository import CredentialRepository
from salesdesk_app.repositories.db_pool import ThreadLocalConnection
from salesdesk_app.repositories.schema import initialize_schema
from salesdesk_app.repositories.user_repository import UserRepository
from salesdesk_app.services.auth_service import AuthSession
from salesdesk_app.services.contract_service import ContractService
from salesdesk_app.services.draft import new_contract_template
from salesdesk_app.services.identity_provider import ExternalAccount, LocalIdentityProvider
from salesdesk_app.services.store import ContractStore


def build_session(tmp_path, external_resolver=None):
    config = AppConfig(
        database=DatabaseConfig(path=str(tmp_path / "test.db")),
        encryption=EncryptionConfig(key_env="SALESDESK_ENCRYPTION_KEY"),
        logging=LoggingConfig(level="INFO", file=None),
    )
    pool = ThreadLocalConnection(config)
    initialize_schema(pool)

    crypto = CryptoService.from_base64_key(CryptoService.generate_base64_key())
    provider = LocalIdentityProvider(CredentialRepository(pool), external_resolver)
    user_repo = UserRepository(pool)
    contract_service = ContractService(ContractRepository(pool, crypto), ContractStore())
    session = AuthSession(provider, user_repo, contract_service)
    return session, provider, user_repo, contract_service


def test_subscribe_delivers_current_state_and_later_changes(tmp_path) -> None:
    _, provider, _, _ = build_session(tmp_path)
    received: list[Identity | None] = []

    def on_change(identity: Identity | None) -> None:
        received.append(identity)

    unsubscribe = provider.subscribe(on_change)
    provider.register("an@example.com", "secret1")
    provider.sign_out()
    unsubscribe()
    unsubscribe()
    provider.sign_in("an@example.com", "secret1")

    assert received[0] is None
    assert received[1].email == "an@example.com"
    assert received[1].display_name == "an"
    assert received[2] is None
    assert len(received) == 3


def test_register_creates_salesperson_profile_and_loads_contracts(tmp_path) -> None:
    session, _, user_repo, _ = build_session(tmp_path)
    session.start()
    assert session.loading is False
    assert session.current_user is None

    assert session.register("an@example.com", "secret1")

    user = session.current_user
    assert user is not None
    assert user.display_name == "an"
    assert not user.is_manager
    assert user_repo.get(user.id) == user


def test_register_rejects_bad_input_and_reused_email(tmp_path) -> None:
    session, _, _, _ = build_session(tmp_path)
    session.start()

    assert session.register("not-an-email", "secret1") is False
    assert session.auth_error == "Email không hợp lệ."
    assert session.register("an@example.com", "123") is False

    assert session.register("an@example.com", "secret1")
    session.logout()
    assert session.register("AN@example.com", "secret2") is False
    assert session.auth_error == "Email đã được sử dụng."


def test_login_failure_keeps_message_and_no_user(tmp_path) -> None:
    session, _, _, _ = build_session(tmp_path)
    session.start()
    session.register("an@example.com", "secret1")
    session.logout()

    assert session.login("an@example.com", "wrong-password") is False
    assert session.auth_error == "Email hoặc mật khẩu không đúng."
    assert session.current_user is None

    assert session.login("an@example.com", "secret1")
    assert session.auth_error is None
    assert session.current_user.email == "an@example.com"


def test_logout_clears_local_contract_state(tmp_path) -> None:
    session, _, _, contract_service = build_session(tmp_path)
    session.start()
    session.register("an@example.com", "secret1")
    contract = replace(
        new_contract_template(date(2024, 3, 5)),
        contract_number="HD-01",
        customer_name="Nguyễn Văn A",
    )
    assert contract_service.save_contract(contract, session.current_user)

    session.logout()

    assert session.current_user is None
    assert contract_service.contracts() == ()


def test_shutdown_stops_following_auth_changes(tmp_path) -> None:
    session, provider, _, _ = build_session(tmp_path)
    session.start()
    session.start()
    session.shutdown()

    provider.register("an@example.com", "secret1")

    assert session.current_user is None


def test_external_sign_in_links_account_by_email(tmp_path) -> None:
    session, _, _, _ = build_session(
        tmp_path,
        external_resolver=lambda: ExternalAccount("binh@example.com", "Trần Bình"),
    )
    session.start()

    assert session.login_with_external_provider()
    first_id = session.current_user.id
    assert session.current_user.display_name == "Trần Bình"

    session.logout()
    assert session.login_with_external_provider()
    assert session.current_user.id == first_id


def test_external_provider_failure_becomes_message(tmp_path) -> None:
    def failing_resolver() -> ExternalAccount:
        raise RuntimeError("popup closed")

    session, _, _, _ = build_session(tmp_path, external_resolver=failing_resolver)
    session.start()

    assert session.login_with_external_provider() is False
    assert "popup closed" in session.auth_error

    unconfigured, _, _, _ = build_session(tmp_path / "other")
    unconfigured.start()
    assert unconfigured.login_with_external_provider() is False


def test_update_display_name_cascades_to_owned_contracts(tmp_path) -> None:
    session, provider, user_repo, contract_service = build_session(tmp_path)
    session.start()
    session.register("an@example.com", "secret1")
    contract = replace(
        new_contract_template(date(2024, 3, 5)),
        contract_number="HD-01",
        customer_name="Nguyễn Văn A",
    )
    contract_service.save_contract(contract, session.current_user)

    assert session.update_display_name("  An Nguyễn ")

    assert session.current_user.display_name == "An Nguyễn"
    assert provider.current_identity.display_name == "An Nguyễn"
    assert user_repo.get(session.current_user.id).display_name == "An Nguyễn"
    assert contract_service.contracts()[0].salesperson_name == "An Nguyễn"
    assert session.update_display_name("   ") is False
