"""Local identity provider with an auth-state event stream."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from typing import Callable

from PySide6.QtCore import QObject, Signal

from salesdesk_app.core.crypto import hash_password, verify_password
from salesdesk_app.core.validation import validate_email, validate_password
from salesdesk_app.models.user import Identity
from salesdesk_app.repositories.credential_repository import CredentialRepository
from salesdesk_app.repositories.db_pool import StorageError

logger = logging.getLogger(__name__)

AuthCallback = Callable[[Identity | None], None]


class AuthError(Exception):
    """Sign-in, registration, or provider failure with a user-facing message."""


@dataclass(frozen=True)
class ExternalAccount:
    """Account details returned by an external (OAuth) sign-in flow."""

    email: str
    display_name: str


class AuthStateEvents(QObject):
    """Signals fired whenever the signed-in identity changes."""

    changed = Signal(object)


class LocalIdentityProvider:
    """Email/password accounts plus an optional external sign-in flow."""

    def __init__(
        self,
        credential_repo: CredentialRepository,
        external_resolver: Callable[[], ExternalAccount] | None = None,
    ):
        self._credentials = credential_repo
        self._external_resolver = external_resolver
        self._events = AuthStateEvents()
        self._current: Identity | None = None

    @property
    def current_identity(self) -> Identity | None:
        return self._current

    def subscribe(self, callback: AuthCallback) -> Callable[[], None]:
        """Deliver the current state now and every later change; return an unsubscribe."""
        self._events.changed.connect(callback)
        subscribed = True

        def unsubscribe() -> None:
            nonlocal subscribed
            if subscribed:
                self._events.changed.disconnect(callback)
                subscribed = False

        callback(self._current)
        return unsubscribe

    def _set_current(self, identity: Identity | None) -> None:
        self._current = identity
        self._events.changed.emit(identity)

    @staticmethod
    def _identity(record: dict) -> Identity:
        return Identity(
            uid=record["uid"],
            email=record["email"],
            display_name=record["display_name"],
        )

    def sign_in(self, email: str, password: str) -> Identity:
        try:
            record = self._credentials.find_by_email(email)
        except StorageError as error:
            raise AuthError("Không thể kết nối dịch vụ đăng nhập.") from error
        if (
            not record
            or not record["password_hash"]
            or not verify_password(password, record["password_hash"])
        ):
            raise AuthError("Email hoặc mật khẩu không đúng.")
        identity = self._identity(record)
        self._set_current(identity)
        return identity

    def register(self, email: str, password: str) -> Identity:
        """Create an email/password account and sign it in."""
        try:
            email = validate_email(email)
            validate_password(password)
        except ValueError as error:
            raise AuthError(str(error)) from error

        display_name = email.split("@")[0]
        uid = uuid.uuid4().hex
        try:
            if self._credentials.find_by_email(email):
                raise AuthError("Email đã được sử dụng.")
            self._credentials.create(uid, email, hash_password(password), display_name)
        except StorageError as error:
            raise AuthError("Không thể tạo tài khoản.") from error

        identity = Identity(uid=uid, email=email, display_name=display_name)
        self._set_current(identity)
        return identity

    def sign_in_with_external_provider(self) -> Identity:
        """Run the configured external flow and link it to an account by email."""
        if self._external_resolver is None:
            raise AuthError("Chưa cấu hình đăng nhập bên ngoài.")
        try:
            account = self._external_resolver()
        except AuthError:
            raise
        except Exception as error:  # pylint: disable=broad-except
            # Provider boundary: any flow failure becomes a sign-in message.
            raise AuthError(f"Đăng nhập bên ngoài thất bại: {error}") from error

        try:
            record = self._credentials.find_by_email(account.email)
            if record is None:
                uid = uuid.uuid4().hex
                self._credentials.create(
                    uid,
                    account.email,
                    None,
                    account.display_name,
                    provider="external",
                )
                record = self._credentials.find_by_uid(uid)
        except StorageError as error:
            raise AuthError("Không thể kết nối dịch vụ đăng nhập.") from error

        identity = self._identity(record)
        self._set_current(identity)
        return identity

    def sign_out(self) -> None:
        self._set_current(None)

    def update_display_name(self, display_name: str) -> Identity:
        """Rename the signed-in account. Does not fire an auth-state change."""
        if self._current is None:
            raise AuthError("Chưa đăng nhập.")
        self._credentials.update_display_name(self._current.uid, display_name)
        self._current = replace(self._current, display_name=display_name)
        logger.info("Display name updated for %s", self._current.uid)
        return self._current
