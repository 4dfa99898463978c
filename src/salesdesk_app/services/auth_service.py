"""Signed-in session driven by the identity provider's auth-state stream."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from salesdesk_app.models.user import Identity, Role, User
from salesdesk_app.repositories.db_pool import StorageError
from salesdesk_app.repositories.user_repository import UserRepository
from salesdesk_app.services.contract_service import ContractService
from salesdesk_app.services.identity_provider import AuthError, LocalIdentityProvider
from salesdesk_app.services.store import SessionCleared

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = "New User"


class AuthSession:
    """Tracks the current user and keeps the contract list in step with sign-in.

    :meth:`start` subscribes to the provider once; :meth:`shutdown` removes
    the subscription. Sign-in failures never raise; their message is kept in
    :attr:`auth_error` for the login form.
    """

    def __init__(
        self,
        identity_provider: LocalIdentityProvider,
        user_repo: UserRepository,
        contract_service: ContractService,
    ):
        self._provider = identity_provider
        self._user_repo = user_repo
        self._contract_service = contract_service
        self._unsubscribe: Callable[[], None] | None = None
        self.current_user: User | None = None
        self.auth_error: str | None = None
        self.loading = True

    def start(self) -> None:
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self._provider.subscribe(self._on_auth_state_changed)

    def shutdown(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_auth_state_changed(self, identity: Identity | None) -> None:
        if identity is None:
            self.current_user = None
            self._contract_service.store.dispatch(SessionCleared())
            self.loading = False
            return

        self.loading = True
        try:
            user = self._load_or_create_profile(identity)
        except StorageError:
            logger.exception("Failed to load profile for %s", identity.uid)
            self.auth_error = "Không thể tải hồ sơ người dùng."
            self.current_user = None
            self.loading = False
            return

        self.current_user = user
        self._contract_service.refresh(user)
        self.loading = False

    def _load_or_create_profile(self, identity: Identity) -> User:
        """Return the stored profile, creating a salesperson profile on first sign-in."""
        user = self._user_repo.get(identity.uid)
        if user is not None:
            if identity.display_name and identity.display_name != user.display_name:
                user = replace(user, display_name=identity.display_name)
            return user

        user = User(
            id=identity.uid,
            email=identity.email,
            display_name=identity.display_name or DEFAULT_DISPLAY_NAME,
            role=Role.SALESPERSON,
        )
        self._user_repo.create(user)
        logger.info("Created profile for %s", user.id)
        return user

    def _attempt(self, action: Callable[[], object]) -> bool:
        self.auth_error = None
        try:
            action()
        except AuthError as error:
            self.auth_error = str(error)
            return False
        return True

    def login(self, email: str, password: str) -> bool:
        return self._attempt(lambda: self._provider.sign_in(email, password))

    def register(self, email: str, password: str) -> bool:
        return self._attempt(lambda: self._provider.register(email, password))

    def login_with_external_provider(self) -> bool:
        return self._attempt(self._provider.sign_in_with_external_provider)

    def logout(self) -> None:
        self._provider.sign_out()

    def update_display_name(self, display_name: str) -> bool:
        """Rename the current user and cascade the name into their contracts."""
        name = display_name.strip()
        if not name or self.current_user is None:
            return False

        try:
            self._provider.update_display_name(name)
            self._user_repo.update_display_name(self.current_user.id, name)
        except (AuthError, StorageError):
            logger.exception("Failed to update display name for %s", self.current_user.id)
            return False

        self.current_user = replace(self.current_user, display_name=name)
        return self._contract_service.rename_salesperson(self.current_user, name)
