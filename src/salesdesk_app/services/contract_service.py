"""Contract service: validation, pricing, persistence, and local state."""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Any

from salesdesk_app.core.validation import (
    ValidationError,
    find_duplicate_violations,
    validate_non_negative_amount,
    validate_optional_date,
    validate_optional_phone,
    validate_production_year,
    validate_required_text,
    validate_vehicle_color,
    validate_vehicle_type,
)
from salesdesk_app.models.contract import (
    BUSINESS_KEY_FIELDS,
    CONTRACT_FIELDS,
    DATE_FIELDS,
    DERIVED_FIELDS,
    FIELD_LABELS,
    MONEY_FIELDS,
    Contract,
)
from salesdesk_app.models.user import Role, User
from salesdesk_app.repositories.contract_repository import ContractRepository
from salesdesk_app.repositories.db_pool import StorageError
from salesdesk_app.services.inline_edit import reconcile_field_edit
from salesdesk_app.services.pricing import apply_pricing
from salesdesk_app.services.promotions import clear_ineligible_promotions
from salesdesk_app.services.store import (
    ContractCreated,
    ContractDeleted,
    ContractsLoaded,
    ContractStore,
    ContractUpdated,
    RefreshRequested,
    SalespersonRenamed,
    ValidationChecked,
    ValidationErrorCleared,
)

logger = logging.getLogger(__name__)


class ContractService:
    """Coordinates contract use cases for a signed-in user."""

    def __init__(self, contract_repo: ContractRepository, store: ContractStore):
        self._contract_repo = contract_repo
        self._store = store

    @property
    def store(self) -> ContractStore:
        return self._store

    @staticmethod
    def _validate(contract: Contract) -> Contract:
        vehicle = validate_vehicle_type(contract.vehicle_type)
        validated = replace(
            contract,
            contract_number=validate_required_text(
                contract.contract_number, FIELD_LABELS["contract_number"]
            ),
            customer_name=validate_required_text(
                contract.customer_name, FIELD_LABELS["customer_name"]
            ),
            customer_phone=validate_optional_phone(contract.customer_phone),
            customer_id_number=contract.customer_id_number.strip(),
            vehicle_color=validate_vehicle_color(vehicle, contract.vehicle_color),
            vehicle_vin=contract.vehicle_vin.strip(),
            vehicle_production_year=validate_production_year(
                Decimal(contract.vehicle_production_year)
            ),
            vehicle_engine_number=contract.vehicle_engine_number.strip(),
            **{
                name: validate_optional_date(getattr(contract, name), FIELD_LABELS[name])
                for name in DATE_FIELDS
            },
            **{
                name: validate_non_negative_amount(getattr(contract, name), FIELD_LABELS[name])
                for name in MONEY_FIELDS - DERIVED_FIELDS
            },
        )
        return clear_ineligible_promotions(validated)

    def contracts(self) -> tuple[Contract, ...]:
        return self._store.state.contracts

    def can_edit(self, user: User, contract_id: str) -> bool:
        """Managers edit everything; salespersons edit their own contracts."""
        contract = self._store.get(contract_id)
        if contract is None:
            return False
        return user.is_manager or contract.salesperson_id == user.id

    def refresh(self, user: User) -> bool:
        """Reload the contracts visible to the user from storage."""
        try:
            contracts = self._contract_repo.fetch_all(None if user.is_manager else user.id)
        except StorageError:
            logger.exception("Failed to load contracts for %s", user.id)
            self._store.dispatch(RefreshRequested())
            return False
        self._store.dispatch(ContractsLoaded(tuple(contracts)))
        return True

    def refresh_if_needed(self, user: User) -> bool:
        """Reload only when an earlier failure left local state stale."""
        if not self._store.state.needs_refresh:
            return False
        return self.refresh(user)

    def check_duplicates(self, contract: Contract) -> list[ValidationError]:
        """Record and return duplicate business keys against every stored contract."""
        errors = find_duplicate_violations(contract, self._contract_repo.fetch_all())
        self._store.dispatch(ValidationChecked(contract.id, tuple(errors)))
        return errors

    def clear_validation_error(self, contract_id: str, field: str) -> None:
        self._store.dispatch(ValidationErrorCleared(contract_id, field))

    def save_contract(self, contract: Contract, user: User) -> bool:
        """Validate, price, and persist a draft or a fully edited contract.

        Returns False when duplicates block the save or storage fails.
        Malformed input raises ValueError.
        """
        is_new = contract.is_draft
        if is_new and user.role != Role.SALESPERSON:
            raise PermissionError("Chỉ nhân viên bán hàng mới được tạo hợp đồng.")

        normalized = self._validate(contract)
        if is_new:
            normalized = replace(
                normalized,
                salesperson_id=user.id,
                salesperson_name=user.display_name,
            )
        else:
            existing = self._load_owned(contract.id, user, "Không tìm thấy hợp đồng cần sửa.")
            if existing is None:
                return False
            normalized = replace(
                normalized,
                salesperson_id=existing.salesperson_id,
                salesperson_name=existing.salesperson_name,
            )
        priced = apply_pricing(normalized)

        try:
            errors = self.check_duplicates(priced)
            if errors:
                logger.info(
                    "Contract %s rejected: duplicate %s",
                    contract.id,
                    ", ".join(error.field for error in errors),
                )
                return False

            if is_new:
                contract_id = self._contract_repo.create(priced)
                saved = replace(priced, id=contract_id)
                self._store.dispatch(ContractCreated(saved, draft_id=contract.id))
                logger.info("Contract %s created by %s", contract_id, user.id)
            else:
                changes = {name: getattr(priced, name) for name in CONTRACT_FIELDS if name != "id"}
                if self._contract_repo.update(priced.id, changes) == 0:
                    self._store.dispatch(RefreshRequested())
                    raise ValueError("Không tìm thấy hợp đồng cần sửa.")
                self._store.dispatch(ContractUpdated(priced))
                logger.info("Contract %s updated by %s", priced.id, user.id)
        except StorageError:
            logger.exception("Failed to save contract %s", contract.id)
            self._store.dispatch(RefreshRequested())
            return False
        return True

    def update_field(self, contract_id: str, field: str, raw_value: Any, user: User) -> bool:
        """Commit one inline cell edit and refresh the derived prices."""
        existing = self._load_owned(contract_id, user, "Không tìm thấy hợp đồng.")
        if existing is None:
            return False

        self.clear_validation_error(contract_id, field)
        edit = reconcile_field_edit(existing, field, raw_value)

        try:
            if field in BUSINESS_KEY_FIELDS:
                errors = self.check_duplicates(edit.contract)
                if any(error.field == field for error in errors):
                    logger.info("Inline edit of %s.%s rejected: duplicate", contract_id, field)
                    return False
            updated = self._contract_repo.update(contract_id, edit.changes)
        except StorageError:
            logger.exception("Failed to update %s on contract %s", field, contract_id)
            self._store.dispatch(RefreshRequested())
            return False

        if updated == 0:
            self._store.dispatch(RefreshRequested())
            raise ValueError("Không tìm thấy hợp đồng.")
        self._store.dispatch(ContractUpdated(edit.contract))
        return True

    def delete_contract(self, contract_id: str, user: User) -> bool:
        """Delete a contract permanently."""
        if self._load_owned(contract_id, user, "Không tìm thấy hợp đồng cần xóa.") is None:
            return False

        try:
            self._contract_repo.delete(contract_id)
        except StorageError:
            logger.exception("Failed to delete contract %s", contract_id)
            self._store.dispatch(RefreshRequested())
            return False
        self._store.dispatch(ContractDeleted(contract_id))
        return True

    def rename_salesperson(self, user: User, display_name: str) -> bool:
        """Copy a new display name into every contract the user owns, atomically."""
        try:
            owned = self._contract_repo.fetch_all(user.id)
            self._contract_repo.batch_update(
                [(contract.id, {"salesperson_name": display_name}) for contract in owned]
            )
        except StorageError:
            logger.exception("Failed to propagate new name for %s", user.id)
            self._store.dispatch(RefreshRequested())
            return False
        self._store.dispatch(SalespersonRenamed(user.id, display_name))
        return True

    def _load(self, contract_id: str) -> Contract | None:
        """Return the contract from local state, falling back to storage."""
        contract = self._store.get(contract_id)
        if contract is not None:
            return contract
        return self._contract_repo.get(contract_id)

    def _load_owned(self, contract_id: str, user: User, message: str) -> Contract | None:
        """Load a contract the user may modify; None when storage is unreachable."""
        try:
            existing = self._load(contract_id)
        except StorageError:
            logger.exception("Failed to load contract %s", contract_id)
            self._store.dispatch(RefreshRequested())
            return None
        if existing is None:
            raise ValueError(message)
        if not (user.is_manager or existing.salesperson_id == user.id):
            raise PermissionError("Bạn không có quyền thay đổi hợp đồng này.")
        return existing
