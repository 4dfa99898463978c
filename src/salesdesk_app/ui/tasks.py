"""Background worker tasks that keep persistence off the UI thread."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from PySide6.QtCore import QObject, QRunnable, Signal

if TYPE_CHECKING:
    from salesdesk_app.models.contract import Contract
    from salesdesk_app.models.user import User
    from salesdesk_app.services.contract_service import ContractService


class LoadSignals(QObject):
    """Signals for background loading tasks."""

    done = Signal(list)
    error = Signal(str)


class ResultSignals(QObject):
    """Signals for background mutations; ``done`` carries whether it took effect."""

    done = Signal(bool)
    error = Signal(str)


class LoadContractsTask(QRunnable):
    """Reload the user's contract list without blocking the UI thread."""

    def __init__(self, contract_service: ContractService, user: User):
        super().__init__()
        self.contract_service = contract_service
        self.user = user
        self.signals = LoadSignals()

    def run(self) -> None:
        try:
            if not self.contract_service.refresh(self.user):
                self.signals.error.emit("Không thể tải danh sách hợp đồng.")
                return
            self.signals.done.emit(list(self.contract_service.contracts()))
        except Exception as error:  # pylint: disable=broad-except
            # Worker boundary: convert any failure to a user-visible message.
            self.signals.error.emit(str(error))


class SaveContractTask(QRunnable):
    """Save a draft or fully edited contract in a background worker."""

    def __init__(self, contract_service: ContractService, contract: Contract, user: User):
        super().__init__()
        self.contract_service = contract_service
        self.contract = contract
        self.user = user
        self.signals = ResultSignals()

    def run(self) -> None:
        try:
            saved = self.contract_service.save_contract(self.contract, self.user)
            self.signals.done.emit(saved)
        except Exception as error:  # pylint: disable=broad-except
            # Worker boundary: convert any failure to a user-visible message.
            self.signals.error.emit(str(error))


class UpdateFieldTask(QRunnable):
    """Commit one inline cell edit in a background worker."""

    def __init__(
        self,
        contract_service: ContractService,
        contract_id: str,
        field: str,
        raw_value: Any,
        user: User,
    ):
        super().__init__()
        self.contract_service = contract_service
        self.contract_id = contract_id
        self.field = field
        self.raw_value = raw_value
        self.user = user
        self.signals = ResultSignals()

    def run(self) -> None:
        try:
            updated = self.contract_service.update_field(
                self.contract_id,
                self.field,
                self.raw_value,
                self.user,
            )
            self.signals.done.emit(updated)
        except Exception as error:  # pylint: disable=broad-except
            # Worker boundary: convert any failure to a user-visible message.
            self.signals.error.emit(str(error))


class DeleteContractTask(QRunnable):
    """Delete a contract in a background worker."""

    def __init__(self, contract_service: ContractService, contract_id: str, user: User):
        super().__init__()
        self.contract_service = contract_service
        self.contract_id = contract_id
        self.user = user
        self.signals = ResultSignals()

    def run(self) -> None:
        try:
            deleted = self.contract_service.delete_contract(self.contract_id, self.user)
            self.signals.done.emit(deleted)
        except Exception as error:  # pylint: disable=broad-except
            # Worker boundary: convert any failure to a user-visible message.
            self.signals.error.emit(str(error))
