"""Central state for loaded contracts and their validation errors.

Every change goes through :func:`reduce`, a pure function from the current
state and an action to the next state. :class:`ContractStore` only holds the
latest state and dispatches actions to the reducer.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from salesdesk_app.core.validation import ValidationError
from salesdesk_app.models.contract import Contract


@dataclass(frozen=True)
class ContractState:
    contracts: tuple[Contract, ...] = ()
    validation_errors: frozenset[ValidationError] = frozenset()
    needs_refresh: bool = False


@dataclass(frozen=True)
class ContractsLoaded:
    contracts: tuple[Contract, ...]


@dataclass(frozen=True)
class ContractCreated:
    contract: Contract
    draft_id: str = ""


@dataclass(frozen=True)
class ContractUpdated:
    contract: Contract


@dataclass(frozen=True)
class ContractDeleted:
    contract_id: str


@dataclass(frozen=True)
class ValidationChecked:
    """Replace all errors recorded for one contract with a fresh result."""

    contract_id: str
    errors: tuple[ValidationError, ...]


@dataclass(frozen=True)
class ValidationErrorCleared:
    contract_id: str
    field: str


@dataclass(frozen=True)
class ValidationErrorsReset:
    contract_id: str | None = None


@dataclass(frozen=True)
class SalespersonRenamed:
    salesperson_id: str
    display_name: str


@dataclass(frozen=True)
class RefreshRequested:
    pass


@dataclass(frozen=True)
class SessionCleared:
    pass


Action = (
    ContractsLoaded
    | ContractCreated
    | ContractUpdated
    | ContractDeleted
    | ValidationChecked
    | ValidationErrorCleared
    | ValidationErrorsReset
    | SalespersonRenamed
    | RefreshRequested
    | SessionCleared
)


def _without_errors_for(
    errors: frozenset[ValidationError], contract_id: str
) -> frozenset[ValidationError]:
    return frozenset(error for error in errors if error.contract_id != contract_id)


def reduce(state: ContractState, action: Action) -> ContractState:
    """Return the state that results from applying ``action`` to ``state``."""
    if isinstance(action, ContractsLoaded):
        return replace(state, contracts=tuple(action.contracts), needs_refresh=False)

    if isinstance(action, ContractCreated):
        errors = state.validation_errors
        if action.draft_id:
            errors = _without_errors_for(errors, action.draft_id)
        return replace(
            state,
            contracts=state.contracts + (action.contract,),
            validation_errors=errors,
        )

    if isinstance(action, ContractUpdated):
        updated = action.contract
        return replace(
            state,
            contracts=tuple(
                updated if contract.id == updated.id else contract
                for contract in state.contracts
            ),
        )

    if isinstance(action, ContractDeleted):
        return replace(
            state,
            contracts=tuple(
                contract for contract in state.contracts if contract.id != action.contract_id
            ),
            validation_errors=_without_errors_for(state.validation_errors, action.contract_id),
        )

    if isinstance(action, ValidationChecked):
        return replace(
            state,
            validation_errors=_without_errors_for(state.validation_errors, action.contract_id)
            | frozenset(action.errors),
        )

    if isinstance(action, ValidationErrorCleared):
        return replace(
            state,
            validation_errors=state.validation_errors
            - {ValidationError(action.contract_id, action.field)},
        )

    if isinstance(action, ValidationErrorsReset):
        if action.contract_id is None:
            return replace(state, validation_errors=frozenset())
        return replace(
            state,
            validation_errors=_without_errors_for(state.validation_errors, action.contract_id),
        )

    if isinstance(action, SalespersonRenamed):
        return replace(
            state,
            contracts=tuple(
                replace(contract, salesperson_name=action.display_name)
                if contract.salesperson_id == action.salesperson_id
                else contract
                for contract in state.contracts
            ),
        )

    if isinstance(action, RefreshRequested):
        return replace(state, needs_refresh=True)

    if isinstance(action, SessionCleared):
        return ContractState()

    raise TypeError(f"Unknown action: {action!r}")


class ContractStore:
    """Holds the latest :class:`ContractState`."""

    def __init__(self, state: ContractState | None = None):
        self._state = state or ContractState()

    @property
    def state(self) -> ContractState:
        return self._state

    def dispatch(self, action: Action) -> ContractState:
        self._state = reduce(self._state, action)
        return self._state

    def get(self, contract_id: str) -> Contract | None:
        for contract in self._state.contracts:
            if contract.id == contract_id:
                return contract
        return None

    def errors_for(self, contract_id: str) -> list[ValidationError]:
        return sorted(
            (error for error in self._state.validation_errors if error.contract_id == contract_id),
            key=lambda error: error.field,
        )

    def has_error(self, contract_id: str, field: str) -> bool:
        return ValidationError(contract_id, field) in self._state.validation_errors
