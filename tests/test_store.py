"""Tests for contract state transitions."""

from __future__ import annotations

import pytest

from salesdesk_app.core.validation import ValidationError
from salesdesk_app.models.contract import Contract
from salesdesk_app.services.store import (
    ContractCreated,
    ContractDeleted,
    ContractsLoaded,
    ContractState,
    ContractStore,
    ContractUpdated,
    RefreshRequested,
    SalespersonRenamed,
    SessionCleared,
    ValidationChecked,
    ValidationErrorCleared,
    ValidationErrorsReset,
    reduce,
)


def loaded_state() -> ContractState:
    return reduce(
        ContractState(needs_refresh=True),
        ContractsLoaded(
            (
                Contract(id="a", salesperson_id="u1", salesperson_name="An"),
                Contract(id="b", salesperson_id="u2", salesperson_name="Bình"),
            )
        ),
    )


def test_load_replaces_contracts_and_clears_refresh_flag() -> None:
    state = loaded_state()

    assert [contract.id for contract in state.contracts] == ["a", "b"]
    assert state.needs_refresh is False


def test_reduce_does_not_mutate_input_state() -> None:
    state = loaded_state()

    reduce(state, ContractDeleted("a"))

    assert len(state.contracts) == 2


def test_created_contract_drops_errors_of_its_draft() -> None:
    state = reduce(
        loaded_state(),
        ValidationChecked("draft-1", (ValidationError("draft-1", "vehicle_vin"),)),
    )

    state = reduce(state, ContractCreated(Contract(id="c"), draft_id="draft-1"))

    assert state.contracts[-1].id == "c"
    assert state.validation_errors == frozenset()


def test_update_replaces_matching_contract_only() -> None:
    state = reduce(loaded_state(), ContractUpdated(Contract(id="b", customer_name="Chi")))

    assert state.contracts[0].customer_name == ""
    assert state.contracts[1].customer_name == "Chi"


def test_validation_checked_replaces_errors_for_one_contract() -> None:
    state = reduce(
        loaded_state(),
        ValidationChecked(
            "a",
            (ValidationError("a", "vehicle_vin"), ValidationError("a", "contract_number")),
        ),
    )
    state = reduce(state, ValidationChecked("b", (ValidationError("b", "vehicle_vin"),)))

    state = reduce(state, ValidationChecked("a", (ValidationError("a", "contract_number"),)))

    assert state.validation_errors == {
        ValidationError("a", "contract_number"),
        ValidationError("b", "vehicle_vin"),
    }


def test_error_cleared_per_field() -> None:
    state = reduce(
        loaded_state(),
        ValidationChecked(
            "a",
            (ValidationError("a", "vehicle_vin"), ValidationError("a", "contract_number")),
        ),
    )

    state = reduce(state, ValidationErrorCleared("a", "vehicle_vin"))

    assert state.validation_errors == {ValidationError("a", "contract_number")}


def test_errors_reset_for_one_contract_or_all() -> None:
    state = reduce(
        loaded_state(),
        ValidationChecked("a", (ValidationError("a", "vehicle_vin"),)),
    )
    state = reduce(state, ValidationChecked("b", (ValidationError("b", "vehicle_vin"),)))

    only_b = reduce(state, ValidationErrorsReset("a"))
    cleared = reduce(state, ValidationErrorsReset())

    assert only_b.validation_errors == {ValidationError("b", "vehicle_vin")}
    assert cleared.validation_errors == frozenset()


def test_delete_drops_contract_and_its_errors() -> None:
    state = reduce(
        loaded_state(),
        ValidationChecked("a", (ValidationError("a", "vehicle_vin"),)),
    )

    state = reduce(state, ContractDeleted("a"))

    assert [contract.id for contract in state.contracts] == ["b"]
    assert state.validation_errors == frozenset()


def test_salesperson_rename_touches_owned_contracts() -> None:
    state = reduce(loaded_state(), SalespersonRenamed("u1", "An Nguyễn"))

    assert state.contracts[0].salesperson_name == "An Nguyễn"
    assert state.contracts[1].salesperson_name == "Bình"


def test_refresh_request_and_session_clear() -> None:
    state = reduce(loaded_state(), RefreshRequested())
    assert state.needs_refresh is True

    assert reduce(state, SessionCleared()) == ContractState()


def test_unknown_action_is_rejected() -> None:
    with pytest.raises(TypeError):
        reduce(ContractState(), object())


def test_store_queries() -> None:
    store = ContractStore(loaded_state())
    store.dispatch(
        ValidationChecked(
            "a",
            (ValidationError("a", "vehicle_vin"), ValidationError("a", "contract_number")),
        )
    )

    assert store.get("b").salesperson_name == "Bình"
    assert store.get("missing") is None
    assert [error.field for error in store.errors_for("a")] == ["contract_number", "vehicle_vin"]
    assert store.has_error("a", "vehicle_vin")
    assert not store.has_error("b", "vehicle_vin")
