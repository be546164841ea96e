# expense_import/controllers/import_reducer.py
"""
Pure state transitions for a bulk import.

``reduce(state, action)`` takes an immutable ImportState and one of the action
dataclasses below and returns the next ImportState. It never performs I/O; the
ImportSession decides *when* to dispatch, the reducer decides *what* changes.

Row Store, Order Index and Error Index live side by side in the state
(``rows``, ``order``, ``errors``). Editing a row replaces its entry in ``rows``
and ``errors`` but never touches ``order``, so display position and row
content stay independent.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from expense_import.data_model import (
    FieldError,
    ImportPhase,
    ImportResult,
    ImportState,
    Receipt,
    WorkingRow,
)
from expense_import.validators import validate_row, validate_rows

from .reconciliation import reconcile

# ---------- actions ----------


@dataclass(frozen=True)
class LoadStarted:
    pass


@dataclass(frozen=True)
class LoadSucceeded:
    rows: Tuple[WorkingRow, ...]


@dataclass(frozen=True)
class LoadFailed:
    message: str


@dataclass(frozen=True)
class SetRows:
    rows: Tuple[WorkingRow, ...]


@dataclass(frozen=True)
class SetOrder:
    ids: Tuple[str, ...]


@dataclass(frozen=True)
class SetErrors:
    errors: Mapping[str, Sequence[FieldError]]


@dataclass(frozen=True)
class EditRow:
    row_id: str
    field: str
    value: Any


@dataclass(frozen=True)
class DeleteRow:
    row_id: str


@dataclass(frozen=True)
class SetReceipt:
    row_id: str
    receipt: Optional[Receipt]
    receipt_error: Optional[str]


@dataclass(frozen=True)
class SubmitStarted:
    pass


@dataclass(frozen=True)
class SubmitFailed:
    message: str


@dataclass(frozen=True)
class SubmitResponded:
    pass


@dataclass(frozen=True)
class Reconciled:
    result: ImportResult
    submitted_order: Tuple[str, ...]


@dataclass(frozen=True)
class ClearImportErrors:
    pass


@dataclass(frozen=True)
class CloseDialog:
    pass


ImportAction = Union[
    LoadStarted,
    LoadSucceeded,
    LoadFailed,
    SetRows,
    SetOrder,
    SetErrors,
    EditRow,
    DeleteRow,
    SetReceipt,
    SubmitStarted,
    SubmitFailed,
    SubmitResponded,
    Reconciled,
    ClearImportErrors,
    CloseDialog,
]

# Actions that change rows; refused while a submission is in flight
ROW_EDIT_ACTIONS = (EditRow, DeleteRow, SetReceipt)


# ---------- index helpers ----------


def _set_rows(state: ImportState, rows: Iterable[WorkingRow]) -> ImportState:
    by_id: Dict[str, WorkingRow] = {}
    for row in rows:
        if row.id in by_id:
            raise ValueError(f"Duplicate row id: {row.id}")
        by_id[row.id] = row
    # Order follows membership; previously ordered ids keep their slots
    kept = tuple(i for i in state.order if i in by_id)
    kept_ids = set(kept)
    added = tuple(i for i in by_id if i not in kept_ids)
    return replace(
        state,
        rows=by_id,
        order=kept + added,
        errors=validate_rows(by_id.values()),
    )


def _set_order(state: ImportState, ids: Sequence[str]) -> ImportState:
    ids = tuple(ids)
    if len(set(ids)) != len(ids):
        raise ValueError("Order contains duplicate row ids")
    unknown = [i for i in ids if i not in state.rows]
    if unknown:
        raise ValueError(f"Order references unknown row ids: {unknown}")
    # Rows dropped from the order are no longer visible; purge them too
    visible = set(ids)
    return replace(
        state,
        order=ids,
        rows={i: r for i, r in state.rows.items() if i in visible},
        errors={i: e for i, e in state.errors.items() if i in visible},
    )


def _set_errors(
    state: ImportState, errors: Mapping[str, Sequence[FieldError]]
) -> ImportState:
    return replace(
        state,
        errors={i: tuple(e) for i, e in errors.items() if i in state.rows and e},
    )


def _require_row(state: ImportState, row_id: str) -> WorkingRow:
    try:
        return state.rows[row_id]
    except KeyError:
        raise KeyError(f"Unknown row id: {row_id}") from None


def _back_to_reviewing(phase: ImportPhase) -> ImportPhase:
    return ImportPhase.REVIEWING if phase is ImportPhase.PARTIAL_FAILURE else phase


# ---------- reducer ----------


def initial_state() -> ImportState:
    return ImportState()


def reduce(state: ImportState, action: ImportAction) -> ImportState:
    """Return the state that results from applying ``action`` to ``state``."""
    if isinstance(action, ROW_EDIT_ACTIONS) and not state.phase.is_editable:
        return state

    if isinstance(action, LoadStarted):
        # A fresh load discards everything from the previous file
        return replace(
            initial_state(),
            phase=ImportPhase.LOADING,
            loading=True,
            show_import_dialog=True,
        )

    if isinstance(action, LoadSucceeded):
        loaded = _set_rows(replace(state, order=()), action.rows)
        return replace(
            loaded,
            phase=ImportPhase.REVIEWING,
            loading=False,
            load_error=None,
        )

    if isinstance(action, LoadFailed):
        return replace(initial_state(), load_error=action.message)

    if isinstance(action, SetRows):
        return _set_rows(state, action.rows)

    if isinstance(action, SetOrder):
        return _set_order(state, action.ids)

    if isinstance(action, SetErrors):
        return _set_errors(state, action.errors)

    if isinstance(action, EditRow):
        row = _require_row(state, action.row_id).with_field(action.field, action.value)
        # Only this row is re-validated
        errors = dict(state.errors)
        row_errors = validate_row(row)
        if row_errors:
            errors[row.id] = tuple(row_errors)
        else:
            errors.pop(row.id, None)
        return replace(
            state,
            phase=_back_to_reviewing(state.phase),
            rows={**state.rows, row.id: row},
            errors=errors,
        )

    if isinstance(action, DeleteRow):
        _require_row(state, action.row_id)
        rows = dict(state.rows)
        rows.pop(action.row_id)
        errors = dict(state.errors)
        errors.pop(action.row_id, None)
        return replace(
            state,
            phase=_back_to_reviewing(state.phase),
            rows=rows,
            order=tuple(i for i in state.order if i != action.row_id),
            errors=errors,
        )

    if isinstance(action, SetReceipt):
        row = replace(
            _require_row(state, action.row_id),
            receipt=action.receipt,
            receipt_error=action.receipt_error,
        )
        # Attachment problems never enter the Error Index
        return replace(
            state,
            phase=_back_to_reviewing(state.phase),
            rows={**state.rows, row.id: row},
        )

    if isinstance(action, SubmitStarted):
        return replace(
            state,
            phase=ImportPhase.SUBMITTING,
            saving=True,
            import_errors=(),
            imported=(),
            submit_error=None,
        )

    if isinstance(action, SubmitFailed):
        return replace(
            state,
            phase=ImportPhase.REVIEWING,
            saving=False,
            submit_error=action.message,
        )

    if isinstance(action, SubmitResponded):
        return replace(state, phase=ImportPhase.RECONCILING)

    if isinstance(action, Reconciled):
        return reconcile(state, action.result, action.submitted_order)

    if isinstance(action, ClearImportErrors):
        return replace(
            state,
            phase=_back_to_reviewing(state.phase),
            import_errors=(),
        )

    if isinstance(action, CloseDialog):
        return initial_state()

    raise TypeError(f"Unknown import action: {type(action).__name__}")
