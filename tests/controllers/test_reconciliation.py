from __future__ import annotations

import logging
from dataclasses import replace

import expense_import.controllers.import_reducer as ir
from expense_import.controllers.reconciliation import reconcile, resolve_errored_rows
from expense_import.data_model import (
    ErroredExpense,
    ImportedExpense,
    ImportErrorRecord,
    ImportPhase,
    ImportResult,
    ImportState,
    WorkingRow,
)

# ---- Helpers -----------------------------------------------------------------


def _row(row_id: str, **overrides) -> WorkingRow:
    base = dict(id=row_id, date="2025-04-01", amount="10.00", description=f"Row {row_id}", category="General")
    base.update(overrides)
    return WorkingRow(**base)


def _submitting(*ids: str) -> ImportState:
    state = ir.reduce(ir.initial_state(), ir.LoadStarted())
    state = ir.reduce(state, ir.LoadSucceeded(tuple(_row(i) for i in ids)))
    return ir.reduce(state, ir.SubmitStarted())


def _result(*errored: tuple[int, str], imported: int = 0) -> ImportResult:
    return ImportResult(
        imported=[
            ImportedExpense(id=str(n), date="2025-04-01", amount="10.00", description="x")
            for n in range(imported)
        ],
        errored=[ErroredExpense(row=r, message=m) for r, m in errored],
    )


# ---- resolve_errored_rows ----------------------------------------------------


def test_positions_are_one_based_against_the_submitted_snapshot():
    records = resolve_errored_rows(_result((1, "a"), (3, "c")), ("x", "y", "z"))
    assert records == [ImportErrorRecord(1, "a", "x"), ImportErrorRecord(3, "c", "z")]


def test_out_of_range_position_is_kept_without_row_id(caplog):
    with caplog.at_level(logging.WARNING):
        records = resolve_errored_rows(_result((4, "?")), ("x", "y"))
    assert records == [ImportErrorRecord(4, "?", None)]
    assert "only 2 rows were submitted" in caplog.text


# ---- reconcile ---------------------------------------------------------------


def test_middle_row_error_keeps_only_that_row():
    """A 3-row batch with row 2 errored keeps exactly the second row."""
    state = _submitting("a", "b", "c")
    out = reconcile(state, _result((2, "Invalid date"), imported=2), state.order)

    assert out.order == ("b",)
    assert set(out.rows) == {"b"}
    assert out.import_errors == (ImportErrorRecord(2, "Invalid date", "b"),)
    assert out.phase is ImportPhase.PARTIAL_FAILURE
    assert not out.saving
    assert len(out.imported) == 2


def test_no_errors_purges_every_row_and_is_done():
    state = _submitting("a", "b", "c")
    out = reconcile(state, _result(imported=3), state.order)
    assert out.rows == {} and out.order == () and out.errors == {}
    assert out.import_errors == ()
    assert out.phase is ImportPhase.DONE
    assert not out.saving


def test_everything_errored_keeps_every_row():
    state = _submitting("a", "b")
    out = reconcile(state, _result((1, "dup"), (2, "dup")), state.order)
    assert out.order == ("a", "b")
    assert [r.row_id for r in out.import_errors] == ["a", "b"]
    assert out.phase is ImportPhase.PARTIAL_FAILURE


def test_rows_outside_the_snapshot_are_untouched():
    state = _submitting("a", "b")
    out = reconcile(state, _result(imported=1), ("a",))
    assert out.order == ("b",)
    assert out.phase is ImportPhase.DONE


def test_failed_rows_keep_their_order_and_field_errors():
    state = _submitting("a", "b", "c", "d")
    # simulate a stale local error on a row that the server also rejected
    state = replace(state, errors={"d": ()})
    out = reconcile(state, _result((4, "x"), (2, "y")), state.order)
    assert out.order == ("b", "d")
    assert set(out.errors) <= set(out.rows)
