# expense_import/controllers/reconciliation.py
"""
Merge a batch endpoint response back into the import state.

The server reports failures by 1-based position in the submitted batch and
never confirms individual successes: every submitted row that is *not* named
in ``errored`` counts as imported and leaves the working set.

Positions are resolved against the order snapshot taken when the batch was
sent. The session refuses edits while a submission is in flight, so that
snapshot is still the order the server saw.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Sequence

from expense_import.data_model import (
    ImportErrorRecord,
    ImportPhase,
    ImportResult,
    ImportState,
)

log = logging.getLogger(__name__)


def resolve_errored_rows(
    result: ImportResult, submitted_order: Sequence[str]
) -> List[ImportErrorRecord]:
    """Map each errored position to the row id that occupied it at submission time."""
    records: List[ImportErrorRecord] = []
    for err in result.errored:
        ix = err.row - 1
        if 0 <= ix < len(submitted_order):
            records.append(ImportErrorRecord(err.row, err.message, submitted_order[ix]))
        else:
            log.warning(
                "Server reported row %d but only %d rows were submitted: %s",
                err.row,
                len(submitted_order),
                err.message,
            )
            records.append(ImportErrorRecord(err.row, err.message))
    return records


def reconcile(
    state: ImportState, result: ImportResult, submitted_order: Sequence[str]
) -> ImportState:
    """
    Apply a structurally valid server response.

    • ``import_errors`` becomes the errored list, with row ids resolved.
    • Submitted rows not named as errored are removed from rows, order and errors.
    • Rows that were never part of the submission are left alone.
    • ``saving`` is cleared; the phase becomes DONE when nothing errored,
      PARTIAL_FAILURE otherwise.
    """
    records = resolve_errored_rows(result, submitted_order)
    failed_ids = {r.row_id for r in records if r.row_id is not None}
    imported_ids = {i for i in submitted_order if i not in failed_ids}

    rows = {i: r for i, r in state.rows.items() if i not in imported_ids}
    order = tuple(i for i in state.order if i not in imported_ids)
    errors = {i: e for i, e in state.errors.items() if i not in imported_ids}

    log.info(
        "Reconciled batch: %d submitted, %d imported, %d errored",
        len(submitted_order),
        len(imported_ids),
        len(records),
    )
    for rec in records:
        log.debug("Row %d (%s) failed: %s", rec.row, rec.row_id, rec.message)

    return replace(
        state,
        phase=ImportPhase.PARTIAL_FAILURE if records else ImportPhase.DONE,
        saving=False,
        rows=rows,
        order=order,
        errors=errors,
        import_errors=tuple(records),
        imported=tuple(result.imported),
        submit_error=None,
    )
