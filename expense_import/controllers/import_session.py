# expense_import/controllers/import_session.py
"""
ImportSession — the command surface of one bulk import.

Key points:
• Owns a single immutable ImportState; every change goes through
  ``import_reducer.reduce`` and is pushed to subscribed listeners.
• File loading and batch submission are awaited on the caller's event loop.
  Each call is tagged through RequestTracker so a result that arrives after
  the user started over (new file, closed dialog) is dropped silently.
• Submission is refused while saving, while any row has validation errors,
  and outside REVIEWING / PARTIAL_FAILURE. Row edits are refused while a
  submission is in flight, which keeps the positional reconciliation valid.

Public surface:
    class ImportSession:
        async def start_load(self, source) -> bool
        def edit_row(self, row_id, field, value) -> None
        def delete_row(self, row_id) -> None
        def attach_receipt(self, row_id, receipt) -> None
        def detach_receipt(self, row_id) -> None
        async def submit(self) -> bool
        def clear_import_errors(self) -> None
        def close(self) -> None

        @property def state(self) -> ImportState
        def ordered_rows(self) -> list[WorkingRow]
        def row_errors(self, row_id) -> tuple[FieldError, ...]
        def error_for(self, row_id, field) -> str
        def subscribe(self, listener) -> Callable[[], None]
"""

from __future__ import annotations

import asyncio
import dataclasses
import functools
import logging
from typing import (
    Any,
    Awaitable,
    Callable,
    List,
    Optional,
    Protocol,
    Sequence,
    Tuple,
)

from expense_import.data_model import (
    FieldError,
    ImportPhase,
    ImportResult,
    ImportState,
    RawRow,
    Receipt,
    WorkingRow,
)
from expense_import.errors import TransportError
from expense_import.utilities import CategoryCache, ImportSettings
from expense_import.validators import error_for, validate_file

from . import import_reducer as ir
from .batch_client import GENERIC_FAILURE
from .file_loader import parse_file
from .request_tracker import RequestToken, RequestTracker

log = logging.getLogger(__name__)

FileParser = Callable[[Any], Awaitable[Sequence[RawRow]]]
Listener = Callable[[ImportState], None]

LOAD_CANCELLED = "Loading was cancelled. Please choose the file again."
SUBMIT_CANCELLED = "Import was cancelled. Please try again."


class BatchSubmitter(Protocol):
    """Anything that can send an ordered batch and report per-row outcomes."""

    async def submit(self, rows: Sequence[WorkingRow]) -> ImportResult: ...


class ImportSession:
    """Working set, validation and server reconciliation for one bulk import."""

    def __init__(
        self,
        submitter: BatchSubmitter,
        *,
        parser: Optional[FileParser] = None,
        settings: Optional[ImportSettings] = None,
        category_cache: Optional[CategoryCache] = None,
    ) -> None:
        """
        Args:
            submitter: Sends the batch (normally a BatchImportClient).
            parser: Async callable turning a file source into RawRows.
                Defaults to the pandas-backed ``file_loader.parse_file``.
            settings: Upload limits; also passed to the default parser.
            category_cache: Category picker cache, cleared after a full import.
        """
        self._submitter = submitter
        self._settings = settings or ImportSettings()
        self._parser: FileParser = parser or functools.partial(
            parse_file, settings=self._settings
        )
        self.category_cache = category_cache or CategoryCache()

        self._state: ImportState = ir.initial_state()
        self._requests = RequestTracker()
        self._listeners: List[Listener] = []

    # --- state access ---

    @property
    def state(self) -> ImportState:
        return self._state

    def ordered_rows(self) -> List[WorkingRow]:
        return self._state.ordered_rows()

    def row_errors(self, row_id: str) -> Tuple[FieldError, ...]:
        return self._state.row_errors(row_id)

    def error_for(self, row_id: str, field: str) -> str:
        return error_for(field, self._state.row_errors(row_id))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with the new state after every change; returns an unsubscribe."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _dispatch(self, action: ir.ImportAction) -> None:
        new_state = ir.reduce(self._state, action)
        if new_state is self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)

    # --- loading ---

    async def start_load(self, source: Any) -> bool:
        """
        Parse ``source`` into a fresh working set.

        Anything from a previous import is discarded up front. Returns True when
        the rows were applied; False when parsing failed (see ``state.load_error``)
        or when the load was superseded before it finished.
        """
        token = self._requests.begin("load")
        self._dispatch(ir.LoadStarted())

        task = asyncio.ensure_future(self._parser(source))
        token.bind(task)
        try:
            raw_rows = await task
        except asyncio.CancelledError:
            if token.cancelled:
                log.debug("Discarded cancelled load of %s", source)
                return False
            # Caller cancelled start_load itself
            self._load_failed(token, source, LOAD_CANCELLED)
            raise
        except ValueError as e:
            # FileLoadError and parser value errors alike
            return self._load_failed(token, source, str(e))
        except OSError as e:
            return self._load_failed(token, source, f"Could not read file: {e}")
        except Exception as e:
            log.exception("Parser failed on %s", source)
            return self._load_failed(token, source, f"Could not read file: {e}")

        if not self._requests.is_current(token):
            log.debug("Discarded stale load of %s (%d rows)", source, len(raw_rows))
            return False
        self._requests.finish(token)

        rows = tuple(self._ingest(raw) for raw in raw_rows)
        self._dispatch(ir.LoadSucceeded(rows))
        log.info(
            "Loaded %d rows from %s (%d invalid)",
            len(rows),
            source,
            self._state.invalid_row_count,
        )
        return True

    def _load_failed(self, token: RequestToken, source: Any, message: str) -> bool:
        if not self._requests.is_current(token):
            log.debug("Discarded stale load failure for %s: %s", source, message)
            return False
        self._requests.finish(token)
        log.error("Failed to load %s: %s", source, message)
        self._dispatch(ir.LoadFailed(message))
        return False

    def _ingest(self, raw: RawRow) -> WorkingRow:
        row = WorkingRow.from_raw(raw)
        if raw.receipt is not None:
            receipt_error = self._check_receipt(raw.receipt)
            if receipt_error:
                row = dataclasses.replace(row, receipt=None, receipt_error=receipt_error)
        return row

    # --- row edits ---

    def _editable(self, command: str) -> bool:
        if self._state.phase.is_editable:
            return True
        log.warning("%s ignored while %s", command, self._state.phase.value)
        return False

    def edit_row(self, row_id: str, field: str, value: Any) -> None:
        """Replace one field of one row and re-validate that row only."""
        if not self._editable("edit_row"):
            return
        self._dispatch(ir.EditRow(row_id, field, value))
        log.debug("Edited %s.%s (%d errors)", row_id, field, len(self.row_errors(row_id)))

    def delete_row(self, row_id: str) -> None:
        if not self._editable("delete_row"):
            return
        self._dispatch(ir.DeleteRow(row_id))
        log.debug("Deleted row %s (%d remain)", row_id, len(self._state.order))

    def _check_receipt(self, receipt: Receipt) -> Optional[str]:
        return validate_file(
            receipt,
            self._settings.receipt_mime_types,
            self._settings.max_receipt_size,
        )

    def attach_receipt(self, row_id: str, receipt: Receipt) -> None:
        """Attach a receipt to one row; a rejected file is recorded as that row's receipt_error."""
        if not self._editable("attach_receipt"):
            return
        receipt_error = self._check_receipt(receipt)
        if receipt_error:
            log.info("Receipt %s rejected for row %s: %s", receipt.filename, row_id, receipt_error)
            self._dispatch(ir.SetReceipt(row_id, None, receipt_error))
        else:
            self._dispatch(ir.SetReceipt(row_id, receipt, None))

    def detach_receipt(self, row_id: str) -> None:
        if not self._editable("detach_receipt"):
            return
        self._dispatch(ir.SetReceipt(row_id, None, None))

    # --- submission ---

    async def submit(self) -> bool:
        """
        Send the ordered batch and reconcile the response.

        Returns True when a server response was reconciled (DONE or
        PARTIAL_FAILURE). Returns False without any network call when the
        batch is not submittable, and False after a transport failure, in
        which case rows, order and errors are exactly as before.
        """
        state = self._state
        if state.saving:
            log.warning("submit ignored: a submission is already in flight")
            return False
        if not state.phase.is_editable:
            log.warning("submit ignored while %s", state.phase.value)
            return False
        if not state.order:
            log.warning("submit ignored: no rows to import")
            return False
        if state.has_errors:
            log.warning("submit blocked: %d invalid rows", state.invalid_row_count)
            return False

        submitted_order = state.order
        rows = state.ordered_rows()

        token = self._requests.begin("submit")
        self._dispatch(ir.SubmitStarted())

        task = asyncio.ensure_future(self._submitter.submit(rows))
        token.bind(task)
        try:
            result = await task
        except asyncio.CancelledError:
            if token.cancelled:
                log.debug("Discarded cancelled submission of %d rows", len(rows))
                return False
            # Caller cancelled submit itself; the batch stays for a retry
            self._submit_failed(token, SUBMIT_CANCELLED)
            raise
        except TransportError as e:
            log.error("Submission of %d rows failed (%d): %s", len(rows), e.status_code, e)
            return self._submit_failed(token, e.message)
        except Exception:
            log.exception("Submitter failed on a batch of %d rows", len(rows))
            return self._submit_failed(token, GENERIC_FAILURE)

        if not self._requests.is_current(token):
            log.debug("Discarded stale submit response for %d rows", len(rows))
            return False
        self._requests.finish(token)

        self._dispatch(ir.SubmitResponded())
        self._dispatch(ir.Reconciled(result, submitted_order))

        if self._state.phase is ImportPhase.DONE:
            log.info("Imported all %d rows", len(submitted_order))
            self.category_cache.clear()
        else:
            log.info(
                "Partial import: %d of %d rows need attention",
                len(self._state.import_errors),
                len(submitted_order),
            )
        return True

    def _submit_failed(self, token: RequestToken, message: str) -> bool:
        if not self._requests.is_current(token):
            log.debug("Discarded stale submit failure: %s", message)
            return False
        self._requests.finish(token)
        self._dispatch(ir.SubmitFailed(message))
        return False

    def clear_import_errors(self) -> None:
        self._dispatch(ir.ClearImportErrors())

    def close(self) -> None:
        """Dismiss the dialog: cancel pending work and return to IDLE."""
        self._requests.invalidate()
        self._dispatch(ir.CloseDialog())
