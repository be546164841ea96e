from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .api_response import ImportedExpense
from .field_error import FieldError, ImportErrorRecord
from .import_phase import ImportPhase
from .working_row import WorkingRow


@dataclass(frozen=True)
class ImportState:
    """
    Everything the rendering layer needs to draw one bulk import.

    Invariants kept by every reducer transition:
      • ``order`` is a permutation of ``rows`` keys with no duplicates.
      • every key of ``errors`` is also a key of ``rows``.
      • ``import_errors`` is only non-empty after a submission response and
        until it is cleared or a later submission succeeds in full.
    """

    phase: ImportPhase = ImportPhase.IDLE
    loading: bool = False
    saving: bool = False
    rows: Dict[str, WorkingRow] = field(default_factory=dict)
    order: Tuple[str, ...] = ()
    errors: Dict[str, Tuple[FieldError, ...]] = field(default_factory=dict)
    show_import_dialog: bool = False
    import_errors: Tuple[ImportErrorRecord, ...] = ()
    imported: Tuple[ImportedExpense, ...] = ()
    load_error: Optional[str] = None
    submit_error: Optional[str] = None

    # --- read helpers for the rendering layer ---

    def ordered_rows(self) -> List[WorkingRow]:
        return [self.rows[i] for i in self.order]

    def row_errors(self, row_id: str) -> Tuple[FieldError, ...]:
        return self.errors.get(row_id, ())

    @property
    def has_errors(self) -> bool:
        return any(self.errors.values())

    @property
    def invalid_row_count(self) -> int:
        return sum(1 for errs in self.errors.values() if errs)

    @property
    def can_submit(self) -> bool:
        return (
            self.phase.is_editable
            and not self.saving
            and bool(self.order)
            and not self.has_errors
        )

    def import_error_for(self, row_id: str) -> Optional[ImportErrorRecord]:
        for rec in self.import_errors:
            if rec.row_id == row_id:
                return rec
        return None
