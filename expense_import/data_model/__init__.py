# expense_import/data_model/__init__.py
from .api_response import (
    ErroredExpense,
    ImportedExpense,
    ImportResponse,
    ImportResponseFailed,
    ImportResponseOk,
    ImportResult,
    parse_import_response,
)
from .field_error import FieldError, ImportErrorRecord
from .import_phase import ImportPhase
from .import_state import ImportState
from .raw_row import RawRow
from .receipt import Receipt
from .working_row import CLIENT_ONLY_FIELDS, EDITABLE_FIELDS, WorkingRow

__all__ = [
    "RawRow", "Receipt", "WorkingRow", "EDITABLE_FIELDS", "CLIENT_ONLY_FIELDS",
    "FieldError", "ImportErrorRecord", "ImportPhase", "ImportState",
    "ImportedExpense", "ErroredExpense", "ImportResult", "ImportResponse",
    "ImportResponseOk", "ImportResponseFailed", "parse_import_response"]
