from .validate_file import validate_file
from .validate_money import validate_money
from .validate_row import error_for, validate_row, validate_rows

__all__ = ["validate_row", "validate_rows", "error_for", "validate_money", "validate_file"]
