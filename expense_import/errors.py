# expense_import/errors.py
from __future__ import annotations


class ImportEngineError(Exception):
    """Base class for errors raised by the bulk import engine."""


class FileLoadError(ImportEngineError, ValueError):
    """The import file could not be read into rows (missing, too large, bad columns)."""


class TransportError(ImportEngineError):
    """
    The batch endpoint could not be reached or refused the request.

    Carries the HTTP status code that caused it (500 when there was no response)
    and any raw body text for diagnostics.
    """

    def __init__(self, message: str, status_code: int = 500, data: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.data = data


class ResponseFormatError(TransportError):
    """The endpoint answered, but the body is not a valid import response."""
