"""
Schemas for the batch endpoint's JSON envelope.

Successful calls answer ``{"error": false, "data": {...}, "messages": [...]}``;
refused calls answer ``{"error": true, "messages": [...]}``. ``data`` carries
the rows the server persisted and the 1-based positions it rejected.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class ImportedExpense(BaseModel):
    """A row the server persisted; ``id`` is the server-assigned identifier."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    date: str
    amount: Decimal = Field(ge=Decimal("0.01"))
    description: str


class ErroredExpense(BaseModel):
    """A row the server refused, by 1-based position in the submitted batch."""

    model_config = ConfigDict(frozen=True)

    row: int = Field(ge=1)
    message: str


class ImportResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    imported: List[ImportedExpense] = Field(default_factory=list)
    errored: List[ErroredExpense] = Field(default_factory=list)


class ImportResponseOk(BaseModel):
    error: Literal[False]
    data: ImportResult
    messages: Optional[List[str]] = None


class ImportResponseFailed(BaseModel):
    error: Literal[True]
    messages: List[str]


ImportResponse = Union[ImportResponseOk, ImportResponseFailed]

_RESPONSE_ADAPTER: TypeAdapter[ImportResponse] = TypeAdapter(ImportResponse)


def parse_import_response(payload: Any) -> ImportResponse:
    """Validate a decoded JSON body; raises pydantic.ValidationError on mismatch."""
    return _RESPONSE_ADAPTER.validate_python(payload)
