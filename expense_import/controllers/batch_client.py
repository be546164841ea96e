# expense_import/controllers/batch_client.py
"""
Client for the bulk expense endpoint.

The batch is sent as multipart form data: an ``expenses`` field holding the
JSON list of row payloads (client-only fields removed) and one file part per
attached receipt, keyed ``receipt_<row id>``.

Outcomes are kept strictly apart:
  • a parsed ``ImportResult`` (possibly with every row errored) is returned;
  • anything else, whether no response, a non-2xx status, an ``error: true``
    envelope or a body that fails schema validation, raises TransportError,
    so the caller can leave its batch untouched.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import httpx
from pydantic import ValidationError

from expense_import.data_model import (
    ImportResponseFailed,
    ImportResult,
    WorkingRow,
    parse_import_response,
)
from expense_import.errors import ResponseFormatError, TransportError
from expense_import.utilities import ImportSettings

log = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]

GENERIC_FAILURE = "Server Error. Please try again."


class BatchImportClient:
    """Posts a batch of WorkingRows to the bulk endpoint using the caller's auth token."""

    def __init__(
        self,
        token_provider: TokenProvider,
        settings: Optional[ImportSettings] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._token_provider = token_provider
        self._settings = settings or ImportSettings()
        # Injected clients are borrowed, never closed here
        self._client = client

    @property
    def url(self) -> str:
        return self._settings.bulk_url

    def build_form(
        self, rows: Sequence[WorkingRow]
    ) -> Tuple[Dict[str, str], List[Tuple[str, Tuple[str, bytes, str]]]]:
        data = {"expenses": json.dumps([row.to_payload() for row in rows])}
        files = [
            (f"receipt_{row.id}", (row.receipt.filename, row.receipt.data, row.receipt.content_type))
            for row in rows
            if row.receipt is not None
        ]
        return data, files

    async def submit(self, rows: Sequence[WorkingRow]) -> ImportResult:
        """
        Send ``rows`` in order and return the server's per-row outcome.

        Raises
        ------
        TransportError
            No auth token, network failure, timeout, non-2xx status, or an
            ``error: true`` envelope.
        ResponseFormatError
            The body is not JSON or does not match the import response schema.
        """
        token = self._token_provider()
        if not token:
            raise TransportError("Not signed in. Please log in and try again.", 401)

        data, files = self.build_form(rows)
        headers = {"Accept": "application/json", "x-auth-token": token}

        log.info("Submitting %d rows to %s", len(rows), self.url)
        try:
            if self._client is not None:
                response = await self._client.post(
                    self.url, data=data, files=files or None, headers=headers
                )
            else:
                async with httpx.AsyncClient(timeout=self._settings.timeout) as client:
                    response = await client.post(
                        self.url, data=data, files=files or None, headers=headers
                    )
        except httpx.TimeoutException as e:
            log.error("Bulk import timed out: %s", e)
            raise TransportError("The server took too long to respond. Please try again.") from e
        except httpx.RequestError as e:
            log.error("Bulk import request error: %s", e)
            raise TransportError(GENERIC_FAILURE) from e

        return self._parse(response)

    def _parse(self, response: httpx.Response) -> ImportResult:
        body: Any = None
        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success:
            message = _first_message(body) or GENERIC_FAILURE
            log.error("Bulk import returned %d: %s", response.status_code, message)
            raise TransportError(message, response.status_code, response.text)

        if body is None:
            raise ResponseFormatError(GENERIC_FAILURE, response.status_code, response.text)

        try:
            parsed = parse_import_response(body)
        except ValidationError as e:
            log.error("Bulk import response failed validation: %s", e)
            raise ResponseFormatError(GENERIC_FAILURE, response.status_code, response.text) from e

        if isinstance(parsed, ImportResponseFailed):
            message = parsed.messages[0] if parsed.messages else GENERIC_FAILURE
            log.error("Bulk import refused: %s", message)
            raise TransportError(message, response.status_code, response.text)

        return parsed.data


def _first_message(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        messages = body.get("messages")
        if isinstance(messages, list) and messages and isinstance(messages[0], str):
            return messages[0]
    return None
