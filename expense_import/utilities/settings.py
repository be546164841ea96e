# expense_import/utilities/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

_ENV_PREFIX = "EXPENSE_IMPORT_"


@dataclass(frozen=True)
class ImportSettings:
    """
    Endpoint and upload limits used by the import session and its collaborators.

    Defaults match the hosted spending tracker; override per deployment with
    ``ImportSettings.from_env()`` or by constructing directly in tests.
    """

    base_url: str = "http://localhost:8080"
    bulk_path: str = "/spendingtracker/api/v1/expenses/bulk"
    timeout: float = 30.0

    # Receipts attached to individual rows
    receipt_mime_types: Tuple[str, ...] = (
        "image/png",
        "image/jpeg",
        "image/webp",
        "image/heic",
    )
    max_receipt_size: int = 10 * 1024 * 1024

    # The import file itself
    import_extensions: Tuple[str, ...] = (".csv", ".xlsx")
    max_import_file_size: int = 50 * 1024 * 1024

    @property
    def bulk_url(self) -> str:
        return self.base_url.rstrip("/") + "/" + self.bulk_path.lstrip("/")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ImportSettings":
        """
        Build settings from ``EXPENSE_IMPORT_*`` variables, falling back to defaults.

        Recognised: BASE_URL, BULK_PATH, TIMEOUT, MAX_RECEIPT_SIZE,
        MAX_IMPORT_FILE_SIZE, RECEIPT_MIME_TYPES (comma separated).
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def _get(name: str) -> Optional[str]:
            value = env.get(_ENV_PREFIX + name)
            return value.strip() if value and value.strip() else None

        mime = _get("RECEIPT_MIME_TYPES")
        return cls(
            base_url=_get("BASE_URL") or defaults.base_url,
            bulk_path=_get("BULK_PATH") or defaults.bulk_path,
            timeout=float(_get("TIMEOUT") or defaults.timeout),
            receipt_mime_types=(
                tuple(m.strip().lower() for m in mime.split(",") if m.strip())
                if mime
                else defaults.receipt_mime_types
            ),
            max_receipt_size=int(_get("MAX_RECEIPT_SIZE") or defaults.max_receipt_size),
            import_extensions=defaults.import_extensions,
            max_import_file_size=int(
                _get("MAX_IMPORT_FILE_SIZE") or defaults.max_import_file_size
            ),
        )
