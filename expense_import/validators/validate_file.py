# expense_import/validators/validate_file.py
from __future__ import annotations

from typing import Optional, Sequence

from expense_import.data_model import Receipt

NO_FILE = "No file selected."
INVALID_TYPE = "Invalid file type."
TOO_LARGE = "File size exceeds limit."


def validate_file(
    receipt: Optional[Receipt],
    valid_mime_types: Sequence[str],
    max_file_size: int,
) -> Optional[str]:
    """
    Accept or reject an attached file by MIME type and size.

    HEIC images often arrive with an empty or generic MIME type, so when
    ``image/heic`` is allowed a ``.heic`` extension is accepted as well; the
    server does the rigorous check.

    Returns the error message, or None when the file is acceptable.
    """
    if receipt is None:
        return NO_FILE

    allowed = {m.lower() for m in valid_mime_types}
    if receipt.content_type.lower() not in allowed:
        is_valid_heic = "image/heic" in allowed and receipt.extension == "heic"
        if not is_valid_heic:
            return INVALID_TYPE

    if receipt.size > max_file_size:
        return TOO_LARGE

    return None
