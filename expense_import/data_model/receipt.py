from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Receipt:
    """A receipt file attached to one import row, held in memory until submission."""

    filename: str
    content_type: str
    data: bytes = field(repr=False, default=b"")

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        """Lower-case extension without the dot ("" when the name has none)."""
        _, dot, ext = self.filename.rpartition(".")
        return ext.lower() if dot else ""
