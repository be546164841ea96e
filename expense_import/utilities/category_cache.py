# expense_import/utilities/category_cache.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

log = logging.getLogger(__name__)


@dataclass
class CategoryCache:
    """
    Lookup results for the category picker, keyed by search text then page.

    Owned by a single import session; cleared after a successful import so
    newly created categories show up on the next lookup.
    """

    _pages: Dict[str, Dict[int, List[Any]]] = field(default_factory=dict)

    def get(self, search: str, page: int) -> Optional[List[Any]]:
        return self._pages.get(search, {}).get(page)

    def set(self, search: str, page: int, options: List[Any]) -> None:
        self._pages.setdefault(search, {})[page] = list(options)

    def clear(self) -> None:
        if self._pages:
            log.debug("Clearing category cache (%d search keys)", len(self._pages))
        self._pages.clear()

    def __len__(self) -> int:
        return sum(len(pages) for pages in self._pages.values())
