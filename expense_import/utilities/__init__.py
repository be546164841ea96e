from .category_cache import CategoryCache
from .config_logging import LOGGING, configure_logging
from .converters_scalar import amount_text, date_text, to_category_id, to_date
from .core_util import is_null_or_whitespace, new_row_id
from .settings import ImportSettings

__all__ = [
    "is_null_or_whitespace",
    "new_row_id",
    "to_date",
    "date_text",
    "amount_text",
    "to_category_id",
    "CategoryCache",
    "ImportSettings",
    "LOGGING",
    "configure_logging",
]
