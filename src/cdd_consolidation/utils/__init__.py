"""Pipeline utilities: logging, normalization."""

from .logging import setup_logging, get_logger
from .normalize import (
    UNKNOWN,
    UNCATEGORIZED,
    clean_number,
    clean_text,
    is_blank,
    normalize_column_name,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "UNKNOWN",
    "UNCATEGORIZED",
    "clean_number",
    "clean_text",
    "is_blank",
    "normalize_column_name",
]
