"""Sheet data ingestors."""

from .base import BaseIngestor, clean_column_name, clean_column_names
from .google_sheet import GoogleSheetIngestor

__all__ = [
    "BaseIngestor",
    "GoogleSheetIngestor",
    "clean_column_name",
    "clean_column_names",
]
