"""Data models and schemas."""

from .errors import (
    LLMSizesError,
    SchemaMismatchError,
    TransformError,
    ParameterParseError,
    DateParseError,
    CategoryError,
)
from .schemas import (
    Company,
    COMPANY_ORDER,
    CACHE_WIDTH,
    INTEGER_COLUMN,
    REQUIRED_COLUMNS,
    ModelRecord,
    LoadSummary,
)

__all__ = [
    "LLMSizesError",
    "SchemaMismatchError",
    "TransformError",
    "ParameterParseError",
    "DateParseError",
    "CategoryError",
    "Company",
    "COMPANY_ORDER",
    "CACHE_WIDTH",
    "INTEGER_COLUMN",
    "REQUIRED_COLUMNS",
    "ModelRecord",
    "LoadSummary",
]
