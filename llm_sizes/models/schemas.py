"""Pydantic schemas for the model size table."""

from datetime import date, datetime
from enum import Enum
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Company(str, Enum):
    """Organization a model is attributed to.

    Declaration order is the legend and plotting order.
    """

    GOOGLE = "Google"
    META = "Meta"
    OPENAI = "OpenAI"
    OTHER = "Other Company"
    ACADEMIC = "Academic"


COMPANY_ORDER: list[str] = [c.value for c in Company]

# Only the first eight sheet columns are cached; the source-attribution
# columns after these are dropped.
CACHE_WIDTH = 8

# Position of the integer column among the cached ones
INTEGER_COLUMN = 1

# Cached columns the transformer reads, after snake_case normalization
REQUIRED_COLUMNS: list[str] = [
    "name",
    "arxiv_date",
    "parameters",
    "company",
    "include",
]


class ModelRecord(BaseModel):
    """One plotted model: release date, size and company."""

    model_config = ConfigDict(protected_namespaces=())

    name: str = Field(..., description="Model name used as the point label")
    company: Company = Field(..., description="Consolidated company category")
    arxiv_date: date = Field(..., description="Publication date of the source paper")
    parameters_chr: str = Field(..., description="Raw magnitude string, e.g. '175B'")
    parameters_num: float = Field(..., description="Parameter count")
    year: int | None = Field(default=None)
    model_type: str | None = Field(default=None)
    notes: str | None = Field(default=None)

    @field_validator("parameters_num")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Parameter count must be positive, got {v}")
        return v


class LoadSummary(BaseModel):
    """Outcome of one sheet download."""

    source_url: str
    cache_path: Path
    rows: int
    columns: list[str]
    retrieved_at: datetime = Field(default_factory=datetime.utcnow)
