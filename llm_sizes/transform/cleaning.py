"""Normalization of the cached model size sheet into plottable records."""

from datetime import date, datetime
from pathlib import Path
import logging
import re

import polars as pl

from llm_sizes.config import settings, get_absolute_path
from llm_sizes.models.errors import (
    CategoryError,
    DateParseError,
    ParameterParseError,
    SchemaMismatchError,
)
from llm_sizes.models.schemas import (
    CACHE_WIDTH,
    COMPANY_ORDER,
    INTEGER_COLUMN,
    REQUIRED_COLUMNS,
    Company,
    ModelRecord,
)

logger = logging.getLogger(__name__)

COMPANY_DTYPE = pl.Enum(COMPANY_ORDER)

# Raw labels that collapse onto a category; labels starting with
# OTHER_COMPANY_PREFIX all become Company.OTHER
COMPANY_ALIASES: dict[str, str] = {
    "Open Source/Academic": Company.ACADEMIC.value,
}
OTHER_COMPANY_PREFIX = "Other Company"

MULTIPLIERS: dict[str, float] = {
    "M": 1e6,
    "B": 1e9,
    "T": 1e12,
}

MAGNITUDE_PATTERN = r"(\d+(?:\.\d+)?)([MBT])"

TIMESTAMP_FORMATS = [
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y",
]


def split_magnitude(text: str | None) -> tuple[float, float] | None:
    """Split '175B' into (175.0, 1e9); None when the format is not recognized."""
    match = re.fullmatch(MAGNITUDE_PATTERN, text.strip()) if text else None
    if not match:
        return None
    number, unit = match.groups()
    return float(number), MULTIPLIERS[unit]


def parse_magnitude(text: str) -> float:
    """Convert a magnitude string such as '175B' to a parameter count.

    Raises:
        ParameterParseError: text is not a number followed by M, B or T
    """
    parts = split_magnitude(text)
    if parts is None:
        raise ParameterParseError([text])
    number, multiplier = parts
    return number * multiplier


def company_category(label: str | None) -> str | None:
    """Category name for a raw sheet label, None if it has none."""
    if label is None:
        return None
    if label.startswith(OTHER_COMPANY_PREFIX):
        return Company.OTHER.value
    label = COMPANY_ALIASES.get(label, label)
    return label if label in COMPANY_ORDER else None


def consolidate_company(label: str | None) -> Company:
    """Map a raw sheet label onto the fixed company set."""
    category = company_category(label)
    if category is None:
        raise CategoryError([label])
    return Company(category)


def parse_timestamp(value: str | date | None) -> date:
    """Parse a sheet timestamp, discarding the time of day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise DateParseError("Missing arxiv_date")

    text = str(value).strip()
    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    raise DateParseError(f"Could not parse date: {value!r}")


def read_cache(path: Path) -> pl.DataFrame:
    """Read the cached sheet, enforcing the declared column schema.

    Columns are typed by position: the second one is an integer, the rest
    stay String until transform() parses them.

    Raises:
        SchemaMismatchError: wrong column count or a required column missing
    """
    df = pl.read_csv(path, infer_schema=False)
    if df.width != CACHE_WIDTH or not set(REQUIRED_COLUMNS) <= set(df.columns):
        raise SchemaMismatchError(REQUIRED_COLUMNS, df.columns)

    df = df.with_columns(pl.col(df.columns[INTEGER_COLUMN]).cast(pl.Int64))
    logger.debug(f"Read {len(df)} cached rows from {path}")
    return df


def filter_included(df: pl.DataFrame, marker: str | None = None) -> pl.DataFrame:
    """Keep rows flagged for plotting (mostly the largest model in a family)."""
    marker = settings.include_marker if marker is None else marker
    return df.filter(pl.col("include") == marker)


def coerce_dates(df: pl.DataFrame) -> pl.DataFrame:
    dates = [parse_timestamp(v) for v in df["arxiv_date"].to_list()]
    return df.with_columns(pl.Series("arxiv_date", dates, dtype=pl.Date))


def consolidate_companies(df: pl.DataFrame) -> pl.DataFrame:
    """Collapse company labels and fix the category domain and order."""
    labels = df["company"].to_list()
    categories = [company_category(label) for label in labels]

    unknown = sorted({str(label) for label, cat in zip(labels, categories) if cat is None})
    if unknown:
        raise CategoryError(unknown)

    return df.with_columns(pl.Series("company", categories, dtype=COMPANY_DTYPE))


def parse_parameters(df: pl.DataFrame) -> pl.DataFrame:
    """Derive parameters_num from the magnitude string in parameters_chr."""
    df = df.rename({"parameters": "parameters_chr"})
    texts = df["parameters_chr"].to_list()
    parts = [split_magnitude(text) for text in texts]

    invalid = [str(text) for text, p in zip(texts, parts) if p is None]
    if invalid:
        raise ParameterParseError(invalid)

    df = df.with_columns([
        pl.Series("parameters_num", [p[0] for p in parts], dtype=pl.Float64),
        pl.Series("parameters_mult", [p[1] for p in parts], dtype=pl.Float64),
    ])
    return df.with_columns(
        (pl.col("parameters_num") * pl.col("parameters_mult")).alias("parameters_num")
    )


def transform(df: pl.DataFrame, marker: str | None = None) -> pl.DataFrame:
    """Turn cached sheet rows into the plotted table.

    Steps run in order: inclusion filter, date coercion, company
    consolidation, magnitude parsing, then the include and multiplier
    columns are dropped.

    Args:
        df: Rows as returned by read_cache()
        marker: Inclusion sentinel (default: settings.include_marker)

    Returns:
        The cached columns minus include, with parameters renamed to
        parameters_chr and parameters_num appended
    """
    included = filter_included(df, marker)
    logger.info(f"Kept {len(included)}/{len(df)} rows marked for inclusion")

    out = coerce_dates(included)
    out = consolidate_companies(out)
    out = parse_parameters(out)
    return out.drop(["include", "parameters_mult"])


def load_table(path: Path | None = None) -> pl.DataFrame:
    """Read the cache file and transform it."""
    path = path or get_absolute_path(settings.cache_file)
    return transform(read_cache(path))


def filter_inset(df: pl.DataFrame, threshold: float | None = None) -> pl.DataFrame:
    """Rows small enough to appear in the zoomed inset."""
    threshold = settings.inset_max_parameters if threshold is None else threshold
    return df.filter(pl.col("parameters_num") <= threshold)


def to_records(df: pl.DataFrame) -> list[ModelRecord]:
    return [ModelRecord(**row) for row in df.iter_rows(named=True)]
