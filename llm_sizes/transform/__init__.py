"""Cleaning and reshaping of the cached sheet."""

from .cleaning import (
    read_cache,
    transform,
    load_table,
    filter_inset,
    to_records,
    parse_magnitude,
    parse_timestamp,
    consolidate_company,
)

__all__ = [
    "read_cache",
    "transform",
    "load_table",
    "filter_inset",
    "to_records",
    "parse_magnitude",
    "parse_timestamp",
    "consolidate_company",
]
