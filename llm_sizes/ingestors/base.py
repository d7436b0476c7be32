"""Base class for tabular data ingestors."""

from abc import ABC, abstractmethod
from pathlib import Path
import logging
import re

import httpx
import polars as pl

from llm_sizes.models.schemas import LoadSummary
from llm_sizes.config import settings, get_absolute_path

logger = logging.getLogger(__name__)


def clean_column_name(name: str) -> str:
    """Normalize a header to snake_case.

    "Arxiv Date" -> "arxiv_date", "modelType" -> "model_type",
    "Params (%)" -> "params_percent", "2nd Source" -> "x2nd_source".
    """
    name = name.strip().replace("%", " percent ").replace("#", " number ")
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    name = re.sub(r"[^0-9a-zA-Z]+", "_", name).strip("_").lower()
    if not name:
        return "x"
    if name[0].isdigit():
        name = f"x{name}"
    return name


def clean_column_names(names: list[str]) -> list[str]:
    """Normalize headers, suffixing repeats with _2, _3, ..."""
    seen: dict[str, int] = {}
    cleaned = []
    for raw in names:
        name = clean_column_name(raw)
        seen[name] = seen.get(name, 0) + 1
        cleaned.append(name if seen[name] == 1 else f"{name}_{seen[name]}")
    return cleaned


class BaseIngestor(ABC):
    """Abstract base class for ingestors that refresh a local CSV cache.

    Subclasses must implement:
    - SOURCE_ID: str
    - source_url: str
    - fetch_raw() -> bytes
    - parse(raw) -> pl.DataFrame

    Failures are not caught: a broken download or schema change aborts the run.
    """

    SOURCE_ID: str = ""

    def __init__(self, cache_path: Path | None = None, client: httpx.Client | None = None):
        self.cache_path = cache_path or get_absolute_path(settings.cache_file)
        self._client = client

    @property
    @abstractmethod
    def source_url(self) -> str:
        """URL the raw data is downloaded from."""

    @abstractmethod
    def fetch_raw(self) -> bytes:
        """Fetch raw data from source.

        Returns:
            Response body
        """

    @abstractmethod
    def parse(self, raw: bytes) -> pl.DataFrame:
        """Parse raw data into a normalized table.

        Args:
            raw: Response body returned by fetch_raw()

        Returns:
            DataFrame with cleaned column names
        """

    def run(self) -> LoadSummary:
        """Execute fetch, parse and cache write.

        Returns:
            Summary of the rows written
        """
        logger.info(f"Starting download for {self.SOURCE_ID}")

        raw = self.fetch_raw()
        logger.info(f"Downloaded {len(raw)} bytes from {self.source_url}")

        df = self.parse(raw)
        logger.info(f"Parsed {len(df)} rows")

        path = self.write_cache(df)
        logger.info(f"Cache written to {path}")

        return LoadSummary(
            source_url=self.source_url,
            cache_path=path,
            rows=len(df),
            columns=df.columns,
        )

    # Helper methods

    def download(self, url: str) -> bytes:
        """GET a URL anonymously and return the body.

        Raises:
            httpx.HTTPError: network failure or non-2xx status
        """
        if self._client is not None:
            response = self._client.get(url, follow_redirects=True)
            response.raise_for_status()
            return response.content

        with httpx.Client(timeout=settings.request_timeout) as client:
            response = client.get(url, follow_redirects=True)
            response.raise_for_status()
            return response.content

    def write_cache(self, df: pl.DataFrame) -> Path:
        """Overwrite the local cache file with df."""
        self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        df.write_csv(self.cache_path)
        return self.cache_path
