"""Ingestor for the public model size Google Sheet."""

from io import BytesIO
from pathlib import Path
import logging

import httpx
import polars as pl

from .base import BaseIngestor, clean_column_names
from llm_sizes.config import settings
from llm_sizes.models.errors import SchemaMismatchError
from llm_sizes.models.schemas import CACHE_WIDTH, REQUIRED_COLUMNS

logger = logging.getLogger(__name__)


class GoogleSheetIngestor(BaseIngestor):
    """Download the model size sheet as CSV and cache its first eight columns.

    The sheet is shared as anyone-with-the-link-can-view, so the CSV export
    endpoint needs no credentials.
    """

    SOURCE_ID = "llm_size_sheet"

    def __init__(
        self,
        sheet_id: str | None = None,
        gid: str | None = None,
        cache_path: Path | None = None,
        client: httpx.Client | None = None,
    ):
        super().__init__(cache_path=cache_path, client=client)
        self.sheet_id = sheet_id or settings.sheet_id
        self.gid = gid or settings.sheet_gid

    @property
    def source_url(self) -> str:
        return (
            f"https://docs.google.com/spreadsheets/d/{self.sheet_id}"
            f"/export?format=csv&gid={self.gid}"
        )

    def fetch_raw(self) -> bytes:
        return self.download(self.source_url)

    def parse(self, raw: bytes) -> pl.DataFrame:
        """Keep the first eight columns as strings, with snake_case headers.

        Columns are taken by position; only the ones the transformer reads
        must carry their expected names.
        """
        df = pl.read_csv(BytesIO(raw), infer_schema=False)

        if df.width < CACHE_WIDTH:
            raise SchemaMismatchError(REQUIRED_COLUMNS, clean_column_names(df.columns))

        # Columns past the eighth hold source links and are not cached
        dropped = df.columns[CACHE_WIDTH:]
        df = df.select(df.columns[:CACHE_WIDTH])
        if dropped:
            logger.debug(f"Dropping source columns: {dropped}")

        cleaned = clean_column_names(df.columns)
        if not set(REQUIRED_COLUMNS) <= set(cleaned):
            raise SchemaMismatchError(REQUIRED_COLUMNS, cleaned)

        return df.rename(dict(zip(df.columns, cleaned)))
