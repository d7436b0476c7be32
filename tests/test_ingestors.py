"""Tests for the sheet download and CSV cache."""

import httpx
import polars as pl
import pytest

from llm_sizes.ingestors import GoogleSheetIngestor, clean_column_name, clean_column_names
from llm_sizes.models import SchemaMismatchError
from llm_sizes.transform import load_table, read_cache

from .conftest import INCLUDED_ROWS, SHEET_ROWS, make_client

SHEET_HEADER = ["name", "year", "arxiv_date", "parameters", "company", "model_type", "include", "notes"]


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Name", "name"),
        ("Arxiv Date", "arxiv_date"),
        ("  Model Type ", "model_type"),
        ("modelType", "model_type"),
        ("Parameters (B)", "parameters_b"),
        ("Share %", "share_percent"),
        ("2nd Source", "x2nd_source"),
        ("Source / Link", "source_link"),
    ],
)
def test_clean_column_name(raw, expected):
    assert clean_column_name(raw) == expected


def test_clean_column_names_suffixes_duplicates():
    assert clean_column_names(["Source", "source", "SOURCE "]) == ["source", "source_2", "source_3"]


def test_source_url_is_csv_export():
    ingestor = GoogleSheetIngestor(sheet_id="abc", gid="7")
    assert ingestor.source_url == (
        "https://docs.google.com/spreadsheets/d/abc/export?format=csv&gid=7"
    )


def test_parse_keeps_first_eight_columns(ingestor, sheet_bytes):
    df = ingestor.parse(sheet_bytes)

    assert df.columns == SHEET_HEADER
    assert len(df) == SHEET_ROWS
    assert all(dtype == pl.String for dtype in df.dtypes)
    assert df["parameters"].to_list()[0] == "175B"


def test_parse_rejects_renamed_columns(ingestor):
    raw = b"Model,Year,Arxiv Date,Parameters,Company,Model Type,Include,Notes\nA,2020,2020-01-01,1B,Meta,x,x,\n"
    with pytest.raises(SchemaMismatchError) as exc_info:
        ingestor.parse(raw)
    assert exc_info.value.found[0] == "model"


def test_parse_rejects_too_few_columns(ingestor):
    with pytest.raises(SchemaMismatchError):
        ingestor.parse(b"Name,Year\nA,2020\n")


def test_run_writes_cache(ingestor, cache_path, sheet_client):
    summary = ingestor.run()

    assert cache_path.exists()
    assert summary.rows == SHEET_ROWS
    assert summary.cache_path == cache_path
    assert summary.columns == SHEET_HEADER
    assert str(sheet_client.requests[0].url).startswith(
        "https://docs.google.com/spreadsheets/d/test-sheet/export"
    )


def test_cache_round_trip_keeps_every_row(cached):
    df = read_cache(cached)

    assert len(df) == SHEET_ROWS
    assert df.columns == SHEET_HEADER
    assert df["year"].dtype == pl.Int64


def test_run_overwrites_previous_cache(cache_path, sheet_bytes):
    cache_path.parent.mkdir(parents=True)
    cache_path.write_text("stale\n")

    client = make_client(sheet_bytes)
    GoogleSheetIngestor(cache_path=cache_path, client=client).run()

    assert "stale" not in cache_path.read_text()
    assert cache_path.read_text().startswith(",".join(SHEET_HEADER))


def test_http_error_is_fatal(cache_path):
    client = make_client(b"Forbidden", status_code=403)
    ingestor = GoogleSheetIngestor(cache_path=cache_path, client=client)

    with pytest.raises(httpx.HTTPStatusError):
        ingestor.run()
    assert not cache_path.exists()


def test_network_error_is_fatal(cache_path):
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    ingestor = GoogleSheetIngestor(cache_path=cache_path, client=client)

    with pytest.raises(httpx.ConnectError):
        ingestor.run()
    assert not cache_path.exists()


def test_unused_header_may_change(cache_path, sheet_bytes):
    renamed = sheet_bytes.replace(b"Model Type", b"Type", 1)
    client = make_client(renamed)

    summary = GoogleSheetIngestor(cache_path=cache_path, client=client).run()
    assert summary.columns[5] == "type"

    df = read_cache(cache_path)
    assert df["year"].dtype == pl.Int64
    assert len(load_table(cache_path)) == INCLUDED_ROWS


def test_second_column_is_integer_whatever_its_name(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text(
        "name,released,arxiv_date,parameters,company,kind,include,comment\n"
        "A,2020,2020-01-01,1B,Meta,,x,\n"
    )

    df = read_cache(path)
    assert df["released"].dtype == pl.Int64
    assert df["released"].to_list() == [2020]


def test_parse_rejects_missing_required_column(ingestor):
    raw = b"Name,Year,Arxiv Date,Size,Company,Model Type,Include,Notes\nA,2020,2020-01-01,1B,Meta,x,x,\n"
    with pytest.raises(SchemaMismatchError) as exc_info:
        ingestor.parse(raw)
    assert "size" in exc_info.value.found
