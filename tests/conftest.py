"""Shared fixtures: a small sheet export and clients that serve it."""

from pathlib import Path

import httpx
import plotly.graph_objects as go
import pytest

from llm_sizes.ingestors import GoogleSheetIngestor

SHEET_CSV = """Name,Year,Arxiv Date,Parameters,Company,Model Type,Include,Notes,Source,Source Link
GPT-3,2020,2020-05-28T00:00:00Z,175B,OpenAI,Decoder,x,,Paper,https://arxiv.org/abs/2005.14165
PaLM,2022,2022-04-05T00:00:00Z,540B,Google,Decoder,x,,Paper,https://arxiv.org/abs/2204.02311
Llama 2,2023,2023-07-18T00:00:00Z,70B,Meta,Decoder,x,,Paper,https://arxiv.org/abs/2307.09288
TestModel,2023,2023-05-01T00:00:00Z,7B,Other Company X,Decoder,x,,Paper,https://example.org
BLOOM,2022,2022-11-09T00:00:00Z,176B,Open Source/Academic,Decoder,x,,Paper,https://arxiv.org/abs/2211.05100
GPT-2 Medium,2019,2019-02-14T00:00:00Z,345M,OpenAI,Decoder,,smaller sibling,Blog,https://openai.com
Switch-C,2021,2021-01-11T00:00:00Z,1.6T,Google,Mixture of Experts,x,,Paper,https://arxiv.org/abs/2101.03961
T5,2019,2019-10-23T00:00:00Z,11B,Google,Encoder-Decoder,x,,Paper,https://arxiv.org/abs/1910.10683
"""

SHEET_ROWS = 8
INCLUDED_ROWS = 7


def make_client(body: bytes, status_code: int = 200) -> httpx.Client:
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code, content=body)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    client.requests = requests
    return client


@pytest.fixture
def sheet_bytes() -> bytes:
    return SHEET_CSV.encode()


@pytest.fixture
def sheet_client(sheet_bytes):
    client = make_client(sheet_bytes)
    yield client
    client.close()


@pytest.fixture
def cache_path(tmp_path) -> Path:
    return tmp_path / "data" / "data.csv"


@pytest.fixture
def ingestor(sheet_client, cache_path) -> GoogleSheetIngestor:
    return GoogleSheetIngestor(sheet_id="test-sheet", cache_path=cache_path, client=sheet_client)


@pytest.fixture
def cached(ingestor, cache_path) -> Path:
    """Cache file written from the sample sheet."""
    ingestor.run()
    return cache_path


@pytest.fixture
def captured_images(monkeypatch) -> list[dict]:
    """Replace PNG export with a stub that records its arguments."""
    calls = []

    def fake_write_image(self, path, **kwargs):
        calls.append({"path": path, **kwargs})
        Path(path).write_bytes(b"\x89PNG")

    monkeypatch.setattr(go.Figure, "write_image", fake_write_image)
    return calls
