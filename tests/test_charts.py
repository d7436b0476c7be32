"""Tests for the chart layers, composition and export."""

from datetime import date, datetime

import polars as pl
import pytest

from llm_sizes.charts import build_chart, export_chart, short_scale_label, expand_range
from llm_sizes.charts.layout import canvas_to_paper, grid_domain
from llm_sizes.charts.scales import expand_date_range
from llm_sizes.config import ChartConfig, GridArea
from llm_sizes.transform import filter_inset, load_table


@pytest.fixture
def table(cached) -> pl.DataFrame:
    return load_table(cached)


def label_texts(fig, xref: str) -> list[str]:
    return [a.text for a in fig.layout.annotations if a.xref == xref]


def trace_names(fig, xaxis: str) -> list[str]:
    names = []
    for trace in fig.data:
        if trace.xaxis == xaxis and trace.customdata is not None:
            names.extend(c[0] for c in trace.customdata)
    return names


@pytest.mark.parametrize(
    "value, expected",
    [
        (1e8, "100M"),
        (1e9, "1B"),
        (2.5e9, "2.5B"),
        (12.5e9, "12.5B"),
        (1e11, "100B"),
        (5e11, "500B"),
        (1e12, "1T"),
        (2e12, "2T"),
        (1500, "1.5K"),
        (0, "0"),
        (-1e9, "-1B"),
    ],
)
def test_short_scale_label(value, expected):
    assert short_scale_label(value) == expected


def test_expand_range():
    assert expand_range(-1e9, 15e9, 0.01) == pytest.approx((-1.16e9, 15.16e9))
    assert expand_range(0, 10, 0) == (0, 10)


def test_expand_date_range():
    lo, hi = expand_date_range(date(2020, 1, 1), date(2020, 1, 11), 0.1)

    assert lo == datetime(2019, 12, 31)
    assert hi == datetime(2020, 1, 12)


def test_grid_domain_matches_layout_areas():
    x_full, y_full = grid_domain(GridArea(t=1, b=6, l=1, r=10), 10, 10)
    x_inset, y_inset = grid_domain(GridArea(t=7, b=10, l=2, r=9), 10, 10)

    assert x_full == pytest.approx([0.0, 1.0])
    assert y_full == pytest.approx([0.4, 1.0])
    assert x_inset == pytest.approx([0.1, 0.9])
    assert y_inset == pytest.approx([0.0, 0.4])


def test_grid_domain_gap_only_on_inner_edges():
    x, y = grid_domain(GridArea(t=7, b=10, l=2, r=9), 10, 10, gap=0.02)

    assert x == pytest.approx([0.12, 0.88])
    assert y == pytest.approx([0.0, 0.38])


def test_canvas_to_paper():
    config = ChartConfig(margin_l=100, margin_r=100, margin_t=100, margin_b=100)

    assert canvas_to_paper(0.1, 0.1, config) == pytest.approx((0.0, 0.0))
    assert canvas_to_paper(0.5, 0.5, config) == pytest.approx((0.5, 0.5))
    assert canvas_to_paper(0.9, 0.9, config) == pytest.approx((1.0, 1.0))


def test_layers_cover_expected_records(table):
    fig = build_chart(table)

    assert sorted(trace_names(fig, "x")) == sorted(table["name"].to_list())
    inset_names = filter_inset(table)["name"].to_list()
    assert sorted(trace_names(fig, "x2")) == sorted(inset_names)
    assert sorted(inset_names) == ["T5", "TestModel"]


def test_test_model_labelled_in_both_layers(table):
    fig = build_chart(table)

    assert "TestModel" in label_texts(fig, "x")
    assert "TestModel" in label_texts(fig, "x2")
    assert "GPT-3" not in label_texts(fig, "x2")


def test_legend_only_on_full_layer(table):
    fig = build_chart(table)

    legend_traces = [t for t in fig.data if t.showlegend is not False]
    assert {t.xaxis for t in legend_traces} == {"x"}
    assert [t.name for t in legend_traces] == ["Google", "Meta", "OpenAI", "Other Company", "Academic"]
    assert all(t.marker.symbol == "square" for t in legend_traces)
    assert all(t.x == (None,) for t in legend_traces)
    assert fig.layout.legend.title.text == "Company"


def test_axes(table):
    fig = build_chart(table)

    assert list(fig.layout.yaxis.ticktext) == ["100M", "100B", "500B", "1T", "2T"]
    assert list(fig.layout.yaxis2.ticktext) == [
        "100M", "1B", "2.5B", "5B", "7.5B", "10B", "12.5B", "15B",
    ]
    assert fig.layout.xaxis.tickformat == "%Y"
    assert fig.layout.xaxis.title.text == "Release Date"
    assert fig.layout.yaxis.title.text == "Number of Parameters"
    assert fig.layout.xaxis2.mirror is True
    assert fig.layout.yaxis2.mirror is True
    assert fig.layout.xaxis.range[0].startswith("2017-11-01")


def test_highlight_band_below_points(table):
    fig = build_chart(table)

    (band,) = fig.layout.shapes
    assert band.layer == "below"
    assert band.y0 == -20e9
    assert band.y1 == 20e9


def test_arrow_annotation(table):
    config = ChartConfig()
    fig = build_chart(table, config)

    (arrow,) = [a for a in fig.layout.annotations if a.xref == "paper"]
    x_end, y_end = canvas_to_paper(0.23, 0.40, config)
    assert arrow.x == pytest.approx(x_end)
    assert arrow.y == pytest.approx(y_end)
    assert arrow.ax == pytest.approx(-0.08 * config.width_px)
    assert arrow.ay == pytest.approx(-0.12 * config.height_px)


def test_build_chart_is_reproducible(table):
    first = build_chart(table)
    second = build_chart(table)

    assert [a.to_plotly_json() for a in first.layout.annotations] == [
        a.to_plotly_json() for a in second.layout.annotations
    ]


def test_empty_inset(table):
    fig = build_chart(table, inset_threshold=1.0)

    assert trace_names(fig, "x2") == []
    assert label_texts(fig, "x2") == []


def test_export_chart_size(table, tmp_path, captured_images):
    fig = build_chart(table)

    path = export_chart(fig, tmp_path / "out" / "llm_size_plot.png")

    assert path.exists()
    (call,) = captured_images
    assert call["format"] == "png"
    assert call["width"] * call["scale"] == 3000
    assert call["height"] * call["scale"] == 3000


def test_points_stay_round_behind_square_legend_keys(table):
    fig = build_chart(table)

    points = [t for t in fig.data if t.customdata is not None]
    assert points
    assert all(t.showlegend is False for t in points)
    assert all(t.marker.symbol is None for t in points)
