"""Composition of both chart layers onto one canvas and PNG export."""

from pathlib import Path
import logging

import plotly.graph_objects as go
import polars as pl

from llm_sizes.config import ChartConfig, settings
from llm_sizes.transform import filter_inset
from .layers import add_full_range_layer, add_inset_layer
from .layout import canvas_to_paper

logger = logging.getLogger(__name__)


def arrow_annotation(config: ChartConfig) -> dict:
    """Arrow from the grey band to the inset, fixed in canvas fractions.

    The coordinates do not follow the data: changing the canvas size or the
    label layout can leave the arrow misaligned.
    """
    arrow = config.arrow
    x_end, y_end = canvas_to_paper(arrow.x_end, arrow.y_end, config)
    return dict(
        x=x_end,
        y=y_end,
        xref="paper",
        yref="paper",
        ax=(arrow.x - arrow.x_end) * config.width_px,
        ay=-(arrow.y - arrow.y_end) * config.height_px,
        axref="pixel",
        ayref="pixel",
        text="",
        showarrow=True,
        arrowhead=2,
        arrowsize=1,
        arrowwidth=arrow.width,
        arrowcolor=arrow.color,
    )


def build_chart(
    df: pl.DataFrame,
    config: ChartConfig | None = None,
    inset_threshold: float | None = None,
) -> go.Figure:
    """Compose the full-range chart, the zoomed inset and the connecting arrow.

    Args:
        df: Transformed table (see llm_sizes.transform.transform)
        config: Visual constants (default: settings.chart)
        inset_threshold: Largest parameter count shown in the inset

    Returns:
        Figure sized for export at config.width_in x config.height_in inches
    """
    config = config or settings.chart
    inset_df = filter_inset(df, inset_threshold)
    logger.info(f"Plotting {len(df)} models, {len(inset_df)} in the inset")

    fig = go.Figure()
    annotations = add_full_range_layer(fig, df, config)
    annotations += add_inset_layer(fig, inset_df, config)
    annotations.append(arrow_annotation(config))

    fig.update_layout(
        annotations=annotations,
        width=config.width_px,
        height=config.height_px,
        margin=dict(l=config.margin_l, r=config.margin_r, t=config.margin_t, b=config.margin_b),
        plot_bgcolor="white",
        paper_bgcolor="white",
        font=dict(family=config.font_family, size=config.axis_text_size, color="black"),
        showlegend=True,
    )
    return fig


def export_chart(fig: go.Figure, path: Path, config: ChartConfig | None = None) -> Path:
    """Rasterize the figure to PNG at the configured size and DPI."""
    config = config or settings.chart
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.write_image(
        str(path),
        format="png",
        width=config.width_px,
        height=config.height_px,
        scale=config.export_scale,
    )
    logger.info(
        f"Saved {path} ({config.width_in:g}x{config.height_in:g} in at {config.dpi} dpi)"
    )
    return path
