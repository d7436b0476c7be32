"""Full-range and zoomed-inset layers of the size chart."""

from datetime import date
import logging

import plotly.graph_objects as go
import polars as pl

from llm_sizes.config import ChartConfig, PanelConfig
from llm_sizes.models.schemas import COMPANY_ORDER
from .layout import PanelGeometry, grid_domain
from .repel import estimate_label_size, repel_labels
from .scales import expand_date_range, expand_range, short_scale_label

logger = logging.getLogger(__name__)

LABEL_PADDING = 1


def company_colors(config: ChartConfig) -> dict[str, str]:
    """Fixed color per company, in category order."""
    return dict(zip(COMPANY_ORDER, config.palette))


def panel_ranges(panel: PanelConfig) -> tuple[tuple[date, date], tuple[float, float]]:
    """Expanded x (dates) and y ranges shown by a panel."""
    x_range = expand_date_range(*panel.x_limits, panel.x_expand)
    y_range = expand_range(*panel.y_limits, panel.y_expand)
    return x_range, y_range


def _axis_style(config: ChartConfig, panel: PanelConfig, y_range: tuple[float, float]) -> tuple[dict, dict]:
    tickfont = dict(size=config.axis_text_size, color="#4D4D4D")
    xaxis = dict(
        type="date",
        dtick="M12",
        tick0="2018-01-01",
        tickformat="%Y",
        ticks="outside",
        tickfont=tickfont,
        showgrid=True,
        gridcolor=config.grid_color,
        showline=True,
        linecolor="black",
        zeroline=False,
    )
    yaxis = dict(
        range=list(y_range),
        tickmode="array",
        tickvals=panel.y_breaks,
        ticktext=[short_scale_label(v) for v in panel.y_breaks],
        ticks="outside",
        tickfont=tickfont,
        showgrid=True,
        gridcolor=config.grid_color,
        showline=True,
        linecolor="black",
        zeroline=False,
    )
    return xaxis, yaxis


def _label_annotations(
    df: pl.DataFrame,
    geometry: PanelGeometry,
    panel: PanelConfig,
    config: ChartConfig,
    xref: str,
    yref: str,
) -> list[dict]:
    """Repelled name labels joined to their points by a segment."""
    if df.is_empty():
        return []

    names = df["name"].to_list()
    dates = df["arxiv_date"].to_list()
    params = df["parameters_num"].to_list()
    companies = df["company"].cast(pl.String).to_list()
    colors = company_colors(config)

    points = geometry.to_pixels(dates, params)
    sizes = [estimate_label_size(n, config.label_text_size, LABEL_PADDING + 1) for n in names]
    repel = panel.repel
    layout = repel_labels(
        points,
        sizes,
        geometry.box,
        seed=repel.seed,
        force=repel.force,
        max_overlaps=repel.max_overlaps,
        box_padding=repel.box_padding,
        point_padding=repel.point_padding,
        max_iter=repel.max_iter,
    )

    hidden = int((~layout.visible).sum())
    if hidden:
        logger.warning(f"{hidden} unlabeled data points (too many overlaps)")

    annotations = []
    for i, name in enumerate(names):
        if not layout.visible[i]:
            continue
        dx, dy = layout.positions[i] - points[i]
        color = colors[companies[i]]
        annotations.append(dict(
            x=dates[i].isoformat(),
            y=params[i],
            xref=xref,
            yref=yref,
            text=name,
            showarrow=True,
            arrowhead=0,
            arrowwidth=1,
            arrowcolor=color,
            standoff=0,
            ax=float(dx),
            ay=float(-dy),  # plotly pixel offsets grow downward
            font=dict(size=config.label_text_size, color=color),
            bgcolor="white",
            bordercolor=color,
            borderwidth=1,
            borderpad=LABEL_PADDING,
        ))
    return annotations


def _add_points(
    fig: go.Figure,
    df: pl.DataFrame,
    config: ChartConfig,
    xaxis: str,
    yaxis: str,
    showlegend: bool,
) -> None:
    colors = company_colors(config)
    for company in COMPANY_ORDER:
        subset = df.filter(pl.col("company").cast(pl.String) == company)
        if subset.is_empty():
            continue
        fig.add_trace(go.Scatter(
            x=subset["arxiv_date"].to_list(),
            y=subset["parameters_num"].to_list(),
            mode="markers",
            name=company,
            legendgroup=company,
            showlegend=False,
            marker=dict(size=config.marker_size, color=colors[company]),
            xaxis=xaxis,
            yaxis=yaxis,
            hovertemplate=(
                f"<b>%{{customdata[0]}}</b><br>{company}<br>"
                "Parameters: %{customdata[1]}<br>"
                "Date: %{x|%Y-%m-%d}<extra></extra>"
            ),
            customdata=list(zip(subset["name"].to_list(), subset["parameters_chr"].to_list())),
        ))

        if showlegend:
            # Legend-only trace: square keys while the points stay round
            fig.add_trace(go.Scatter(
                x=[None],
                y=[None],
                mode="markers",
                name=company,
                legendgroup=company,
                showlegend=True,
                marker=dict(symbol="square", size=config.legend_key_size, color=colors[company]),
                xaxis=xaxis,
                yaxis=yaxis,
                hoverinfo="skip",
            ))


def add_full_range_layer(fig: go.Figure, df: pl.DataFrame, config: ChartConfig) -> list[dict]:
    """Draw every record on the primary axes.

    Adds the grey band marking the zoomed region, the points and the
    in-panel legend. Returns the label annotations, which the caller adds
    together with the canvas-level annotations.
    """
    panel = config.full
    x_domain, y_domain = grid_domain(config.full_area, config.grid_rows, config.grid_cols, config.grid_gap)
    x_range, y_range = panel_ranges(panel)

    fig.add_shape(
        type="rect",
        xref="x",
        yref="y",
        x0=config.highlight_x[0].isoformat(),
        x1=config.highlight_x[1].isoformat(),
        y0=config.highlight_y[0],
        y1=config.highlight_y[1],
        fillcolor=config.highlight_color,
        line=dict(color=config.highlight_color),
        layer="below",
    )

    _add_points(fig, df, config, "x", "y", showlegend=True)

    xaxis, yaxis = _axis_style(config, panel, y_range)
    xaxis.update(
        domain=x_domain,
        range=[x_range[0].isoformat(), x_range[1].isoformat()],
        anchor="y",
        title=dict(text="Release Date", font=dict(size=config.axis_title_size)),
    )
    yaxis.update(
        domain=y_domain,
        anchor="x",
        title=dict(text="Number of Parameters", font=dict(size=config.axis_title_size)),
    )

    legend_x, legend_y = config.legend_position
    fig.update_layout(
        xaxis=xaxis,
        yaxis=yaxis,
        legend=dict(
            title=dict(text="Company", font=dict(size=config.axis_title_size)),
            x=x_domain[0] + legend_x * (x_domain[1] - x_domain[0]),
            y=y_domain[0] + legend_y * (y_domain[1] - y_domain[0]),
            xanchor="center",
            yanchor="middle",
            font=dict(size=config.axis_text_size),
            bgcolor="rgba(255,255,255,0)",
            itemsizing="constant",
        ),
    )

    geometry = PanelGeometry.from_domain(x_domain, y_domain, x_range, y_range, config)
    return _label_annotations(df, geometry, panel, config, "x", "y")


def add_inset_layer(fig: go.Figure, df: pl.DataFrame, config: ChartConfig) -> list[dict]:
    """Draw the already-filtered small models on the secondary, boxed axes.

    The inset has no legend of its own and no axis titles.
    """
    panel = config.inset
    x_domain, y_domain = grid_domain(config.inset_area, config.grid_rows, config.grid_cols, config.grid_gap)
    x_range, y_range = panel_ranges(panel)

    _add_points(fig, df, config, "x2", "y2", showlegend=False)

    xaxis, yaxis = _axis_style(config, panel, y_range)
    border = dict(mirror=True, linewidth=2, linecolor="black")
    xaxis.update(
        domain=x_domain,
        range=[x_range[0].isoformat(), x_range[1].isoformat()],
        anchor="y2",
        **border,
    )
    yaxis.update(domain=y_domain, anchor="x2", **border)
    fig.update_layout(xaxis2=xaxis, yaxis2=yaxis)

    geometry = PanelGeometry.from_domain(x_domain, y_domain, x_range, y_range, config)
    return _label_annotations(df, geometry, panel, config, "x2", "y2")
