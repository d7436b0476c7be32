"""Placement of chart panels on the shared canvas."""

from dataclasses import dataclass
from datetime import date

import numpy as np

from llm_sizes.config import ChartConfig, GridArea
from .scales import to_day_number


def grid_domain(area: GridArea, rows: int, cols: int, gap: float = 0.0) -> tuple[list[float], list[float]]:
    """Paper-coordinate x and y domains for a block of grid cells.

    Rows count from the top, paper y from the bottom. Edges that touch
    another cell are pulled in by gap.
    """
    x0, x1 = (area.l - 1) / cols, area.r / cols
    y0, y1 = 1 - area.b / rows, 1 - (area.t - 1) / rows

    if x0 > 0:
        x0 += gap
    if x1 < 1:
        x1 -= gap
    if y0 > 0:
        y0 += gap
    if y1 < 1:
        y1 -= gap

    return [x0, x1], [y0, y1]


def plot_area(config: ChartConfig) -> tuple[float, float, float, float]:
    """Canvas pixel box (left, bottom, width, height) inside the margins."""
    width = config.width_px - config.margin_l - config.margin_r
    height = config.height_px - config.margin_t - config.margin_b
    return config.margin_l, config.margin_b, width, height


def canvas_to_paper(x: float, y: float, config: ChartConfig) -> tuple[float, float]:
    """Convert whole-canvas fractions into plotly paper coordinates."""
    left, bottom, width, height = plot_area(config)
    return (
        (x * config.width_px - left) / width,
        (y * config.height_px - bottom) / height,
    )


@dataclass
class PanelGeometry:
    """Maps data coordinates of one panel onto canvas pixels (y up)."""

    x_range: tuple[float, float]
    y_range: tuple[float, float]
    box: tuple[float, float, float, float]  # x0, y0, x1, y1 in pixels

    @classmethod
    def from_domain(
        cls,
        x_domain: list[float],
        y_domain: list[float],
        x_range: tuple[date, date],
        y_range: tuple[float, float],
        config: ChartConfig,
    ) -> "PanelGeometry":
        left, bottom, width, height = plot_area(config)
        box = (
            left + x_domain[0] * width,
            bottom + y_domain[0] * height,
            left + x_domain[1] * width,
            bottom + y_domain[1] * height,
        )
        return cls(
            x_range=(to_day_number(x_range[0]), to_day_number(x_range[1])),
            y_range=y_range,
            box=box,
        )

    def to_pixels(self, xs: list[date], ys: list[float]) -> np.ndarray:
        x = np.array([to_day_number(v) for v in xs], dtype=float)
        y = np.asarray(ys, dtype=float)
        x0, y0, x1, y1 = self.box
        px = x0 + (x - self.x_range[0]) / (self.x_range[1] - self.x_range[0]) * (x1 - x0)
        py = y0 + (y - self.y_range[0]) / (self.y_range[1] - self.y_range[0]) * (y1 - y0)
        return np.column_stack([px, py])
