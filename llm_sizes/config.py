"""Configuration settings for the LLM size chart."""

from datetime import date
from pathlib import Path
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GridArea(BaseModel):
    """Rectangle of grid cells, 1-indexed and inclusive (top, bottom, left, right)."""

    t: int
    b: int
    l: int
    r: int


class RepelConfig(BaseModel):
    """Tuning for the force-directed label layout."""

    seed: int = 2024
    force: float = 25.0
    max_overlaps: int = 13
    box_padding: float = 2.0  # pixels around each label box
    point_padding: float = 3.0  # pixels around each data point
    max_iter: int = 2000


class PanelConfig(BaseModel):
    """Axis limits, breaks and label layout for one chart layer."""

    x_limits: tuple[date, date] = (date(2017, 11, 1), date(2024, 8, 1))
    x_expand: float = 0.0
    y_limits: tuple[float, float]
    y_expand: float
    y_breaks: list[float]
    repel: RepelConfig = Field(default_factory=RepelConfig)


class ArrowConfig(BaseModel):
    """Arrow drawn over the whole canvas, in canvas fractions from bottom-left."""

    x: float = 0.15
    y: float = 0.52
    x_end: float = 0.23
    y_end: float = 0.40
    width: float = 5.0
    color: str = "#BFBFBF"


class ChartConfig(BaseModel):
    """Visual constants for the composed size chart."""

    # Canvas
    width_in: float = 10.0
    height_in: float = 10.0
    dpi: int = 300
    px_per_inch: int = 100  # layout resolution before rasterization scale
    margin_l: int = 80
    margin_r: int = 20
    margin_t: int = 20
    margin_b: int = 50

    # Text
    font_family: str = "Arial, sans-serif"
    axis_text_size: int = 14
    axis_title_size: int = 16
    label_text_size: int = 11

    # Colors (grey75 / grey95 / ColorBrewer Set1)
    highlight_color: str = "#BFBFBF"
    grid_color: str = "#F2F2F2"
    palette: list[str] = Field(
        default_factory=lambda: ["#E41A1C", "#377EB8", "#4DAF4A", "#984EA3", "#FF7F00"]
    )
    marker_size: int = 5
    legend_key_size: int = 12

    # Grey band marking the zoomed region on the full-range layer
    highlight_x: tuple[date, date] = (date(2017, 11, 1), date(2024, 8, 1))
    highlight_y: tuple[float, float] = (-20e9, 20e9)

    # Layout
    grid_rows: int = 10
    grid_cols: int = 10
    full_area: GridArea = Field(default_factory=lambda: GridArea(t=1, b=6, l=1, r=10))
    inset_area: GridArea = Field(default_factory=lambda: GridArea(t=7, b=10, l=2, r=9))
    grid_gap: float = 0.04  # room for the full panel's x axis title above the inset
    legend_position: tuple[float, float] = (0.125, 0.725)  # relative to the full panel

    full: PanelConfig = Field(
        default_factory=lambda: PanelConfig(
            y_limits=(-1e11, 1.975e12),
            y_expand=0.1,
            y_breaks=[1e8, 1e11, 5e11, 1e12, 2e12],
            repel=RepelConfig(seed=2024, force=25.0, max_overlaps=13),
        )
    )
    inset: PanelConfig = Field(
        default_factory=lambda: PanelConfig(
            x_expand=0.02,
            y_limits=(-1e9, 15e9),
            y_expand=0.01,
            y_breaks=[100e6, 1e9, 2.5e9, 5e9, 7.5e9, 10e9, 12.5e9, 15e9],
            repel=RepelConfig(seed=5202024, force=12.0, max_overlaps=10),
        )
    )
    arrow: ArrowConfig = Field(default_factory=ArrowConfig)

    @property
    def width_px(self) -> int:
        return int(self.width_in * self.px_per_inch)

    @property
    def height_px(self) -> int:
        return int(self.height_in * self.px_per_inch)

    @property
    def export_scale(self) -> float:
        """Multiplier from layout pixels to output pixels at the target DPI."""
        return self.dpi / self.px_per_inch


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="LLM_SIZES_", extra="ignore")

    # Paths
    project_root: Path = Field(default_factory=lambda: Path(__file__).parent.parent)
    cache_file: Path = Field(default=Path("data/data.csv"))
    output_file: Path = Field(default=Path("llm_size_plot.png"))

    # Remote sheet (anyone-with-the-link can view)
    sheet_id: str = "1HGxA9URfEeUYp48qNXMMOPBAt3a18mSsdYqI5WbeE5w"
    sheet_gid: str = "0"
    request_timeout: int = 60  # seconds

    # Data settings
    include_marker: str = "x"
    inset_max_parameters: float = 15e9

    chart: ChartConfig = Field(default_factory=ChartConfig)


# Global settings instance
settings = Settings()


def get_absolute_path(relative_path: Path | str) -> Path:
    """Convert relative path to absolute path from project root."""
    if isinstance(relative_path, str):
        relative_path = Path(relative_path)
    if relative_path.is_absolute():
        return relative_path
    return settings.project_root / relative_path


def ensure_dirs():
    """Create directories for the cache and the output image."""
    dirs = [
        get_absolute_path(settings.cache_file).parent,
        get_absolute_path(settings.output_file).parent,
    ]
    for d in dirs:
        d.mkdir(parents=True, exist_ok=True)
