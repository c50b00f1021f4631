"""Line chart with a filled area, for dated series (cumulative XP)."""

from __future__ import annotations

from dataclasses import dataclass

from profile_dashboard.charts.base import (
    GRID_COLOR,
    STATE_NO_DATA,
    STATE_OK,
    TEXT_COLOR,
    ChartConfig,
    coerce_dated,
    fmt_value,
    render_placeholder,
)
from profile_dashboard.charts.scale import LinearScale, TimeScale
from profile_dashboard.charts.svg import (
    fmt_num,
    svg_circle,
    svg_close,
    svg_group,
    svg_line,
    svg_open,
    svg_path,
    svg_text,
    svg_title,
)

# Headroom above the peak so it is not clipped at the top edge
HEADROOM = 1.1
Y_TICKS = 5
MAX_X_TICKS = 6


@dataclass
class LineChartConfig(ChartConfig):
    width: int = 500
    height: int = 300
    padding_top: int = 20
    padding_right: int = 20
    padding_bottom: int = 40
    padding_left: int = 55
    line_color: str = "#3498db"
    area_color: str = "rgba(52, 152, 219, 0.2)"
    point_color: str = "#2980b9"
    point_radius: float = 4
    unit: str = "XP"
    empty_message: str = "No XP progress data available"


class LineChart:
    def __init__(self, series, config: LineChartConfig | None = None) -> None:
        self.config = config or LineChartConfig()
        self.points = coerce_dated(series)
        self.state = STATE_OK if self.points else STATE_NO_DATA

    def scales(self) -> tuple[TimeScale, LinearScale]:
        cfg = self.config
        values = [p.value for p in self.points]
        lo, hi = min(values), max(values)
        x = TimeScale(
            (self.points[0].date, self.points[-1].date),
            (cfg.padding_left, cfg.width - cfg.padding_right),
        )
        y = LinearScale(
            (lo, max(hi * HEADROOM, lo)),
            (cfg.height - cfg.padding_bottom, cfg.padding_top),
        )
        return x, y

    def coordinates(self) -> list[tuple[float, float]]:
        x, y = self.scales()
        return [(x(p.date), y(p.value)) for p in self.points]

    def render(self) -> str:
        cfg = self.config
        if self.state != STATE_OK:
            return render_placeholder(cfg.width, cfg.height, cfg.empty_message, self.state, "chart-line")

        x, y = self.scales()
        coords = self.coordinates()
        left, right = cfg.padding_left, cfg.width - cfg.padding_right
        top, baseline = cfg.padding_top, cfg.height - cfg.padding_bottom

        svg = svg_open(cfg.width, cfg.height, cls="chart chart-line", label=cfg.title or "Line chart",
                       state=self.state)

        # Grid: horizontal value lines, then vertical date lines
        grid = ""
        for value in y.ticks(Y_TICKS):
            gy = y(value)
            grid += svg_line(left, gy, right, gy, stroke=GRID_COLOR, cls="chart-grid-h")
            grid += svg_text(left - 6, gy + 4, fmt_value(round(value)), font_size=10,
                             fill=TEXT_COLOR, anchor="end", cls="chart-axis-label")
        dates = [p.date for p in self.points]
        for day in x.ticks(dates, MAX_X_TICKS):
            gx = x(day)
            grid += svg_line(gx, top, gx, baseline, stroke=GRID_COLOR, cls="chart-grid-v")
            grid += svg_text(gx, baseline + 16, day.strftime("%b %d"), font_size=10,
                             fill=TEXT_COLOR, anchor="middle", cls="chart-axis-label")
        svg += svg_group(grid, cls="chart-grid")

        # Area under the line
        first_x, last_x = coords[0][0], coords[-1][0]
        area = f"M {fmt_num(first_x)},{fmt_num(baseline)} "
        area += " ".join(f"L {fmt_num(px)},{fmt_num(py)}" for px, py in coords)
        area += f" L {fmt_num(last_x)},{fmt_num(baseline)} Z"
        svg += svg_path(area, fill=cfg.area_color, cls="chart-area")

        line = "M " + " L ".join(f"{fmt_num(px)},{fmt_num(py)}" for px, py in coords)
        svg += svg_path(line, stroke=cfg.line_color, stroke_width=2, cls="chart-line-path")

        # Points with tooltips
        markers = ""
        for p, (px, py) in zip(self.points, coords):
            tip = svg_title(f"{p.date.isoformat()}: {fmt_value(p.value)} {cfg.unit}".rstrip())
            markers += svg_circle(px, py, cfg.point_radius, fill=cfg.point_color,
                                  cls="chart-point", inner=tip)
        svg += svg_group(markers, cls="chart-points")

        svg += svg_close()
        return svg
