"""Vertical bar chart for labeled series (XP per project)."""

from __future__ import annotations

from dataclasses import dataclass

from profile_dashboard.charts.base import (
    STATE_NO_DATA,
    STATE_OK,
    TEXT_COLOR,
    ChartConfig,
    coerce_labeled,
    fmt_value,
    render_placeholder,
)
from profile_dashboard.charts.scale import LinearScale
from profile_dashboard.charts.svg import svg_close, svg_group, svg_open, svg_rect, svg_text, svg_title

# Vertical space reserved for labels (below) and value captions (above)
BAR_MARGIN = 40
# Gap between a bar and the edge of its slot
BAR_INSET = 10


@dataclass
class BarChartConfig(ChartConfig):
    width: int = 600
    height: int = 300
    bar_color: str = "#3498db"
    empty_message: str = "No XP data available"


class BarChart:
    def __init__(self, series, config: BarChartConfig | None = None) -> None:
        self.config = config or BarChartConfig()
        self.points = coerce_labeled(series)
        self.max_value = max((p.value for p in self.points), default=0)
        self.state = STATE_OK if self.points and self.max_value > 0 else STATE_NO_DATA

    def bar_geometry(self) -> list[tuple[float, float, float, float]]:
        """(x, y, width, height) for every bar, in series order."""
        cfg = self.config
        n = len(self.points)
        slot = cfg.width / n
        scale = LinearScale((0, self.max_value), (0, cfg.height - BAR_MARGIN))
        bar_w = max(slot - 2 * BAR_INSET, 1)
        inset = (slot - bar_w) / 2
        geometry = []
        for i, p in enumerate(self.points):
            h = scale(p.value)
            geometry.append((i * slot + inset, cfg.height - h - 20, bar_w, h))
        return geometry

    def render(self) -> str:
        cfg = self.config
        if self.state != STATE_OK:
            return render_placeholder(cfg.width, cfg.height, cfg.empty_message, self.state, "chart-bar")

        svg = svg_open(cfg.width, cfg.height, cls="chart chart-bar", label=cfg.title or "Bar chart",
                       state=self.state)
        for p, (x, y, w, h) in zip(self.points, self.bar_geometry()):
            cx = x + w / 2
            bar = svg_rect(x, y, w, h, fill=cfg.bar_color, cls="chart-bar-rect")
            caption = svg_text(cx, y - 4, fmt_value(p.value), font_size=10, fill=TEXT_COLOR,
                               anchor="middle", cls="chart-bar-value")
            label = svg_text(cx, cfg.height - 5, p.label, font_size=10, fill=TEXT_COLOR,
                             anchor="middle", cls="chart-bar-label")
            tip = svg_title(f"{p.title or p.label}: {fmt_value(p.value)}")
            svg += svg_group(tip + bar + caption + label, cls="chart-bar-item")
        svg += svg_close()
        return svg
