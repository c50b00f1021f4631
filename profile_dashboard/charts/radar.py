"""Radial (web) chart for skill scores."""

from __future__ import annotations

import math
from dataclasses import dataclass

from profile_dashboard.charts.base import (
    GRID_COLOR,
    STATE_INSUFFICIENT,
    STATE_NO_DATA,
    STATE_OK,
    ChartConfig,
    coerce_labeled,
    fmt_value,
    render_placeholder,
)
from profile_dashboard.charts.scale import LinearScale
from profile_dashboard.charts.svg import (
    svg_circle,
    svg_close,
    svg_group,
    svg_line,
    svg_open,
    svg_polygon,
    svg_text,
    svg_title,
)

# A polygon needs at least three vertices
MIN_AXES = 3


@dataclass
class RadarChartConfig(ChartConfig):
    width: int = 400
    height: int = 400
    max_value: float = 100
    levels: int = 5
    color: str = "#6366f1"
    background_color: str = "rgba(99, 102, 241, 0.2)"
    label_color: str = "#4b5563"
    label_padding: int = 60
    empty_message: str = "No skills data available"
    insufficient_message: str = "Need at least 3 skills to display chart"


def spoke_point(cx: float, cy: float, radius: float, index: int, n_axes: int) -> tuple[float, float]:
    """Vertex on spoke ``index``; spoke 0 points straight up (-90 degrees)."""
    angle = -math.pi / 2 + (2 * math.pi / n_axes) * index
    return (cx + radius * math.cos(angle), cy + radius * math.sin(angle))


class RadarChart:
    def __init__(self, series, config: RadarChartConfig | None = None) -> None:
        self.config = config or RadarChartConfig()
        self.points = coerce_labeled(series)
        if not self.points:
            self.state = STATE_NO_DATA
        elif len(self.points) < MIN_AXES:
            self.state = STATE_INSUFFICIENT
        else:
            self.state = STATE_OK

    @property
    def center(self) -> tuple[float, float]:
        return (self.config.width / 2, self.config.height / 2)

    @property
    def radius(self) -> float:
        cfg = self.config
        return max(min(cfg.width, cfg.height) / 2 - cfg.label_padding, 1)

    def vertices(self) -> list[tuple[float, float]]:
        """Data polygon vertices, one per series entry."""
        cx, cy = self.center
        n = len(self.points)
        scale = LinearScale((0, self.config.max_value), (0, self.radius))
        return [
            spoke_point(cx, cy, min(scale(p.value), self.radius), i, n)
            for i, p in enumerate(self.points)
        ]

    def render(self) -> str:
        cfg = self.config
        if self.state == STATE_NO_DATA:
            return render_placeholder(cfg.width, cfg.height, cfg.empty_message, self.state, "chart-radar")
        if self.state == STATE_INSUFFICIENT:
            return render_placeholder(cfg.width, cfg.height, cfg.insufficient_message, self.state,
                                      "chart-radar")

        cx, cy = self.center
        n = len(self.points)
        radius = self.radius
        svg = svg_open(cfg.width, cfg.height, cls="chart chart-radar", label=cfg.title or "Radar chart",
                       state=self.state)

        rings = ""
        for level in range(1, cfg.levels + 1):
            r = radius * level / cfg.levels
            ring = [spoke_point(cx, cy, r, i, n) for i in range(n)]
            rings += svg_polygon(ring, fill="none", stroke=GRID_COLOR, cls="chart-radar-level")
        svg += svg_group(rings, cls="chart-radar-levels")

        spokes = ""
        for i in range(n):
            ox, oy = spoke_point(cx, cy, radius, i, n)
            spokes += svg_line(cx, cy, ox, oy, stroke=GRID_COLOR, cls="chart-radar-spoke")
        svg += svg_group(spokes, cls="chart-radar-spokes")

        vertices = self.vertices()
        svg += svg_polygon(vertices, fill=cfg.background_color, stroke=cfg.color,
                           stroke_width=2, cls="chart-radar-area")

        markers = ""
        for p, (vx, vy) in zip(self.points, vertices):
            markers += svg_circle(vx, vy, 4, fill=cfg.color, cls="chart-point",
                                  inner=svg_title(f"{p.label}: {fmt_value(p.value)}"))
        svg += svg_group(markers, cls="chart-points")

        labels = ""
        for i, p in enumerate(self.points):
            lx, ly = spoke_point(cx, cy, radius + 18, i, n)
            if abs(lx - cx) < 1:
                anchor = "middle"
            elif lx > cx:
                anchor = "start"
            else:
                anchor = "end"
            labels += svg_text(lx, ly + 4, p.label, font_size=12, fill=cfg.label_color,
                               anchor=anchor, cls="chart-radar-label")
        svg += svg_group(labels, cls="chart-radar-labels")

        svg += svg_close()
        return svg
