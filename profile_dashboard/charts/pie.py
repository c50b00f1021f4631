"""Pie / donut chart for part-of-whole series (audit pass vs fail)."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from profile_dashboard.charts.base import (
    STATE_NO_DATA,
    STATE_OK,
    TEXT_COLOR,
    ChartConfig,
    coerce_labeled,
    fmt_value,
    render_placeholder,
)
from profile_dashboard.charts.svg import (
    fmt_num,
    svg_close,
    svg_group,
    svg_open,
    svg_path,
    svg_rect,
    svg_text,
    svg_title,
)
from profile_dashboard.models import round_half_up

TAU = 2 * math.pi
# Slices start at 12 o'clock and run clockwise
START_ANGLE = -math.pi / 2
LEGEND_ROW = 20


@dataclass
class PieChartConfig(ChartConfig):
    width: int = 240
    height: int = 280
    palette: tuple[str, ...] = field(default_factory=lambda: ("#4CAF50", "#F44336"))
    inner_radius: float = 0.0
    min_label_angle: float = 0.35
    label_color: str = "#ffffff"
    show_legend: bool = True
    empty_message: str = "No data available"


@dataclass(frozen=True)
class Slice:
    label: str
    value: float
    start: float
    angle: float
    color: str

    @property
    def end(self) -> float:
        return self.start + self.angle

    @property
    def share(self) -> float:
        return self.angle / TAU


def _polar(cx, cy, r, angle) -> tuple[float, float]:
    return (cx + r * math.cos(angle), cy + r * math.sin(angle))


def _ring_path(cx, cy, outer, inner) -> str:
    """Full circle (or annulus when inner > 0) as an even-odd path."""
    d = (
        f"M {fmt_num(cx - outer)},{fmt_num(cy)} "
        f"a {fmt_num(outer)},{fmt_num(outer)} 0 1,0 {fmt_num(2 * outer)},0 "
        f"a {fmt_num(outer)},{fmt_num(outer)} 0 1,0 {fmt_num(-2 * outer)},0 Z"
    )
    if inner > 0:
        d += (
            f" M {fmt_num(cx - inner)},{fmt_num(cy)} "
            f"a {fmt_num(inner)},{fmt_num(inner)} 0 1,0 {fmt_num(2 * inner)},0 "
            f"a {fmt_num(inner)},{fmt_num(inner)} 0 1,0 {fmt_num(-2 * inner)},0 Z"
        )
    return d


def _slice_path(cx, cy, outer, inner, start, end) -> str:
    large_arc = 1 if end - start > math.pi else 0
    x1, y1 = _polar(cx, cy, outer, start)
    x2, y2 = _polar(cx, cy, outer, end)
    if inner <= 0:
        return (
            f"M {fmt_num(cx)},{fmt_num(cy)} L {fmt_num(x1)},{fmt_num(y1)} "
            f"A {fmt_num(outer)},{fmt_num(outer)} 0 {large_arc} 1 {fmt_num(x2)},{fmt_num(y2)} Z"
        )
    ix1, iy1 = _polar(cx, cy, inner, end)
    ix2, iy2 = _polar(cx, cy, inner, start)
    return (
        f"M {fmt_num(x1)},{fmt_num(y1)} "
        f"A {fmt_num(outer)},{fmt_num(outer)} 0 {large_arc} 1 {fmt_num(x2)},{fmt_num(y2)} "
        f"L {fmt_num(ix1)},{fmt_num(iy1)} "
        f"A {fmt_num(inner)},{fmt_num(inner)} 0 {large_arc} 0 {fmt_num(ix2)},{fmt_num(iy2)} Z"
    )


class PieChart:
    def __init__(self, series, config: PieChartConfig | None = None) -> None:
        self.config = config or PieChartConfig()
        self.points = coerce_labeled(series)
        self.total = sum(p.value for p in self.points)
        self.state = STATE_OK if self.total > 0 else STATE_NO_DATA

    def slices(self) -> list[Slice]:
        """Angular layout of every non-empty entry, in series order."""
        palette = self.config.palette
        out = []
        start = START_ANGLE
        for i, p in enumerate(self.points):
            angle = p.value / self.total * TAU
            if angle > 0:
                out.append(Slice(p.label, p.value, start, angle, palette[i % len(palette)]))
            start += angle
        return out

    def render(self) -> str:
        cfg = self.config
        if self.state != STATE_OK:
            return render_placeholder(cfg.width, cfg.height, cfg.empty_message, self.state, "chart-pie")

        legend_h = LEGEND_ROW * len(self.points) if cfg.show_legend else 0
        cx = cfg.width / 2
        cy = (cfg.height - legend_h) / 2
        outer = max(min(cfg.width, cfg.height - legend_h) / 2 - 10, 1)
        inner = outer * min(max(cfg.inner_radius, 0.0), 0.95)

        svg = svg_open(cfg.width, cfg.height, cls="chart chart-pie", label=cfg.title or "Pie chart",
                       state=self.state)

        for s in self.slices():
            if s.angle >= TAU - 1e-9:
                d = _ring_path(cx, cy, outer, inner)
                shape = svg_path(d, fill=s.color, cls="chart-pie-slice", extra='fill-rule="evenodd"')
            else:
                d = _slice_path(cx, cy, outer, inner, s.start, s.end)
                shape = svg_path(d, fill=s.color, cls="chart-pie-slice")

            label = ""
            if s.angle >= cfg.min_label_angle:
                mid = s.start + s.angle / 2
                lr = (outer + inner) / 2 if inner > 0 else outer * 0.62
                lx, ly = _polar(cx, cy, lr, mid)
                percent = round_half_up(s.value / self.total * 100)
                label = svg_text(lx, ly + 4, f"{percent}%", font_size=12,
                                 fill=cfg.label_color, anchor="middle", weight="600",
                                 cls="chart-pie-label")
            tip = svg_title(f"{s.label}: {fmt_value(s.value)} ({s.share * 100:.1f}%)")
            svg += svg_group(tip + shape + label, cls="chart-pie-item")

        if cfg.show_legend:
            legend = ""
            top = cfg.height - legend_h
            for i, p in enumerate(self.points):
                y = top + i * LEGEND_ROW + 4
                legend += svg_rect(16, y, 12, 12, fill=cfg.palette[i % len(cfg.palette)])
                legend += svg_text(34, y + 11, f"{p.label}: {fmt_value(p.value)}",
                                   font_size=12, fill=TEXT_COLOR, cls="chart-legend-label")
            svg += svg_group(legend, cls="chart-legend")

        svg += svg_close()
        return svg
