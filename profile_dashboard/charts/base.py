"""Shared chart plumbing: config, series validation, placeholders.

Every chart type implements the same small surface:

    chart = SomeChart(series, config)
    chart.state      # "ok", "no-data" or "insufficient-data"
    chart.render()   # standalone <svg> string

Charts copy their input into a private tuple on construction and never
touch it again, so a chart is a one-shot snapshot of the data it was given.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Protocol

from profile_dashboard.charts.svg import svg_close, svg_open, svg_rect, svg_text
from profile_dashboard.models import DatePoint, SeriesPoint

STATE_OK = "ok"
STATE_NO_DATA = "no-data"
STATE_INSUFFICIENT = "insufficient-data"
STATE_ERROR = "error"

DEFAULT_PALETTE = ("#3498db", "#2980b9", "#6366f1", "#4CAF50", "#F44336", "#F59E0B")
TEXT_COLOR = "#4b5563"
GRID_COLOR = "#e5e7eb"
MUTED_COLOR = "#9ca3af"


class ChartDataError(ValueError):
    """A series contains values the chart cannot draw."""


class Chart(Protocol):
    state: str

    def render(self) -> str:
        ...


@dataclass
class ChartConfig:
    width: int = 400
    height: int = 250
    palette: tuple[str, ...] = field(default_factory=lambda: DEFAULT_PALETTE)
    title: str = ""
    empty_message: str = "No data available"


def _check_value(value, label, non_negative: bool) -> float:
    try:
        num = float(value)
    except (TypeError, ValueError) as e:
        raise ChartDataError(f"Value for {label!r} is not numeric: {value!r}") from e
    if not math.isfinite(num):
        raise ChartDataError(f"Value for {label!r} is not finite: {value!r}")
    if non_negative and num < 0:
        raise ChartDataError(f"Value for {label!r} is negative: {value!r}")
    return num


def coerce_labeled(series: Iterable, non_negative: bool = True) -> tuple[SeriesPoint, ...]:
    """Copy a ``{label, value}`` series into validated SeriesPoints."""
    points = []
    for item in series or ():
        if isinstance(item, SeriesPoint):
            label, value, title = item.label, item.value, item.title
        elif isinstance(item, dict):
            if "label" not in item or "value" not in item:
                raise ChartDataError(f"Series entry needs 'label' and 'value': {item!r}")
            label, value, title = item["label"], item["value"], item.get("title") or ""
        else:
            raise ChartDataError(f"Unsupported series entry: {item!r}")
        points.append(SeriesPoint(label=str(label), value=_check_value(value, label, non_negative),
                                  title=str(title)))
    return tuple(points)


def _coerce_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError as e:
        raise ChartDataError(f"Unparseable date: {value!r}") from e


def coerce_dated(series: Iterable) -> tuple[DatePoint, ...]:
    """Copy a ``{date, value}`` series into validated DatePoints, sorted by date."""
    points = []
    for item in series or ():
        if isinstance(item, DatePoint):
            when, value = item.date, item.value
        elif isinstance(item, dict):
            if "date" not in item or "value" not in item:
                raise ChartDataError(f"Series entry needs 'date' and 'value': {item!r}")
            when, value = item["date"], item["value"]
        else:
            raise ChartDataError(f"Unsupported series entry: {item!r}")
        day = _coerce_date(when)
        points.append(DatePoint(date=day, value=_check_value(value, day, non_negative=False)))
    return tuple(sorted(points, key=lambda p: p.date))


def fmt_value(value: float) -> str:
    """Thousands-separated, with one decimal only when needed."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.1f}"


def render_placeholder(width: int, height: int, message: str,
                       state: str = STATE_NO_DATA, cls: str = "") -> str:
    """Empty-state drawing shown instead of a degenerate chart."""
    classes = "chart chart-placeholder" + (f" {cls}" if cls else "")
    svg = svg_open(width, height, cls=classes, label=message, state=state)
    svg += svg_rect(0, 0, width, height, fill="#f9fafb", stroke=GRID_COLOR, stroke_width=1)
    svg += svg_text(width / 2, height / 2, message, font_size=14, fill=MUTED_COLOR,
                    anchor="middle", cls="chart-placeholder-message")
    svg += svg_close()
    return svg
