"""Chart registry — maps chart kinds to renderers and their config types."""

from profile_dashboard.charts.bar import BarChart, BarChartConfig
from profile_dashboard.charts.base import (
    STATE_ERROR,
    STATE_INSUFFICIENT,
    STATE_NO_DATA,
    STATE_OK,
    ChartDataError,
    render_placeholder,
)
from profile_dashboard.charts.line import LineChart, LineChartConfig
from profile_dashboard.charts.pie import PieChart, PieChartConfig
from profile_dashboard.charts.radar import RadarChart, RadarChartConfig

CHART_TYPES: dict[str, tuple[type, type]] = {
    "bar": (BarChart, BarChartConfig),
    "line": (LineChart, LineChartConfig),
    "radar": (RadarChart, RadarChartConfig),
    "pie": (PieChart, PieChartConfig),
}


def build_chart(kind: str, series, **options):
    """Construct a chart of ``kind``; ``options`` populate its config."""
    if kind not in CHART_TYPES:
        raise ValueError(f"Unknown chart type: {kind}")
    chart_cls, config_cls = CHART_TYPES[kind]
    return chart_cls(series, config_cls(**options))


def render_chart(kind: str, series, **options) -> str:
    return build_chart(kind, series, **options).render()


__all__ = [
    "BarChart", "BarChartConfig", "LineChart", "LineChartConfig",
    "PieChart", "PieChartConfig", "RadarChart", "RadarChartConfig",
    "CHART_TYPES", "ChartDataError", "build_chart", "render_chart", "render_placeholder",
    "STATE_OK", "STATE_NO_DATA", "STATE_INSUFFICIENT", "STATE_ERROR",
]
