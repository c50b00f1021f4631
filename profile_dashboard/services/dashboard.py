"""Dashboard view model — stats cards plus the four rendered charts."""

import logging
from dataclasses import dataclass

from profile_dashboard.charts import STATE_ERROR, STATE_OK, build_chart, render_placeholder
from profile_dashboard.charts.base import fmt_value
from profile_dashboard.services.profile_data import ProfileDataAggregator

logger = logging.getLogger(__name__)

# Width given to each bar of the XP chart; the chart grows to fit
XP_BAR_SLOT = 120
XP_MIN_WIDTH = 600


@dataclass(frozen=True)
class DashboardChart:
    id: str
    title: str
    kind: str
    svg: str
    state: str

    @property
    def is_placeholder(self) -> bool:
        return self.state != STATE_OK


def _xp_options(series) -> dict:
    return {"width": max(XP_MIN_WIDTH, len(series) * XP_BAR_SLOT), "height": 300,
            "bar_color": "#3498db", "title": "XP by project"}


# chart id -> (title, kind, accessor name, options factory)
DASHBOARD_CHARTS = {
    "xp": ("XP Distribution", "bar", "get_xp_data", _xp_options),
    "progress": ("XP Progress", "line", "get_xp_progress_data",
                 lambda series: {"width": 500, "height": 300, "title": "Cumulative XP"}),
    "skills": ("Skills Overview", "radar", "get_skills_data",
               lambda series: {"width": 400, "height": 400, "max_value": 100, "levels": 5,
                               "title": "Skill proficiency"}),
    "audits": ("Audit Outcomes", "pie", "get_audit_data",
               lambda series: {"width": 240, "height": 280, "inner_radius": 0.55,
                               "title": "Audit pass/fail", "empty_message": "No audit data available"}),
}


def render_dashboard_chart(aggregator: ProfileDataAggregator, chart_id: str) -> DashboardChart:
    """Render one chart; a bad series is contained to this chart's placeholder."""
    title, kind, accessor, options_for = DASHBOARD_CHARTS[chart_id]
    try:
        series = getattr(aggregator, accessor)()
        options = options_for(series)
        chart = build_chart(kind, series, **options)
        return DashboardChart(chart_id, title, kind, chart.render(), chart.state)
    except ValueError:
        logger.exception("Failed to render %s chart", chart_id)
        svg = render_placeholder(400, 250, "Failed to load chart", STATE_ERROR, f"chart-{kind}")
        return DashboardChart(chart_id, title, kind, svg, STATE_ERROR)


def build_dashboard(aggregator: ProfileDataAggregator) -> dict:
    """Everything profile.html needs, from an aggregator that has been fetched."""
    user = aggregator.get_user_data()
    stats = aggregator.get_stats()
    charts = {chart_id: render_dashboard_chart(aggregator, chart_id) for chart_id in DASHBOARD_CHARTS}
    degraded = [o.domain for o in aggregator.outcomes.values() if o.degraded]
    if degraded:
        logger.warning("Dashboard rendered with degraded domains: %s", ", ".join(degraded))
    return {
        "user": user,
        "stats": stats,
        "total_xp_display": fmt_value(stats["totalXP"]),
        "charts": charts,
        "degraded_domains": degraded,
    }
