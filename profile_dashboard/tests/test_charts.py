"""Tests for the SVG chart renderers — geometry, states, placeholders."""

import math
import re
import xml.etree.ElementTree as ET
from datetime import date

import pytest

from profile_dashboard.charts import (
    CHART_TYPES,
    STATE_INSUFFICIENT,
    STATE_NO_DATA,
    STATE_OK,
    BarChart,
    BarChartConfig,
    ChartDataError,
    LineChart,
    PieChart,
    PieChartConfig,
    RadarChart,
    build_chart,
    render_chart,
    render_placeholder,
)
from profile_dashboard.charts.pie import TAU
from profile_dashboard.charts.radar import spoke_point
from profile_dashboard.charts.svg import fmt_num, svg_open
from profile_dashboard.models import DatePoint, SeriesPoint

SVG_NS = "{http://www.w3.org/2000/svg}"


def _count(svg, cls):
    return len(re.findall(rf'class="{cls}"', svg))


def _parse(svg):
    return ET.fromstring(svg)


SAMPLE_SERIES = {
    "bar": [{"label": "go-reloaded", "value": 500}, {"label": "forum", "value": 350}],
    "line": [{"date": "2024-03-01", "value": 100}, {"date": "2024-03-05", "value": 250}],
    "radar": [{"label": "Go", "value": 80}, {"label": "Rust", "value": 40}, {"label": "SQL", "value": 60}],
    "pie": [{"label": "Pass", "value": 4}, {"label": "Fail", "value": 1}],
}


# ── Registry ────────────────────────────────────────────────


class TestRegistry:
    def test_four_chart_types(self):
        assert set(CHART_TYPES) == {"bar", "line", "radar", "pie"}

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown chart type"):
            build_chart("scatter", [])

    @pytest.mark.parametrize("kind", sorted(SAMPLE_SERIES))
    def test_renders_well_formed_svg(self, kind):
        svg = render_chart(kind, SAMPLE_SERIES[kind])
        root = _parse(svg)
        assert root.tag == f"{SVG_NS}svg"
        assert root.get("data-state") == STATE_OK
        assert root.get("viewBox").startswith("0 0 ")

    @pytest.mark.parametrize("kind", sorted(SAMPLE_SERIES))
    def test_empty_series_is_placeholder(self, kind):
        chart = build_chart(kind, [])
        svg = chart.render()
        assert chart.state != STATE_OK
        assert "chart-placeholder" in svg
        _parse(svg)

    def test_options_populate_config(self):
        chart = build_chart("bar", SAMPLE_SERIES["bar"], width=900, bar_color="#ff0000")
        assert chart.config.width == 900
        assert 'fill="#ff0000"' in chart.render()


class TestSvgHelpers:
    @pytest.mark.parametrize("value,expected", [(3, "3"), (1.0, "1"), (2.5, "2.5"), (-0.001, "0")])
    def test_fmt_num(self, value, expected):
        assert fmt_num(value) == expected

    def test_open_escapes_label(self):
        assert 'aria-label="a &lt;b&gt;"' in svg_open(10, 10, label="a <b>")

    def test_placeholder(self):
        svg = render_placeholder(300, 200, "Nothing here", STATE_NO_DATA, "chart-bar")
        root = _parse(svg)
        assert root.get("data-state") == STATE_NO_DATA
        assert "chart chart-placeholder chart-bar" == root.get("class")
        assert "Nothing here" in svg


# ── Bar ─────────────────────────────────────────────────────


class TestBarChart:
    def test_geometry(self):
        chart = BarChart([{"label": "a", "value": 100}, {"label": "b", "value": 50}],
                         BarChartConfig(width=600, height=300))
        (x0, y0, w0, h0), (x1, y1, w1, h1) = chart.bar_geometry()
        assert (x0, w0) == (10, 280)
        assert h0 == pytest.approx(260)
        assert y0 == pytest.approx(20)
        assert x1 == 310
        assert h1 == pytest.approx(130)
        assert y1 == pytest.approx(150)

    def test_one_group_per_bar(self):
        svg = BarChart(SAMPLE_SERIES["bar"]).render()
        assert _count(svg, "chart-bar-item") == 2
        assert _count(svg, "chart-bar-rect") == 2
        assert "<title>go-reloaded: 500</title>" in svg

    def test_tooltip_prefers_title(self):
        svg = BarChart([SeriesPoint("go-reloaded", 500, title="Go Reloaded")]).render()
        assert "<title>Go Reloaded: 500</title>" in svg
        assert ">go-reloaded</text>" in svg

    def test_dict_title_kept(self):
        chart = BarChart([{"label": "forum", "value": 350, "title": "Forum"}])
        assert chart.points[0].title == "Forum"

    def test_value_captions_use_thousands_separator(self):
        svg = BarChart([{"label": "big", "value": 12500}]).render()
        assert ">12,500</text>" in svg

    def test_labels_escaped(self):
        svg = BarChart([{"label": "<script>", "value": 10}]).render()
        assert "<script>" not in svg
        assert "&lt;script&gt;" in svg

    def test_all_zero_is_no_data(self):
        chart = BarChart([{"label": "a", "value": 0}])
        assert chart.state == STATE_NO_DATA
        assert "No XP data available" in chart.render()

    def test_negative_value_rejected(self):
        with pytest.raises(ChartDataError, match="negative"):
            BarChart([{"label": "a", "value": -1}])

    def test_non_numeric_value_rejected(self):
        with pytest.raises(ChartDataError, match="not numeric"):
            BarChart([{"label": "a", "value": "lots"}])

    def test_missing_keys_rejected(self):
        with pytest.raises(ChartDataError):
            BarChart([{"name": "a"}])

    def test_input_is_copied(self):
        series = [SeriesPoint("a", 10)]
        chart = BarChart(series)
        before = chart.render()
        series.append(SeriesPoint("b", 20))
        assert chart.render() == before


# ── Line ────────────────────────────────────────────────────


class TestLineChart:
    def test_points_and_tooltips(self):
        svg = LineChart([DatePoint(date(2024, 3, 1), 150), DatePoint(date(2024, 3, 4), 175)]).render()
        assert _count(svg, "chart-point") == 2
        assert "<title>2024-03-01: 150 XP</title>" in svg
        assert _count(svg, "chart-area") == 1
        assert _count(svg, "chart-line-path") == 1

    def test_x_spans_plot_area(self):
        chart = LineChart(SAMPLE_SERIES["line"])
        coords = chart.coordinates()
        cfg = chart.config
        assert coords[0][0] == pytest.approx(cfg.padding_left)
        assert coords[-1][0] == pytest.approx(cfg.width - cfg.padding_right)

    def test_peak_leaves_headroom(self):
        chart = LineChart(SAMPLE_SERIES["line"])
        peak_y = min(y for _, y in chart.coordinates())
        assert peak_y > chart.config.padding_top

    def test_string_dates_sorted(self):
        chart = LineChart([{"date": "2024-03-05", "value": 2}, {"date": "2024-03-01", "value": 1}])
        assert [p.date for p in chart.points] == [date(2024, 3, 1), date(2024, 3, 5)]

    def test_single_point_centered(self):
        chart = LineChart([{"date": "2024-03-01", "value": 100}])
        (x, _), = chart.coordinates()
        cfg = chart.config
        assert x == pytest.approx((cfg.padding_left + cfg.width - cfg.padding_right) / 2)
        _parse(chart.render())

    def test_bad_date_rejected(self):
        with pytest.raises(ChartDataError, match="Unparseable date"):
            LineChart([{"date": "yesterday", "value": 1}])

    def test_empty_placeholder_message(self):
        assert "No XP progress data available" in LineChart([]).render()

    def test_grid_and_axis_labels(self):
        svg = LineChart(SAMPLE_SERIES["line"]).render()
        assert _count(svg, "chart-grid-h") == 5
        assert _count(svg, "chart-grid-v") == 2
        assert "Mar 01" in svg


# ── Radar ───────────────────────────────────────────────────


class TestRadarChart:
    def test_no_skills_is_no_data(self):
        chart = RadarChart([])
        svg = chart.render()
        assert chart.state == STATE_NO_DATA
        assert "No skills data available" in svg
        assert "chart-radar-area" not in svg

    def test_two_skills_insufficient(self):
        chart = RadarChart(SAMPLE_SERIES["radar"][:2])
        svg = chart.render()
        assert chart.state == STATE_INSUFFICIENT
        assert "Need at least 3 skills to display chart" in svg
        assert "chart-radar-area" not in svg

    def test_three_skills_three_vertices(self):
        svg = RadarChart(SAMPLE_SERIES["radar"]).render()
        area = _parse(svg).find(f".//{SVG_NS}polygon[@class='chart-radar-area']")
        assert len(area.get("points").split()) == 3

    def test_level_rings_and_spokes(self):
        svg = RadarChart(SAMPLE_SERIES["radar"]).render()
        assert _count(svg, "chart-radar-level") == 5
        assert _count(svg, "chart-radar-spoke") == 3
        assert _count(svg, "chart-radar-label") == 3

    def test_first_spoke_points_up(self):
        chart = RadarChart([{"label": s, "value": 100} for s in ("a", "b", "c", "d")])
        x, y = chart.vertices()[0]
        cx, cy = chart.center
        assert x == pytest.approx(cx)
        assert y == pytest.approx(cy - chart.radius)

    def test_values_clamped_to_max(self):
        chart = RadarChart([{"label": s, "value": 250} for s in ("a", "b", "c")])
        cx, cy = chart.center
        for x, y in chart.vertices():
            assert math.hypot(x - cx, y - cy) == pytest.approx(chart.radius)

    def test_spoke_point_quarter_turn(self):
        x, y = spoke_point(0, 0, 10, 1, 4)
        assert (x, y) == (pytest.approx(10), pytest.approx(0, abs=1e-9))


# ── Pie ─────────────────────────────────────────────────────


class TestPieChart:
    def test_zero_total_placeholder(self):
        chart = PieChart([{"label": "Pass", "value": 0}, {"label": "Fail", "value": 0}])
        svg = chart.render()
        assert chart.state == STATE_NO_DATA
        assert "chart-pie-slice" not in svg

    def test_slices_and_labels(self):
        svg = PieChart(SAMPLE_SERIES["pie"]).render()
        assert _count(svg, "chart-pie-slice") == 2
        assert ">80%</text>" in svg
        assert ">20%</text>" in svg
        assert "Pass: 4" in svg

    def test_labels_round_half_up(self):
        svg = PieChart([{"label": "Pass", "value": 1}, {"label": "Fail", "value": 7}]).render()
        assert ">13%</text>" in svg
        assert ">88%</text>" in svg

    def test_first_slice_starts_at_top(self):
        chart = PieChart(SAMPLE_SERIES["pie"])
        svg = chart.render()
        # 240x280 with a two-row legend: center (120, 120), radius 110
        assert 'd="M 120,120 L 120,10 ' in svg

    def test_shares_cover_the_circle(self):
        slices = PieChart(SAMPLE_SERIES["pie"]).slices()
        assert sum(s.angle for s in slices) == pytest.approx(TAU)
        assert slices[0].share == pytest.approx(0.8)

    def test_single_nonzero_entry_is_full_ring(self):
        svg = PieChart([{"label": "Pass", "value": 5}, {"label": "Fail", "value": 0}]).render()
        assert _count(svg, "chart-pie-slice") == 1
        assert 'fill-rule="evenodd"' in svg
        assert ">100%</text>" in svg

    def test_donut_has_inner_arc(self):
        svg = PieChart(SAMPLE_SERIES["pie"], PieChartConfig(inner_radius=0.5)).render()
        first = re.search(r'<path d="([^"]+)"', svg).group(1)
        assert first.count("A ") == 2

    def test_tiny_slice_unlabeled(self):
        svg = PieChart([{"label": "Pass", "value": 99}, {"label": "Fail", "value": 1}]).render()
        assert _count(svg, "chart-pie-label") == 1

    def test_legend_optional(self):
        svg = PieChart(SAMPLE_SERIES["pie"], PieChartConfig(show_legend=False)).render()
        assert "chart-legend" not in svg
