"""JSON / SVG API — GET /api/profile, GET /api/charts/{chart_id}.svg"""

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response

from profile_dashboard.graphql_client import GraphQLClient, Unauthorized
from profile_dashboard.services.dashboard import DASHBOARD_CHARTS, render_dashboard_chart
from profile_dashboard.services.profile_data import ProfileDataAggregator
from profile_dashboard.session import CookieTokenStore

router = APIRouter(prefix="/api")


def _fetched_aggregator(request: Request) -> ProfileDataAggregator:
    store = CookieTokenStore.from_request(request)
    if not store.has_token():
        raise Unauthorized()
    aggregator = ProfileDataAggregator(GraphQLClient(store))
    aggregator.fetch_all_data()
    return aggregator


@router.get("/profile")
def profile_json(request: Request):
    """Everything the dashboard shows, as JSON."""
    return _fetched_aggregator(request).to_dict()


@router.get("/charts/{chart_id}.svg")
def chart_svg(chart_id: str, request: Request):
    """One dashboard chart as a standalone SVG document."""
    if chart_id not in DASHBOARD_CHARTS:
        raise HTTPException(status_code=404, detail=f"Unknown chart: {chart_id}")
    chart = render_dashboard_chart(_fetched_aggregator(request), chart_id)
    return Response(chart.svg, media_type="image/svg+xml", headers={"X-Chart-State": chart.state})
