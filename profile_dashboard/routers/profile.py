"""Dashboard routes — GET / and GET /profile"""

from datetime import date

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from profile_dashboard.config import WEB_TEMPLATES_DIR
from profile_dashboard.graphql_client import GraphQLClient
from profile_dashboard.services.dashboard import build_dashboard
from profile_dashboard.services.profile_data import ProfileDataAggregator
from profile_dashboard.session import CookieTokenStore

router = APIRouter()
templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))


@router.get("/")
def index(request: Request):
    store = CookieTokenStore.from_request(request)
    return RedirectResponse("/profile" if store.has_token() else "/login", status_code=303)


@router.get("/profile")
def profile(request: Request):
    store = CookieTokenStore.from_request(request)
    if not store.has_token():
        return RedirectResponse("/login", status_code=303)

    aggregator = ProfileDataAggregator(GraphQLClient(store))
    aggregator.fetch_all_data()
    dashboard = build_dashboard(aggregator)

    return templates.TemplateResponse(request, "profile.html", {
        "active_page": "profile",
        "year": date.today().year,
        **dashboard,
    })
