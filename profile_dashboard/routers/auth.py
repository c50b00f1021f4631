"""Login / logout routes — GET/POST /login, POST /logout"""

import logging

from fastapi import APIRouter, Form, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from profile_dashboard.config import WEB_TEMPLATES_DIR
from profile_dashboard.graphql_client import SESSION_EXPIRED_MESSAGE
from profile_dashboard.services.auth import AuthenticationFailed, login, logout
from profile_dashboard.session import CookieTokenStore

logger = logging.getLogger(__name__)

router = APIRouter()
templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))


def _login_page(request: Request, error: str = "", notice: str = "",
                identifier: str = "", status_code: int = 200):
    return templates.TemplateResponse(request, "login.html", {
        "active_page": "login",
        "error": error,
        "notice": notice,
        "identifier": identifier,
    }, status_code=status_code)


@router.get("/login")
def login_form(request: Request, expired: int = 0):
    notice = SESSION_EXPIRED_MESSAGE if expired else ""
    return _login_page(request, notice=notice)


@router.post("/login")
def login_submit(request: Request, identifier: str = Form(""), password: str = Form("")):
    store = CookieTokenStore.from_request(request)
    try:
        login(identifier.strip(), password, store)
    except AuthenticationFailed as e:
        return _login_page(request, error=str(e), identifier=identifier, status_code=401)

    response = RedirectResponse("/profile", status_code=303)
    return store.apply(response)


@router.post("/logout")
def logout_submit(request: Request):
    store = CookieTokenStore.from_request(request)
    logout(store)
    response = RedirectResponse("/login", status_code=303)
    return store.apply(response)
