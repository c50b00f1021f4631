"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from profile_dashboard.config import GRAPHQL_URL, STATIC_DIR, TOKEN_COOKIE_NAME, WEB_TEMPLATES_DIR
from profile_dashboard.graphql_client import GraphQLError, SessionExpired, Unauthorized
from profile_dashboard.routers import api, auth, profile

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Profile dashboard using GraphQL endpoint %s", GRAPHQL_URL)
    yield


def _is_api(request: Request) -> bool:
    return request.url.path.startswith("/api/")


def _to_login(location: str) -> RedirectResponse:
    response = RedirectResponse(location, status_code=303)
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
    return response


async def session_expired_handler(request: Request, exc: SessionExpired):
    logger.info("Session expired on %s", request.url.path)
    if _is_api(request):
        response = JSONResponse({"detail": str(exc)}, status_code=401)
        response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
        return response
    return _to_login("/login?expired=1")


async def unauthorized_handler(request: Request, exc: Unauthorized):
    if _is_api(request):
        return JSONResponse({"detail": str(exc)}, status_code=401)
    return _to_login("/login")


async def graphql_error_handler(request: Request, exc: GraphQLError):
    logger.error("Profile load failed on %s: %s", request.url.path, exc)
    if _is_api(request):
        return JSONResponse({"detail": str(exc)}, status_code=502)
    return templates.TemplateResponse(request, "error.html", {
        "active_page": "error",
        "message": str(exc),
    }, status_code=502)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and not _is_api(request):
        return templates.TemplateResponse(request, "not_found.html", {
            "active_page": "not_found",
            "path": request.url.path,
        }, status_code=404)
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code,
                        headers=getattr(exc, "headers", None))


def create_app() -> FastAPI:
    app = FastAPI(
        title="Profile Dashboard",
        description="Learning-platform profile dashboard: XP, audits and skills as SVG charts.",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Static files
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    @app.get("/health", include_in_schema=False)
    async def health():
        return {"status": "ok"}

    # Pages (hidden from API docs)
    for r in [profile, auth]:
        app.include_router(r.router, include_in_schema=False)

    app.include_router(api.router)

    # SessionExpired is matched before its Unauthorized base
    app.add_exception_handler(SessionExpired, session_expired_handler)
    app.add_exception_handler(Unauthorized, unauthorized_handler)
    app.add_exception_handler(GraphQLError, graphql_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    return app
