"""Profile Dashboard configuration — loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

REPO_ROOT = Path(__file__).resolve().parent.parent

# Jinja2 templates for the web UI
WEB_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent / "static"

# Learning platform endpoints
PLATFORM_BASE_URL = os.environ.get(
    "PLATFORM_BASE_URL", "https://learn.zone01kisumu.ke/api"
).rstrip("/")
SIGNIN_URL = f"{PLATFORM_BASE_URL}/auth/signin"
GRAPHQL_URL = f"{PLATFORM_BASE_URL}/graphql-engine/v1/graphql"

# Seconds before a platform request is abandoned
REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "30"))

# Session token storage
TOKEN_COOKIE_NAME = os.environ.get("TOKEN_COOKIE_NAME", "jwt_token")
COOKIE_SECURE = os.environ.get("COOKIE_SECURE", "0") == "1"
TOKEN_FILE = Path(
    os.environ.get("TOKEN_FILE", str(Path.home() / ".profile-dashboard" / "token.json"))
)

# Server
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "info")
