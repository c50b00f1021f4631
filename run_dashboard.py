#!/usr/bin/env python3
"""Profile Dashboard — XP, audits and skills for a learning-platform account.

Launch: python3 run_dashboard.py
Serves at http://0.0.0.0:8000 (or PORT env var)
"""

import logging

import uvicorn

from profile_dashboard.config import GRAPHQL_URL, HOST, LOG_LEVEL, PORT, SIGNIN_URL


def main():
    print("=" * 60)
    print("  Profile Dashboard")
    print("=" * 60)

    print(f"\n  Sign-in:  {SIGNIN_URL}")
    print(f"  GraphQL:  {GRAPHQL_URL}")

    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"\nStarting server on {HOST}:{PORT}")
    url = f"http://{HOST}:{PORT}"
    print(f"\n  Dashboard: {url}")
    print("  Press Ctrl+C to stop\n")

    from profile_dashboard.app import create_app
    app = create_app()
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL)


if __name__ == "__main__":
    main()
