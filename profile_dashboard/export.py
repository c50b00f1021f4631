#!/usr/bin/env python3
"""
Export a profile dashboard to disk — one SVG per chart plus a JSON summary.

Usage:
    profile-export --identifier alice --out ./alice             # Password from PROFILE_PASSWORD
    profile-export --identifier alice --password s3cret --out .  # Explicit password
    profile-export --out ./alice                                 # Reuse the saved token
    profile-export --logout                                      # Forget the saved token

Writes xp.svg, progress.svg, skills.svg, audits.svg and profile.json.
The token is kept in TOKEN_FILE (default ~/.profile-dashboard/token.json).
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from profile_dashboard.charts.base import fmt_value
from profile_dashboard.config import LOG_LEVEL, TOKEN_FILE
from profile_dashboard.graphql_client import GraphQLClient, GraphQLError, SessionExpired
from profile_dashboard.services.auth import AuthenticationFailed, login, logout
from profile_dashboard.services.dashboard import DASHBOARD_CHARTS, render_dashboard_chart
from profile_dashboard.services.profile_data import ProfileDataAggregator
from profile_dashboard.session import FileTokenStore

logger = logging.getLogger(__name__)


def export_profile(aggregator: ProfileDataAggregator, out_dir: Path) -> list[Path]:
    """Write every dashboard chart and the JSON snapshot. Returns the paths written."""
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for chart_id in DASHBOARD_CHARTS:
        chart = render_dashboard_chart(aggregator, chart_id)
        path = out_dir / f"{chart_id}.svg"
        path.write_text(chart.svg)
        written.append(path)
        print(f"  -> {path.name} ({chart.state})")

    path = out_dir / "profile.json"
    path.write_text(json.dumps(aggregator.to_dict(), indent=2))
    written.append(path)
    print(f"  -> {path.name}")
    return written


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Export a learning-platform profile as SVG charts and JSON",
    )
    parser.add_argument("--identifier", help="Username or email to sign in with")
    parser.add_argument("--password", default=os.environ.get("PROFILE_PASSWORD"),
                        help="Password (default: PROFILE_PASSWORD env var)")
    parser.add_argument("--out", type=Path, default=Path("."),
                        help="Output directory (default: current directory)")
    parser.add_argument("--token-file", type=Path, default=TOKEN_FILE,
                        help=f"Where the session token is kept (default: {TOKEN_FILE})")
    parser.add_argument("--logout", action="store_true",
                        help="Delete the saved token and exit")
    args = parser.parse_args(argv)

    logging.basicConfig(level=LOG_LEVEL.upper(), format="%(levelname)s %(name)s: %(message)s")
    store = FileTokenStore(args.token_file)

    if args.logout:
        logout(store)
        print(f"Removed saved token {args.token_file}")
        return 0

    if args.identifier:
        print(f"[1/3] Signing in as {args.identifier}...")
        try:
            login(args.identifier, args.password or "", store)
        except AuthenticationFailed as e:
            print(f"Error: {e}")
            return 1
    elif store.has_token():
        print(f"[1/3] Reusing saved token from {args.token_file}")
    else:
        print("Error: no saved token. Pass --identifier (and --password or PROFILE_PASSWORD).")
        return 1

    print("[2/3] Fetching profile data...")
    aggregator = ProfileDataAggregator(GraphQLClient(store))
    try:
        outcomes = aggregator.fetch_all_data()
    except SessionExpired as e:
        print(f"Error: {e}")
        return 1
    except GraphQLError as e:
        print(f"Error loading profile: {e}")
        return 1

    for outcome in outcomes.values():
        if outcome.degraded:
            print(f"  WARNING: {outcome.domain} unavailable ({outcome.error})")

    print(f"[3/3] Writing charts to {args.out}")
    export_profile(aggregator, args.out)

    stats = aggregator.get_stats()
    print(f"\nDone. {aggregator.user.login}: {fmt_value(stats['totalXP'])} XP, audit ratio {stats['auditRatio']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
