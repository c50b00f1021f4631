"""Profile data aggregator — fetches the four data domains and shapes chart series.

Identity is fetched first; transactions, results and progress are then
fetched concurrently and independently. A query or transport failure in one
of those degrades only that domain (recorded as a DomainOutcome); an
authorization failure always propagates.

Each fetch run carries a generation number. invalidate() bumps it, and a
run whose generation is no longer current discards its responses instead
of committing them.
"""

from __future__ import annotations

import logging
import math
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from profile_dashboard.graphql_client import (
    GraphQLClient,
    QueryFailed,
    TransportError,
    Unauthorized,
)
from profile_dashboard.models import (
    DatePoint,
    ProfileObject,
    Progress,
    Result,
    SeriesPoint,
    Transaction,
    User,
    parse_object,
    parse_progress,
    parse_result,
    parse_transaction,
    parse_user,
    round_half_up,
    to_number,
)
from profile_dashboard.queries import (
    AUDIT_RESULTS_QUERY,
    OBJECT_NAMES_QUERY,
    PROGRESS_QUERY,
    USER_QUERY,
    XP_TRANSACTIONS_QUERY,
)
from profile_dashboard.services.skills import skill_series

logger = logging.getLogger(__name__)

DOMAINS = ("transactions", "results", "progress")

TOP_PROJECTS = 10
MAX_PROGRESS_POINTS = 20

# Outcome statuses
OK = "ok"
EMPTY = "empty"
ERROR = "error"
DISCARDED = "discarded"


@dataclass(frozen=True)
class DomainOutcome:
    """How one data domain fared in the last fetch."""
    domain: str
    status: str
    rows: int = 0
    error: str | None = None

    @property
    def degraded(self) -> bool:
        return self.status in (ERROR, DISCARDED)

    def to_dict(self) -> dict:
        return {"domain": self.domain, "status": self.status, "rows": self.rows, "error": self.error}


def _basename(path: str) -> str:
    return path.split("/")[-1] or path


def downsample(points: list, limit: int = MAX_PROGRESS_POINTS) -> list:
    """Keep every k-th point so at most ``limit`` remain, always ending on the last one."""
    if len(points) <= limit:
        return list(points)
    stride = math.ceil(len(points) / (limit - 1))
    sampled = points[::stride]
    if sampled[-1] is not points[-1]:
        sampled.append(points[-1])
    return sampled


class ProfileDataAggregator:
    """Owns the normalized data for one session. Accessors are pure."""

    def __init__(self, client: GraphQLClient) -> None:
        self.client = client
        self._lock = threading.Lock()
        self._generation = 0

        self.user: User | None = None
        self.transactions: list[Transaction] = []
        self.results: list[Result] = []
        self.progress: list[Progress] = []
        self.objects: dict = {}
        self.outcomes: dict[str, DomainOutcome] = {}

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def invalidate(self) -> None:
        """Mark any in-flight fetch as stale; its responses will be dropped."""
        with self._lock:
            self._generation += 1

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def fetch_all_data(self) -> dict[str, DomainOutcome]:
        """Populate the aggregator. Returns the per-domain outcomes."""
        with self._lock:
            self._generation += 1
            generation = self._generation

        logger.info("Fetching user data")
        user = self._fetch_user()

        with ThreadPoolExecutor(max_workers=len(DOMAINS)) as pool:
            futures = {
                "transactions": pool.submit(self._guarded, self._fetch_transactions, user),
                "results": pool.submit(self._guarded, self._fetch_results, user),
                "progress": pool.submit(self._guarded, self._fetch_progress, user),
            }

        fetched: dict[str, tuple] = {}
        outcomes: dict[str, DomainOutcome] = {}
        auth_error: Exception | None = None
        for domain in DOMAINS:
            try:
                fetched[domain] = futures[domain].result()
            except (QueryFailed, TransportError) as e:
                logger.warning("Failed to fetch %s: %s", domain, e)
                outcomes[domain] = DomainOutcome(domain, ERROR, error=str(e))
            except Unauthorized as e:
                outcomes[domain] = DomainOutcome(domain, ERROR, error=str(e))
                auth_error = auth_error or e
            else:
                rows = len(fetched[domain][0])
                outcomes[domain] = DomainOutcome(domain, OK if rows else EMPTY, rows=rows)

        transactions, tx_objects = fetched.get("transactions", ([], []))
        results, result_objects = fetched.get("results", ([], []))
        progress, _ = fetched.get("progress", ([], []))

        objects = {}
        for obj in tx_objects + result_objects:
            objects.setdefault(obj.id, obj)

        if auth_error is None and self._is_current(generation):
            missing = sorted(
                {row.object_id for row in transactions + results if row.object_id is not None}
                - set(objects),
                key=str,
            )
            if missing:
                objects.update(self._lookup_objects(missing))

        with self._lock:
            if auth_error is None and generation == self._generation:
                self.user = user
                self.transactions = transactions
                self.results = results
                self.progress = progress
                self.objects = objects
                self.outcomes = outcomes
                committed = True
            else:
                committed = False

        if auth_error is not None:
            raise auth_error

        if not committed:
            logger.warning("Discarding profile data from superseded fetch %d", generation)
            return {
                domain: DomainOutcome(domain, DISCARDED, rows=outcome.rows, error=outcome.error)
                for domain, outcome in outcomes.items()
            }

        logger.info(
            "Profile data loaded: %d transactions, %d results, %d progress rows",
            len(transactions), len(results), len(progress),
        )
        return outcomes

    def _guarded(self, fetch, user: User):
        """Run one domain fetch; a rejected token stales every sibling fetch."""
        try:
            return fetch(user)
        except Unauthorized:
            self.invalidate()
            raise

    def _fetch_user(self) -> User:
        data = self.client.execute(USER_QUERY)
        raw = data.get("user")
        if isinstance(raw, list):
            raw = raw[0] if raw else None
        if not raw or raw.get("id") is None:
            raise QueryFailed("User data not found in response")
        return parse_user(raw)

    def _fetch_transactions(self, user: User) -> tuple[list[Transaction], list[ProfileObject]]:
        data = self.client.execute(XP_TRANSACTIONS_QUERY)
        rows, objects = [], []
        for raw in data.get("transaction") or []:
            if raw.get("type", "xp") != "xp" or raw.get("userId") != user.id:
                continue
            if to_number(raw.get("amount")) <= 0:
                continue
            rows.append(parse_transaction(raw))
            obj = parse_object(raw.get("object"))
            if obj:
                objects.append(obj)
        return rows, objects

    def _fetch_results(self, user: User) -> tuple[list[Result], list[ProfileObject]]:
        data = self.client.execute(AUDIT_RESULTS_QUERY)
        rows, objects = [], []
        for raw in data.get("result") or []:
            if raw.get("userId") != user.id:
                continue
            rows.append(parse_result(raw))
            obj = parse_object(raw.get("object"))
            if obj:
                objects.append(obj)
        return rows, objects

    def _fetch_progress(self, user: User) -> tuple[list[Progress], list]:
        data = self.client.execute(PROGRESS_QUERY)
        rows = [
            parse_progress(raw) for raw in data.get("progress") or []
            if raw.get("userId", user.id) == user.id
        ]
        return rows, []

    def _lookup_objects(self, ids: list) -> dict:
        """Resolve names for objects the rows did not embed. Failures only cost labels."""
        try:
            data = self.client.execute(OBJECT_NAMES_QUERY, {"ids": ids})
        except (QueryFailed, TransportError) as e:
            logger.warning("Object name lookup failed for %d ids: %s", len(ids), e)
            return {}
        found = {}
        for raw in data.get("object") or []:
            obj = parse_object(raw)
            if obj:
                found[obj.id] = obj
        return found

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_user_data(self) -> User | None:
        return self.user

    def object_name(self, object_id) -> str | None:
        obj = self.objects.get(object_id)
        return obj.name if obj else None

    def get_stats(self) -> dict:
        """Total XP and audit pass ratio.

        The ratio is "100%" whenever nothing failed, including when there
        are no results at all.
        """
        total_xp = sum(tx.amount for tx in self.transactions)
        pass_count = sum(1 for r in self.results if r.grade == 1)
        fail_count = sum(1 for r in self.results if r.grade == 0)
        if fail_count == 0:
            ratio = "100%"
        else:
            ratio = f"{round_half_up(pass_count / (pass_count + fail_count) * 100)}%"
        return {"totalXP": total_xp, "auditRatio": ratio}

    def get_xp_data(self) -> list[SeriesPoint]:
        """XP per project (path basename), top 10 by value.

        Each point carries the first known object name for its project as
        its tooltip title.
        """
        xp_by_project: dict[str, float] = {}
        titles: dict[str, str] = {}
        for tx in self.transactions:
            if not tx.path:
                continue
            name = _basename(tx.path)
            xp_by_project[name] = xp_by_project.get(name, 0) + tx.amount
            if name not in titles:
                object_name = self.object_name(tx.object_id)
                if object_name:
                    titles[name] = object_name

        ranked = sorted(xp_by_project.items(), key=lambda kv: -kv[1])
        return [
            SeriesPoint(label=name, value=xp, title=titles.get(name, ""))
            for name, xp in ranked[:TOP_PROJECTS]
        ]

    def get_xp_progress_data(self) -> list[DatePoint]:
        """Cumulative XP per calendar day, downsampled to at most 20 points."""
        dated = sorted(
            (tx for tx in self.transactions if tx.created_at is not None),
            key=lambda tx: tx.created_at,
        )
        per_day: dict = {}
        for tx in dated:
            day = tx.created_at.date()
            per_day[day] = per_day.get(day, 0) + tx.amount

        points = []
        running = 0
        for day, amount in per_day.items():
            running += amount
            points.append(DatePoint(date=day, value=running))
        return downsample(points)

    def get_audit_data(self) -> list[SeriesPoint]:
        """Pass/fail counts over graded audits; zeroes when there are none."""
        graded = [r for r in self.results if r.type == "audit" and r.grade is not None]
        pass_count = sum(1 for r in graded if r.grade == 1)
        fail_count = sum(1 for r in graded if r.grade == 0)
        return [
            SeriesPoint(label="Pass", value=pass_count),
            SeriesPoint(label="Fail", value=fail_count),
        ]

    def get_skills_data(self) -> list[SeriesPoint]:
        progress = self.outcomes.get("progress")
        if progress is not None and progress.degraded:
            return []
        return skill_series(self.progress)

    def to_dict(self) -> dict:
        """JSON-ready snapshot of everything the dashboard shows."""
        user = self.user
        return {
            "user": {"id": user.id, "login": user.login} if user else None,
            "stats": self.get_stats(),
            "xp": [p.to_dict() for p in self.get_xp_data()],
            "progress": [p.to_dict() for p in self.get_xp_progress_data()],
            "audits": [p.to_dict() for p in self.get_audit_data()],
            "skills": [p.to_dict() for p in self.get_skills_data()],
            "outcomes": {d: o.to_dict() for d, o in self.outcomes.items()},
        }
