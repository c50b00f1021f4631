"""Typed records for platform rows and chart series."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any


@dataclass(frozen=True)
class User:
    id: int
    login: str


@dataclass(frozen=True)
class ProfileObject:
    """A learning object (project, exercise) referenced by rows."""
    id: int
    name: str
    type: str = ""


@dataclass(frozen=True)
class Transaction:
    """One XP award tied to a learning object."""
    id: Any
    amount: int | float
    object_id: Any
    user_id: Any
    created_at: datetime | None
    path: str


@dataclass(frozen=True)
class Result:
    """One audit/grading outcome."""
    id: Any
    grade: float | None
    type: str
    object_id: Any
    user_id: Any
    created_at: datetime | None
    path: str


@dataclass(frozen=True)
class Progress:
    id: Any
    grade: float | None
    path: str
    created_at: datetime | None


@dataclass(frozen=True)
class SeriesPoint:
    label: str
    value: float
    # Longer tooltip text, e.g. the object name behind a path basename
    title: str = ""

    def to_dict(self) -> dict:
        data = {"label": self.label, "value": self.value}
        if self.title:
            data["title"] = self.title
        return data


@dataclass(frozen=True)
class DatePoint:
    date: date
    value: float

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "value": self.value}


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------

def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values."""
    return int(math.floor(value + 0.5))


def to_number(value) -> int | float:
    """Coerce an amount to int (or float when fractional). Invalid -> 0."""
    if isinstance(value, bool) or value is None:
        return 0
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(num):
        return 0
    return int(num) if num.is_integer() else num


def to_grade(value) -> float | None:
    """Coerce a grade; None stays None (ungraded)."""
    if value is None or isinstance(value, bool):
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return num if math.isfinite(num) else None


def parse_timestamp(value) -> datetime | None:
    """Parse an ISO-8601 timestamp as returned by the platform."""
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    # Naive timestamps are treated as UTC so rows stay comparable
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_object(raw: dict | None) -> ProfileObject | None:
    if not raw or raw.get("id") is None:
        return None
    return ProfileObject(id=raw["id"], name=raw.get("name") or "", type=raw.get("type") or "")


def parse_user(raw: dict) -> User:
    return User(id=raw["id"], login=raw.get("login") or "")


def parse_transaction(raw: dict) -> Transaction:
    return Transaction(
        id=raw.get("id"),
        amount=to_number(raw.get("amount")),
        object_id=raw.get("objectId"),
        user_id=raw.get("userId"),
        created_at=parse_timestamp(raw.get("createdAt")),
        path=raw.get("path") or "",
    )


def parse_result(raw: dict) -> Result:
    return Result(
        id=raw.get("id"),
        grade=to_grade(raw.get("grade")),
        type=raw.get("type") or "",
        object_id=raw.get("objectId"),
        user_id=raw.get("userId"),
        created_at=parse_timestamp(raw.get("createdAt")),
        path=raw.get("path") or "",
    )


def parse_progress(raw: dict) -> Progress:
    return Progress(
        id=raw.get("id"),
        grade=to_grade(raw.get("grade")),
        path=raw.get("path") or "",
        created_at=parse_timestamp(raw.get("createdAt")),
    )
