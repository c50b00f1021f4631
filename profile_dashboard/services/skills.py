"""Skill buckets inferred from progress paths.

Classification is a plain keyword table: a progress row belongs to every
bucket whose keywords appear (case-insensitively) in its path, and counts
fully in each. Rows matching nothing land in DEFAULT_SKILL.
"""

from collections import defaultdict

from profile_dashboard.models import Progress, SeriesPoint, round_half_up

DEFAULT_SKILL = "Programming"

SKILL_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Go", ("golang", "piscine-go", "/go/")),
    ("JavaScript", ("javascript", "piscine-js", "/js/", "typescript")),
    ("Rust", ("rust",)),
    ("Front-End", ("html", "css", "dom", "frontend", "front-end", "graphql")),
    ("Back-End", ("backend", "back-end", "server", "api", "forum", "sql", "database")),
    ("Algorithms", ("algo", "sort", "math", "checkpoint", "quest")),
    ("DevOps", ("docker", "devops", "deploy", "kubernetes")),
    ("Security", ("security", "crypto", "cyber")),
)

# Weighting of the proficiency score
GRADE_WEIGHT = 0.7
COMPLETION_WEIGHT = 0.3

NEUTRAL_SCORE = 50
MIN_SKILLS = 3
MAX_SKILLS = 6


def classify(path: str) -> list[str]:
    """Return every bucket whose keywords occur in the path."""
    lowered = (path or "").lower()
    matches = [
        name for name, keywords in SKILL_KEYWORDS
        if any(k in lowered for k in keywords)
    ]
    return matches or [DEFAULT_SKILL]


def proficiency(grades: list[float | None]) -> int:
    """Score 0-100 for one bucket's grades.

    Grades are clamped to [0, 1] for the average; an ungraded row counts
    as 0. A row is complete when its grade is >= 1.
    """
    if not grades:
        return 0
    clamped = [min(max(g or 0.0, 0.0), 1.0) for g in grades]
    average = sum(clamped) / len(clamped)
    completion = sum(1 for g in grades if g is not None and g >= 1) / len(grades)
    score = round_half_up(100 * (GRADE_WEIGHT * average + COMPLETION_WEIGHT * completion))
    return min(max(score, 0), 100)


def skill_series(progress: list[Progress]) -> list[SeriesPoint]:
    """Bucket progress rows and score each bucket, highest first."""
    buckets: dict[str, list[float | None]] = defaultdict(list)
    for entry in progress:
        for name in classify(entry.path):
            buckets[name].append(entry.grade)

    scored = {name: proficiency(grades) for name, grades in buckets.items()}

    # Pad so the radar chart has a polygon to draw; nothing is invented
    # when there is no real bucket at all
    if scored and len(scored) < MIN_SKILLS:
        candidates = [name for name, _ in SKILL_KEYWORDS] + [DEFAULT_SKILL]
        for name in candidates:
            if len(scored) >= MIN_SKILLS:
                break
            if name not in scored:
                scored[name] = NEUTRAL_SCORE

    ordered = sorted(scored.items(), key=lambda kv: (-kv[1], kv[0]))
    return [SeriesPoint(label=name, value=score) for name, score in ordered[:MAX_SKILLS]]
