"""
TIERING.PY - SINGLE SOURCE OF TRUTH FOR PICK GRADES
===================================================

This module is the ONLY place letter grades are assigned from scores.
All other files should import from here via:
    from tiering import Grade, composite_grade, market_grade, grade_value

GRADE HIERARCHY (highest to lowest):
    A+  A  A-  B+  B  B-  C+  C  C-  D+  D  D-  F

Thresholds come from core.scoring_contract (one table per grading path).
D- is part of the enumeration for ordering and stored picks, but neither
canonical threshold table assigns it.

RECOMMENDATION FILTER: Only picks graded C+ or better are recommended.
"""

import math
from enum import Enum
from typing import Any, Callable, Dict, List, Sequence, Tuple, TypeVar, Union

from core.scoring_contract import (
    COMPOSITE_GRADE_THRESHOLDS,
    MARKET_GRADE_THRESHOLDS,
    FALLBACK_GRADE,
    MIN_RECOMMEND_GRADE,
)


class Grade(str, Enum):
    A_PLUS = "A+"
    A = "A"
    A_MINUS = "A-"
    B_PLUS = "B+"
    B = "B"
    B_MINUS = "B-"
    C_PLUS = "C+"
    C = "C"
    C_MINUS = "C-"
    D_PLUS = "D+"
    D = "D"
    D_MINUS = "D-"
    F = "F"

    def __str__(self) -> str:
        return self.value


# Best first
GRADE_ORDER: Tuple[Grade, ...] = tuple(Grade)

# A+ = 13 ... F = 1
GRADE_VALUES: Dict[Grade, int] = {
    grade: len(GRADE_ORDER) - index for index, grade in enumerate(GRADE_ORDER)
}

GradeLike = Union[Grade, str]
P = TypeVar("P")


# =============================================================================
# GRADE CONFIGURATION
# =============================================================================
GRADE_CONFIG = {
    "A": {
        "units": 2.0,
        "action": "SMASH",
        "badge": "ELITE",
        "description": "Exceptional value - every factor aligned",
    },
    "B": {
        "units": 1.0,
        "action": "PLAY",
        "badge": "STRONG",
        "description": "Solid edge - most factors agree",
    },
    "C": {
        "units": 0.5,
        "action": "LEAN",
        "badge": "LEAN",
        "description": "Marginal edge - small position at most",
    },
    "D": {
        "units": 0.0,
        "action": "WATCH",
        "badge": "MONITOR",
        "description": "Weak edge - track only",
    },
    "F": {
        "units": 0.0,
        "action": "SKIP",
        "badge": "AVOID",
        "description": "No edge - avoid completely",
    },
}


def to_grade(grade: GradeLike) -> Grade:
    """Coerce a grade string ("B+") or Grade member to a Grade."""
    if isinstance(grade, Grade):
        return grade
    try:
        return Grade(str(grade).strip().upper())
    except ValueError:
        raise ValueError(f"Unknown grade: {grade!r}") from None


def grade_value(grade: GradeLike) -> int:
    """Ordinal value of a grade (A+ = 13, F = 1)."""
    return GRADE_VALUES[to_grade(grade)]


def get_grade_config(grade: GradeLike) -> Dict[str, Any]:
    """
    Get presentation config for a grade (units, action, badge).

    Grades share the config of their letter family (B+, B and B- -> "B").
    """
    letter = to_grade(grade).value[0]
    return GRADE_CONFIG[letter]


# =============================================================================
# SCORE -> GRADE
# =============================================================================

def grade_from_score(score: float, thresholds: Sequence[Tuple[float, str]]) -> Grade:
    """
    Map a score through a descending threshold table.

    Lower bounds are inclusive: a score exactly on a boundary gets the
    higher grade. Anything below the last row is F.

    Args:
        score: Composite or adjusted score
        thresholds: ((minimum, grade), ...) best first

    Returns:
        Exactly one Grade

    Raises:
        ValueError: score is NaN or infinite
    """
    if isinstance(score, bool) or not isinstance(score, (int, float)) or not math.isfinite(score):
        raise ValueError(f"Cannot grade non-finite score: {score!r}")

    for minimum, grade in thresholds:
        if score >= minimum:
            return Grade(grade)
    return Grade(FALLBACK_GRADE)


def composite_grade(score: float) -> Grade:
    """Grade a weighted composite score (canonical composite table)."""
    return grade_from_score(score, COMPOSITE_GRADE_THRESHOLDS)


def market_grade(score: float) -> Grade:
    """Grade an adjusted market-edge score (market-edge table)."""
    return grade_from_score(score, MARKET_GRADE_THRESHOLDS)


# =============================================================================
# STABILITY / RECOMMENDATION HELPERS
# =============================================================================

def grade_change(previous: GradeLike, proposed: GradeLike) -> int:
    """Signed number of ordinal steps from previous to proposed (+ = better)."""
    return grade_value(proposed) - grade_value(previous)


def limit_grade_change(previous: GradeLike, proposed: GradeLike, max_steps: int = 1) -> Grade:
    """
    Limit a re-grade to at most max_steps ordinal steps from the previous grade.

    B+ -> A- is allowed (one step); B+ -> A becomes A-.
    """
    if max_steps < 0:
        raise ValueError("max_steps must be >= 0")

    previous_grade = to_grade(previous)
    proposed_grade = to_grade(proposed)
    delta = grade_change(previous_grade, proposed_grade)

    if abs(delta) <= max_steps:
        return proposed_grade

    step = max_steps if delta > 0 else -max_steps
    index = GRADE_ORDER.index(previous_grade) - step
    return GRADE_ORDER[index]


def is_recommendable(grade: GradeLike, minimum: GradeLike = MIN_RECOMMEND_GRADE) -> bool:
    """True when grade is at or above the recommendation floor (default C+)."""
    return grade_value(grade) >= grade_value(minimum)


def _dict_grade(pick: Dict[str, Any]) -> Any:
    return pick.get("grade")


def filter_recommendable(
    picks: List[P],
    minimum: GradeLike = MIN_RECOMMEND_GRADE,
    grade_of: Callable[[P], Any] = _dict_grade,
) -> List[P]:
    """
    Keep only picks whose grade meets the recommendation floor.

    grade_of reads the grade from a pick (default: the dict's "grade" key).
    Picks without a recognisable grade are dropped.
    """
    kept = []
    for pick in picks:
        try:
            if is_recommendable(grade_of(pick), minimum):
                kept.append(pick)
        except (ValueError, KeyError):
            continue
    return kept


def sort_by_grade(picks: List[P], grade_of: Callable[[P], Any] = _dict_grade) -> List[P]:
    """Sort picks best grade first (stable for equal grades)."""
    return sorted(picks, key=lambda p: grade_value(grade_of(p)), reverse=True)
