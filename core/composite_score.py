"""
COMPOSITE SCORE - Single Source of Truth for the Weighted Factor Composite
=========================================================================

This is THE ONLY file that computes the composite score. All other files must
call these functions. DO NOT duplicate the weighted sum elsewhere.

Formula:
    COMPOSITE = offensive_production  x 0.15
              + pitching_matchup      x 0.15
              + situational_edge      x 0.15
              + team_momentum         x 0.15
              + market_inefficiency   x 0.25
              + system_confidence     x 0.15

CRITICAL RULES:
1. Factors are addressed by name, never by position.
2. Every factor must be supplied. Missing factors are an error, not zero.
3. Each factor must be a finite number in [0, 100].
4. Weights come from scoring_contract.py only.
"""

import logging
import math
from dataclasses import dataclass, asdict, fields
from fractions import Fraction
from typing import Any, Dict, Mapping

from core.errors import InvalidFactorInput
from core.scoring_contract import (
    FACTOR_WEIGHTS,
    FACTOR_NAMES,
    FACTOR_MIN,
    FACTOR_MAX,
)
from tiering import Grade, composite_grade

logger = logging.getLogger(__name__)

# Accept the field names used by the pick payloads of the web client
FACTOR_ALIASES = {
    "offensiveProduction": "offensive_production",
    "pitchingMatchup": "pitching_matchup",
    "situationalEdge": "situational_edge",
    "teamMomentum": "team_momentum",
    "marketInefficiency": "market_inefficiency",
    "systemConfidence": "system_confidence",
}

_EXACT_WEIGHTS = {name: Fraction(str(weight)) for name, weight in FACTOR_WEIGHTS.items()}


def validate_factor(name: str, value: Any) -> float:
    """Return value as float or raise InvalidFactorInput."""
    if value is None:
        raise InvalidFactorInput(f"Missing factor score: {name}", field=name)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidFactorInput(
            f"Factor {name} must be a number, got {type(value).__name__}", field=name, value=value
        )
    value = float(value)
    if not math.isfinite(value):
        raise InvalidFactorInput(f"Factor {name} must be finite, got {value}", field=name, value=value)
    if not FACTOR_MIN <= value <= FACTOR_MAX:
        raise InvalidFactorInput(
            f"Factor {name}={value} outside [{FACTOR_MIN:g}, {FACTOR_MAX:g}]", field=name, value=value
        )
    return value


@dataclass(frozen=True)
class FactorScores:
    """The six factor scores for one side of one game (each 0-100)."""
    offensive_production: float
    pitching_matchup: float
    situational_edge: float
    team_momentum: float
    market_inefficiency: float
    system_confidence: float

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, validate_factor(f.name, getattr(self, f.name)))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FactorScores":
        """
        Build from a dict keyed by snake_case or camelCase factor names.

        Raises:
            InvalidFactorInput: missing, unknown, duplicated or invalid factor
        """
        if not isinstance(data, Mapping):
            raise InvalidFactorInput(f"Factors must be a mapping, got {type(data).__name__}")

        normalized: Dict[str, Any] = {}
        for key, value in data.items():
            name = FACTOR_ALIASES.get(key, key)
            if name not in FACTOR_WEIGHTS:
                raise InvalidFactorInput(f"Unknown factor: {key}", field=key)
            if name in normalized:
                raise InvalidFactorInput(f"Factor supplied twice: {name}", field=name)
            normalized[name] = value

        missing = [name for name in FACTOR_NAMES if name not in normalized]
        if missing:
            raise InvalidFactorInput(f"Missing factor scores: {', '.join(missing)}", field=missing[0])

        return cls(**normalized)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def compute_composite_score(factors: FactorScores) -> float:
    """
    Weighted sum of the six factors.

    Increasing any single factor never decreases the result (all weights > 0).

    The sum is taken exactly over the decimal weights (0.15 as 15/100) and
    converted to float once, so six factors of 78.5 give exactly 78.5 while
    78.4999999996 stays below the A+ boundary.
    """
    values = factors.to_dict()
    weighted = sum(
        Fraction(values[name]) * _EXACT_WEIGHTS[name] for name in FACTOR_NAMES
    )
    return float(weighted)


def grade_composite(factors: FactorScores) -> Grade:
    """Composite score -> letter grade using the canonical composite table."""
    return composite_grade(compute_composite_score(factors))


def compute_composite_breakdown(factors: FactorScores) -> Dict[str, Any]:
    """
    Full composite payload: per-factor contribution, score and grade.

    Returns:
        {
            "factors": {...},
            "weights": {...},
            "contributions": {"market_inefficiency": 23.75, ...},
            "composite_score": 68.9,
            "grade": "B"
        }
    """
    values = factors.to_dict()
    contributions = {
        name: round(values[name] * weight, 4) for name, weight in FACTOR_WEIGHTS.items()
    }
    score = compute_composite_score(factors)
    grade = composite_grade(score)

    logger.debug("Composite %.4f -> %s", score, grade.value)

    return {
        "factors": values,
        "weights": dict(FACTOR_WEIGHTS),
        "contributions": contributions,
        "composite_score": round(score, 2),
        "grade": grade.value,
    }
