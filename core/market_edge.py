"""
MARKET EDGE - Odds-based grading path

Converts a bookmaker price and a model win probability into a letter grade:

    implied   = 100 / (odds + 100)             odds > 0
              = |odds| / (|odds| + 100)        odds < 0
    edge      = clamp(model_prob - implied, -0.10, +0.10)
    base      = EDGE_SCORE_TIERS[edge * 100]   (signed edge percentage)
    adjusted  = base + (confidence - 0.75) * 10 + jitter
    grade     = MARKET_GRADE_THRESHOLDS[adjusted]
    ev        = model_prob * payout - (1 - model_prob)   (per unit staked)

The jitter is presentation variety only. It is drawn from an explicit
random.Random so callers control determinism: pass a seeded generator (or
jitter_amplitude=0) for repeatable grades.
"""

import logging
import math
import random
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from core.errors import InvalidOddsInput, InvalidProbabilityInput
from core.scoring_contract import (
    EDGE_CAP,
    EDGE_SCORE_TIERS,
    EDGE_SCORE_FLOOR,
    CONFIDENCE_BASELINE,
    CONFIDENCE_SCALE,
    JITTER_AMPLITUDE,
    MIN_AMERICAN_ODDS,
)
from tiering import Grade, market_grade

logger = logging.getLogger(__name__)


# ============================================================================
# VALIDATION
# ============================================================================

def validate_odds(odds: Any) -> float:
    """American odds must be a finite number <= -100 or >= +100."""
    if odds is None:
        raise InvalidOddsInput("Missing odds", field="odds")
    if isinstance(odds, bool) or not isinstance(odds, (int, float)):
        raise InvalidOddsInput(f"Odds must be a number, got {type(odds).__name__}", field="odds", value=odds)
    if not math.isfinite(odds):
        raise InvalidOddsInput(f"Odds must be finite, got {odds}", field="odds", value=odds)
    if -MIN_AMERICAN_ODDS < odds < MIN_AMERICAN_ODDS:
        raise InvalidOddsInput(
            f"American odds must be <= -{MIN_AMERICAN_ODDS:g} or >= +{MIN_AMERICAN_ODDS:g}, got {odds}",
            field="odds",
            value=odds,
        )
    return float(odds)


def validate_probability(value: Any, field: str = "model_probability") -> float:
    """Probability must be a finite number in [0, 1]."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidProbabilityInput(
            f"{field} must be a number, got {type(value).__name__}", field=field, value=value
        )
    if not math.isfinite(value):
        raise InvalidProbabilityInput(f"{field} must be finite, got {value}", field=field, value=value)
    if not 0.0 <= value <= 1.0:
        raise InvalidProbabilityInput(f"{field}={value} outside [0, 1]", field=field, value=value)
    return float(value)


# ============================================================================
# ODDS MATH
# ============================================================================

def implied_probability(odds: float) -> float:
    """
    Bookmaker-implied probability from American odds (no vig removal).

    Examples:
        -110 -> 0.5238
        +150 -> 0.4000
    """
    odds = validate_odds(odds)
    if odds > 0:
        return 100.0 / (odds + 100.0)
    return abs(odds) / (abs(odds) + 100.0)


def american_to_decimal(odds: float) -> float:
    """American odds -> decimal odds (+150 -> 2.5, -150 -> 1.667)."""
    odds = validate_odds(odds)
    if odds > 0:
        return odds / 100.0 + 1.0
    return 100.0 / abs(odds) + 1.0


def clamp_edge(edge: float) -> float:
    return max(-EDGE_CAP, min(EDGE_CAP, edge))


def compute_edge(odds: float, model_probability: float) -> float:
    """Model probability minus implied probability, clamped to +/- EDGE_CAP."""
    model_probability = validate_probability(model_probability, "model_probability")
    raw_edge = model_probability - implied_probability(odds)
    edge = clamp_edge(raw_edge)
    if edge != raw_edge:
        logger.debug("Edge %.4f clamped to %.2f (odds=%s)", raw_edge, edge, odds)
    return edge


def kelly_fraction(edge: float, implied_prob: float) -> float:
    """Informational Kelly figure: edge / implied probability (0 when implied is 0)."""
    if implied_prob == 0:
        return 0.0
    return edge / implied_prob


def expected_value(model_probability: float, odds: float) -> float:
    """
    Expected profit per unit staked at the model probability.

        EV = p * payout - (1 - p)

    Examples:
        0.45 at +150 -> +0.125
        0.50 at -110 -> -0.0455
    """
    model_probability = validate_probability(model_probability, "model_probability")
    payout = american_to_decimal(odds) - 1.0
    return model_probability * payout - (1.0 - model_probability)


# ============================================================================
# SCORING
# ============================================================================

def edge_base_score(edge: float) -> float:
    """Signed edge (fraction) -> tiered base score (95 ... 35)."""
    edge_percentage = edge * 100.0
    for minimum, score in EDGE_SCORE_TIERS:
        if edge_percentage >= minimum:
            return score
    return EDGE_SCORE_FLOOR


def confidence_adjustment(confidence: float) -> float:
    confidence = validate_probability(confidence, "confidence")
    return (confidence - CONFIDENCE_BASELINE) * CONFIDENCE_SCALE


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Seeded generator for repeatable jitter; seed=None gives variety."""
    return random.Random(seed)


def presentation_jitter(rng: random.Random, amplitude: float = JITTER_AMPLITUDE) -> float:
    """Uniform draw in [-amplitude, +amplitude]; amplitude 0 draws nothing."""
    if amplitude < 0:
        raise ValueError("jitter amplitude must be >= 0")
    if amplitude == 0:
        return 0.0
    return rng.uniform(-amplitude, amplitude)


@dataclass(frozen=True)
class MarketEdgeGrade:
    """Result of the market-edge grading path."""
    odds: float
    model_probability: float
    confidence: float
    implied_probability: float
    edge: float
    edge_percentage: float
    base_score: float
    confidence_adjustment: float
    jitter: float
    adjusted_score: float
    grade: Grade
    kelly_fraction: float
    expected_value: float

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["grade"] = self.grade.value
        result["implied_probability"] = round(self.implied_probability, 4)
        result["edge"] = round(self.edge, 4)
        result["edge_percentage"] = round(self.edge_percentage, 2)
        result["adjusted_score"] = round(self.adjusted_score, 2)
        result["jitter"] = round(self.jitter, 3)
        result["kelly_fraction"] = round(self.kelly_fraction, 4)
        result["expected_value"] = round(self.expected_value, 4)
        return result


def grade_market_edge(
    odds: float,
    model_probability: float,
    confidence: float,
    rng: Optional[random.Random] = None,
    jitter_amplitude: float = JITTER_AMPLITUDE,
) -> MarketEdgeGrade:
    """
    Grade a bet from its price, the model probability and model confidence.

    Args:
        odds: American odds (<= -100 or >= +100)
        model_probability: Model win probability in [0, 1]
        confidence: Model confidence in [0, 1]
        rng: Jitter source. None -> fresh unseeded generator.
        jitter_amplitude: Max jitter in points (0 disables jitter)

    Raises:
        InvalidOddsInput, InvalidProbabilityInput
    """
    odds = validate_odds(odds)
    model_probability = validate_probability(model_probability, "model_probability")
    confidence = validate_probability(confidence, "confidence")

    implied = implied_probability(odds)
    edge = compute_edge(odds, model_probability)
    base = edge_base_score(edge)
    adjustment = confidence_adjustment(confidence)
    jitter = presentation_jitter(rng if rng is not None else make_rng(), jitter_amplitude)
    adjusted = base + adjustment + jitter
    grade = market_grade(adjusted)

    logger.debug(
        "Market edge odds=%s p=%.3f edge=%.4f base=%.0f adjusted=%.2f -> %s",
        odds, model_probability, edge, base, adjusted, grade.value,
    )

    return MarketEdgeGrade(
        odds=odds,
        model_probability=model_probability,
        confidence=confidence,
        implied_probability=implied,
        edge=edge,
        edge_percentage=edge * 100.0,
        base_score=base,
        confidence_adjustment=adjustment,
        jitter=jitter,
        adjusted_score=adjusted,
        grade=grade,
        kelly_fraction=kelly_fraction(edge, implied),
        expected_value=expected_value(model_probability, odds),
    )
