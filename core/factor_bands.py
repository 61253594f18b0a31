"""
Factor banding - raw per-factor statistics -> factor scores.

Each factor has its own band table (scoring_contract.BAND_TABLES). A raw value
lands in the first band whose minimum it meets; a small seeded jitter spreads
games inside a band, then the score is rounded and clamped to [30, 100].

The market factor can instead be scored on a continuous curve straight from
odds and model probability (market_inefficiency_score).
"""

import logging
import math
import random
from typing import Any, Dict, Mapping, Optional

from core.composite_score import FACTOR_ALIASES, FactorScores
from core.errors import InvalidFactorInput
from core.market_edge import compute_edge, implied_probability, kelly_fraction, presentation_jitter, make_rng
from core.scoring_contract import (
    BAND_TABLES,
    BAND_FLOORS,
    BAND_JITTER_AMPLITUDE,
    BAND_SCORE_FLOOR,
    BAND_SCORE_CEILING,
    FACTOR_NAMES,
    INEFFICIENCY_SCORE_FLOOR,
    INEFFICIENCY_SCORE_CEILING,
    INEFFICIENCY_MAX_EDGE_SCORE,
    EDGE_CAP,
    KELLY_BONUS_SCALE,
    KELLY_BONUS_CAP,
)

logger = logging.getLogger(__name__)

# Short names used by the raw-stat payloads
RAW_ALIASES = {
    "offensive": "offensive_production",
    "pitching": "pitching_matchup",
    "situational": "situational_edge",
    "momentum": "team_momentum",
    "market": "market_inefficiency",
    "confidence": "system_confidence",
}


def _factor_name(key: str) -> str:
    name = RAW_ALIASES.get(key) or FACTOR_ALIASES.get(key) or key
    if name not in BAND_TABLES:
        raise InvalidFactorInput(f"Unknown factor: {key}", field=key)
    return name


def band_score(factor: str, raw_value: float) -> int:
    """Band lookup without jitter."""
    name = _factor_name(factor)
    if isinstance(raw_value, bool) or not isinstance(raw_value, (int, float)) or not math.isfinite(raw_value):
        raise InvalidFactorInput(f"Raw value for {name} must be a finite number", field=name, value=raw_value)

    for minimum, score in BAND_TABLES[name]:
        if raw_value >= minimum:
            return score
    return BAND_FLOORS[name]


def banded_factor_score(
    factor: str,
    raw_value: float,
    rng: Optional[random.Random] = None,
    jitter_amplitude: float = BAND_JITTER_AMPLITUDE,
) -> int:
    """Band score plus jitter, rounded and clamped to [BAND_SCORE_FLOOR, BAND_SCORE_CEILING]."""
    base = band_score(factor, raw_value)
    jitter = presentation_jitter(rng if rng is not None else make_rng(), jitter_amplitude)
    return int(max(BAND_SCORE_FLOOR, min(BAND_SCORE_CEILING, round(base + jitter))))


def factor_scores_from_raw(
    raw: Mapping[str, Any],
    rng: Optional[random.Random] = None,
    jitter_amplitude: float = BAND_JITTER_AMPLITUDE,
) -> FactorScores:
    """
    Band every raw factor value into a FactorScores record.

    Raises:
        InvalidFactorInput: a factor is missing, unknown or non-numeric
    """
    rng = rng if rng is not None else make_rng()
    scores: Dict[str, int] = {}
    for key, value in raw.items():
        name = _factor_name(key)
        if name in scores:
            raise InvalidFactorInput(f"Factor supplied twice: {name}", field=name)
        if value is None:
            raise InvalidFactorInput(f"Missing raw value: {name}", field=name)
        scores[name] = banded_factor_score(name, value, rng, jitter_amplitude)

    missing = [name for name in FACTOR_NAMES if name not in scores]
    if missing:
        raise InvalidFactorInput(f"Missing raw values: {', '.join(missing)}", field=missing[0])

    return FactorScores(**scores)


def market_inefficiency_score(odds: float, model_probability: float) -> float:
    """
    Continuous market-inefficiency factor score from odds + model probability.

    |edge| %     score
    0 - 0.5      60 -> 75
    0.5 - 1      75 -> 76
    1 - 3        76 -> 84
    3 - 6        85 -> 91
    6 - 10       92 -> 98
    10 (cap)     99

    Plus a Kelly bonus of 2 x kelly capped to +/-2, then clamped to [60, 100].
    """
    implied = implied_probability(odds)
    edge = compute_edge(odds, model_probability)
    edge_percentage = abs(edge * 100.0)

    if edge_percentage <= 0.5:
        score = 60.0 + edge_percentage * 30.0
    elif edge_percentage >= EDGE_CAP * 100.0:
        score = INEFFICIENCY_MAX_EDGE_SCORE
    elif edge_percentage >= 6.0:
        score = 92.0 + (edge_percentage - 6.0) / 4.0 * 6.0
    elif edge_percentage >= 3.0:
        score = 85.0 + (edge_percentage - 3.0) / 3.0 * 6.0
    elif edge_percentage >= 1.0:
        score = 76.0 + (edge_percentage - 1.0) * 4.0
    else:
        score = 75.0 + (edge_percentage - 0.5) * 2.0

    kelly_bonus = max(-KELLY_BONUS_CAP, min(KELLY_BONUS_CAP, kelly_fraction(edge, implied) * KELLY_BONUS_SCALE))
    score = max(INEFFICIENCY_SCORE_FLOOR, min(INEFFICIENCY_SCORE_CEILING, score + kelly_bonus))

    logger.debug("Market inefficiency odds=%s p=%.3f edge%%=%.2f -> %.1f", odds, model_probability, edge_percentage, score)
    return score
