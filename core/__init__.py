"""
Core module - scoring contract, typed errors and the scoring engines

Import engines from their modules directly:
    from core.composite_score import FactorScores, grade_composite
    from core.market_edge import grade_market_edge
"""

from .errors import (
    ScoringInputError,
    InvalidFactorInput,
    InvalidOddsInput,
    InvalidProbabilityInput,
)

from .scoring_contract import (
    FACTOR_WEIGHTS,
    FACTOR_NAMES,
    COMPOSITE_GRADE_THRESHOLDS,
    MARKET_GRADE_THRESHOLDS,
    EDGE_CAP,
    SCORING_CONTRACT,
)
