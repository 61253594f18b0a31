"""
Scoring Contract - Single Source of Truth
All scoring logic MUST reference these constants (no duplicated literals).

Two grading paths share the same letter-grade enumeration:
    1. Composite path: six factor scores (0-100) -> weighted composite -> grade
    2. Market-edge path: odds + model probability -> edge -> adjusted score -> grade

Each path has exactly ONE threshold table. Older tables (the edge/confidence
system with A+ >= 95 and the alternate weighted-average cutpoints) are retired
and must not be reintroduced here.
"""

# =============================================================================
# FACTOR WEIGHTS (sum = 1.00)
# =============================================================================
# Keyed by field name, never by position.
FACTOR_WEIGHTS = {
    "offensive_production": 0.15,
    "pitching_matchup": 0.15,
    "situational_edge": 0.15,
    "team_momentum": 0.15,
    "market_inefficiency": 0.25,   # Heaviest single factor
    "system_confidence": 0.15,
}

FACTOR_NAMES = tuple(FACTOR_WEIGHTS)

# Accepted range for each factor score
FACTOR_MIN = 0.0
FACTOR_MAX = 100.0

# =============================================================================
# GRADE THRESHOLDS - (inclusive minimum, grade), best first, F is the fallback
# =============================================================================
COMPOSITE_GRADE_THRESHOLDS = (
    (78.5, "A+"),
    (76.0, "A"),
    (73.5, "A-"),
    (70.0, "B+"),
    (66.0, "B"),
    (62.0, "B-"),
    (58.0, "C+"),
    (54.0, "C"),
    (50.0, "C-"),
    (47.0, "D+"),
    (44.0, "D"),
)

MARKET_GRADE_THRESHOLDS = (
    (92.0, "A+"),
    (88.0, "A"),
    (82.0, "A-"),
    (78.0, "B+"),
    (72.0, "B"),
    (68.0, "B-"),
    (62.0, "C+"),
    (58.0, "C"),
    (52.0, "C-"),
    (48.0, "D+"),
    (42.0, "D"),
)

FALLBACK_GRADE = "F"

# Lowest grade that is surfaced as a recommendation
MIN_RECOMMEND_GRADE = "C+"

# =============================================================================
# MARKET EDGE
# =============================================================================
# American odds never fall strictly between -100 and +100
MIN_AMERICAN_ODDS = 100.0

# Sustainable betting edges rarely exceed 10%; larger values come from bad inputs
EDGE_CAP = 0.10

# Signed edge percentage -> base score, best first
EDGE_SCORE_TIERS = (
    (6.0, 95.0),
    (4.0, 90.0),
    (2.5, 85.0),
    (1.5, 80.0),
    (0.5, 75.0),
    (-0.5, 70.0),
    (-1.5, 65.0),
    (-2.5, 60.0),
    (-3.5, 55.0),
    (-4.5, 50.0),
    (-5.5, 45.0),
)
EDGE_SCORE_FLOOR = 35.0

# adjusted = base + (confidence - CONFIDENCE_BASELINE) * CONFIDENCE_SCALE
CONFIDENCE_BASELINE = 0.75
CONFIDENCE_SCALE = 10.0

# Presentation jitter (+/- points) applied to the adjusted market score
JITTER_AMPLITUDE = 3.0

# =============================================================================
# FACTOR BANDS - raw statistic -> banded factor score, best first
# =============================================================================
BAND_TABLES = {
    "offensive_production": (
        (85, 88), (75, 78), (65, 68), (50, 58), (35, 48), (20, 40),
    ),
    "pitching_matchup": (
        (85, 82), (70, 72), (55, 62), (40, 52), (25, 42),
    ),
    "situational_edge": (
        (80, 75), (65, 68), (50, 60), (35, 52), (20, 44),
    ),
    "team_momentum": (
        (85, 80), (70, 70), (55, 60), (40, 50), (25, 42),
    ),
    # Raw value is the edge percentage
    "market_inefficiency": (
        (6.0, 95), (4.0, 88), (2.5, 80), (1.5, 68), (0.8, 58), (0.3, 48),
    ),
    "system_confidence": (
        (95, 92), (85, 82), (75, 72), (65, 62), (55, 52), (45, 44),
    ),
}

# Score when the raw value falls below every band
BAND_FLOORS = {
    "offensive_production": 32,
    "pitching_matchup": 34,
    "situational_edge": 36,
    "team_momentum": 34,
    "market_inefficiency": 38,
    "system_confidence": 36,
}

BAND_JITTER_AMPLITUDE = 3.0
BAND_SCORE_FLOOR = 30
BAND_SCORE_CEILING = 100

# =============================================================================
# MARKET INEFFICIENCY CURVE (odds + model probability -> factor score)
# =============================================================================
INEFFICIENCY_SCORE_FLOOR = 60.0
INEFFICIENCY_SCORE_CEILING = 100.0
INEFFICIENCY_MAX_EDGE_SCORE = 99.0
KELLY_BONUS_SCALE = 2.0
KELLY_BONUS_CAP = 2.0


def _validate_contract() -> None:
    weight_sum = sum(FACTOR_WEIGHTS.values())
    assert abs(weight_sum - 1.0) < 1e-9, f"Factor weights must sum to 1.0, got {weight_sum}"
    assert set(BAND_TABLES) == set(FACTOR_WEIGHTS) == set(BAND_FLOORS)

    for name, table in (
        ("COMPOSITE_GRADE_THRESHOLDS", COMPOSITE_GRADE_THRESHOLDS),
        ("MARKET_GRADE_THRESHOLDS", MARKET_GRADE_THRESHOLDS),
        ("EDGE_SCORE_TIERS", EDGE_SCORE_TIERS),
    ):
        minimums = [row[0] for row in table]
        assert minimums == sorted(minimums, reverse=True) and len(set(minimums)) == len(minimums), \
            f"{name} must be strictly descending"


_validate_contract()


# Canonical contract object for debug/threshold endpoints
SCORING_CONTRACT = {
    "factor_weights": FACTOR_WEIGHTS,
    "factor_range": [FACTOR_MIN, FACTOR_MAX],
    "composite_grade_thresholds": [list(row) for row in COMPOSITE_GRADE_THRESHOLDS],
    "market_grade_thresholds": [list(row) for row in MARKET_GRADE_THRESHOLDS],
    "fallback_grade": FALLBACK_GRADE,
    "min_recommend_grade": MIN_RECOMMEND_GRADE,
    "edge_cap": EDGE_CAP,
    "edge_score_tiers": [list(row) for row in EDGE_SCORE_TIERS],
    "edge_score_floor": EDGE_SCORE_FLOOR,
    "confidence_baseline": CONFIDENCE_BASELINE,
    "confidence_scale": CONFIDENCE_SCALE,
    "jitter_amplitude": JITTER_AMPLITUDE,
}
