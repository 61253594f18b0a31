"""
Composite score tests.

Run with: pytest tests/test_composite_score.py -v
"""

import dataclasses

import pytest

from core.composite_score import (
    FactorScores,
    compute_composite_breakdown,
    compute_composite_score,
    grade_composite,
    validate_factor,
)
from core.errors import InvalidFactorInput, ScoringInputError
from core.scoring_contract import FACTOR_NAMES, FACTOR_WEIGHTS
from tiering import Grade


class TestCompositeScore:

    def test_reference_game(self, example_factors):
        factors = FactorScores.from_mapping(example_factors)
        assert compute_composite_score(factors) == pytest.approx(68.9)
        assert grade_composite(factors) == Grade.B

    def test_strong_game_is_a_plus(self, strong_factors):
        factors = FactorScores.from_mapping(strong_factors)
        assert compute_composite_score(factors) == pytest.approx(80.75)
        assert grade_composite(factors) == Grade.A_PLUS

    def test_just_below_boundary_stays_below(self):
        factors = FactorScores.from_mapping({name: 78.4999999996 for name in FACTOR_NAMES})
        assert compute_composite_score(factors) < 78.5
        assert grade_composite(factors) == Grade.A

    def test_weak_game_is_f(self, weak_factors):
        factors = FactorScores.from_mapping(weak_factors)
        assert compute_composite_score(factors) == pytest.approx(35.0)
        assert grade_composite(factors) == Grade.F

    def test_uniform_factors_return_that_value(self):
        """Weights sum to 1, so six equal factors give that factor back exactly."""
        factors = FactorScores.from_mapping({name: 78.5 for name in FACTOR_NAMES})
        assert compute_composite_score(factors) == 78.5
        assert grade_composite(factors) == Grade.A_PLUS

    def test_bounds(self):
        assert compute_composite_score(FactorScores.from_mapping({n: 0 for n in FACTOR_NAMES})) == 0.0
        assert compute_composite_score(FactorScores.from_mapping({n: 100 for n in FACTOR_NAMES})) == 100.0

    @pytest.mark.parametrize("name", FACTOR_NAMES)
    def test_monotonic_in_each_factor(self, example_factors, name):
        base = compute_composite_score(FactorScores.from_mapping(example_factors))
        bumped = dict(example_factors, **{name: example_factors[name] + 5})
        raised = compute_composite_score(FactorScores.from_mapping(bumped))
        assert raised > base
        assert raised - base == pytest.approx(5 * FACTOR_WEIGHTS[name])

    def test_market_inefficiency_carries_most_weight(self, example_factors):
        low = dict(example_factors, market_inefficiency=0)
        assert compute_composite_score(FactorScores.from_mapping(example_factors)) - \
            compute_composite_score(FactorScores.from_mapping(low)) == pytest.approx(23.75)


class TestFactorValidation:

    def test_missing_factor(self, example_factors):
        del example_factors["team_momentum"]
        with pytest.raises(InvalidFactorInput) as exc_info:
            FactorScores.from_mapping(example_factors)
        assert exc_info.value.field == "team_momentum"
        assert exc_info.value.code == "INVALID_FACTOR_INPUT"

    @pytest.mark.parametrize("bad", [None, True, "abc", "50", float("nan"), float("inf"), 101, -1, 100.0001])
    def test_invalid_values(self, example_factors, bad):
        example_factors["pitching_matchup"] = bad
        with pytest.raises(InvalidFactorInput):
            FactorScores.from_mapping(example_factors)

    def test_unknown_factor(self, example_factors):
        example_factors["weather"] = 50
        with pytest.raises(InvalidFactorInput, match="Unknown factor"):
            FactorScores.from_mapping(example_factors)

    def test_duplicate_via_alias(self, example_factors):
        example_factors["teamMomentum"] = 60
        with pytest.raises(InvalidFactorInput, match="twice"):
            FactorScores.from_mapping(example_factors)

    def test_camel_case_accepted(self):
        factors = FactorScores.from_mapping({
            "offensiveProduction": 50,
            "pitchingMatchup": 54,
            "situationalEdge": 50,
            "teamMomentum": 53,
            "marketInefficiency": 95,
            "systemConfidence": 94,
        })
        assert factors.pitching_matchup == 54.0
        assert compute_composite_score(factors) == pytest.approx(68.9)

    def test_not_a_mapping(self):
        with pytest.raises(InvalidFactorInput):
            FactorScores.from_mapping([50, 54, 50, 53, 95, 94])

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_factor("system_confidence", -5)
        assert issubclass(InvalidFactorInput, ScoringInputError)

    def test_edges_of_range_accepted(self):
        assert validate_factor("team_momentum", 0) == 0.0
        assert validate_factor("team_momentum", 100) == 100.0

    def test_frozen(self, example_factors):
        factors = FactorScores.from_mapping(example_factors)
        with pytest.raises(dataclasses.FrozenInstanceError):
            factors.team_momentum = 99


class TestBreakdown:

    def test_breakdown_payload(self, example_factors):
        breakdown = compute_composite_breakdown(FactorScores.from_mapping(example_factors))
        assert breakdown["composite_score"] == 68.9
        assert breakdown["grade"] == "B"
        assert breakdown["contributions"]["market_inefficiency"] == 23.75
        assert breakdown["weights"] == FACTOR_WEIGHTS
        assert sum(breakdown["contributions"].values()) == pytest.approx(68.9)
        assert set(breakdown["factors"]) == set(FACTOR_NAMES)
