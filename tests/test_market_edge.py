"""
Market-edge grading tests.

Jitter is disabled (jitter_amplitude=0) wherever an exact grade is asserted.
"""

import pytest

from core.errors import InvalidOddsInput, InvalidProbabilityInput
from core.market_edge import (
    american_to_decimal,
    clamp_edge,
    compute_edge,
    confidence_adjustment,
    edge_base_score,
    grade_market_edge,
    implied_probability,
    expected_value,
    kelly_fraction,
    make_rng,
    presentation_jitter,
    validate_odds,
)
from tiering import Grade


class TestOddsMath:

    def test_implied_favorite(self):
        assert implied_probability(-110) == pytest.approx(0.5238, abs=1e-4)

    def test_implied_underdog(self):
        assert implied_probability(150) == pytest.approx(0.4)

    def test_even_money(self):
        assert implied_probability(100) == pytest.approx(0.5)
        assert implied_probability(-100) == pytest.approx(0.5)

    @pytest.mark.parametrize("odds", [150, 110, 200, 333])
    def test_mirror_prices_sum_to_one(self, odds):
        assert implied_probability(odds) + implied_probability(-odds) == pytest.approx(1.0)

    def test_decimal(self):
        assert american_to_decimal(150) == pytest.approx(2.5)
        assert american_to_decimal(-150) == pytest.approx(1.6667, abs=1e-4)

    @pytest.mark.parametrize("bad", [0, 1, -1, 50, -99.5, float("nan"), float("inf"), "abc", None, True])
    def test_invalid_odds(self, bad):
        with pytest.raises(InvalidOddsInput) as exc_info:
            implied_probability(bad)
        assert exc_info.value.field == "odds"

    @pytest.mark.parametrize("odds", [100, -100, 100.0, -100.0])
    def test_even_money_boundary_accepted(self, odds):
        assert validate_odds(odds) == float(odds)


class TestEdge:

    def test_small_favorite_edge(self):
        assert compute_edge(-110, 0.55) == pytest.approx(0.0262, abs=1e-4)

    def test_underdog_edge(self):
        assert compute_edge(150, 0.45) == pytest.approx(0.05)

    def test_clamped_high(self):
        assert compute_edge(100, 0.9) == pytest.approx(0.10)

    def test_clamped_low(self):
        assert compute_edge(-400, 0.2) == pytest.approx(-0.10)

    @pytest.mark.parametrize("edge", [-1.0, -0.2, -0.1, 0.0, 0.05, 0.1, 0.5])
    def test_clamp_range(self, edge):
        assert -0.10 <= clamp_edge(edge) <= 0.10

    @pytest.mark.parametrize("bad", [1.2, -0.01, float("nan"), "0.5"])
    def test_invalid_probability(self, bad):
        with pytest.raises(InvalidProbabilityInput) as exc_info:
            compute_edge(-110, bad)
        assert exc_info.value.code == "INVALID_PROBABILITY_INPUT"

    def test_kelly(self):
        assert kelly_fraction(0.05, 0.4) == pytest.approx(0.125)
        assert kelly_fraction(0.05, 0.0) == 0.0

    @pytest.mark.parametrize("odds,model_probability", [(150, 0.45), (-110, 0.55), (200, 0.30)])
    def test_opposite_side_mirrors_edge(self, odds, model_probability):
        assert compute_edge(odds, model_probability) == pytest.approx(
            -compute_edge(-odds, 1 - model_probability)
        )


class TestExpectedValue:

    def test_underdog_with_edge(self):
        assert expected_value(0.45, 150) == pytest.approx(0.125)

    def test_coin_flip_at_juice(self):
        assert expected_value(0.50, -110) == pytest.approx(-0.0455, abs=1e-4)

    def test_fair_price_is_zero(self):
        assert expected_value(0.5, 100) == pytest.approx(0.0)
        assert expected_value(0.6, -150) == pytest.approx(0.0)

    def test_certain_loss(self):
        assert expected_value(0.0, 150) == pytest.approx(-1.0)

    def test_validates_inputs(self):
        with pytest.raises(InvalidOddsInput):
            expected_value(0.5, 50)
        with pytest.raises(InvalidProbabilityInput):
            expected_value(1.5, -110)

    def test_attached_to_grade(self):
        result = grade_market_edge(150, 0.45, 0.75, jitter_amplitude=0)
        assert result.expected_value == pytest.approx(0.125)
        assert result.to_dict()["expected_value"] == 0.125


class TestBaseScore:

    @pytest.mark.parametrize("edge,expected", [
        (0.10, 95.0),
        (0.07, 95.0),
        (0.05, 90.0),
        (0.0262, 85.0),
        (0.02, 80.0),
        (0.01, 75.0),
        (0.0, 70.0),
        (-0.01, 65.0),
        (-0.02, 60.0),
        (-0.03, 55.0),
        (-0.04, 50.0),
        (-0.05, 45.0),
        (-0.06, 35.0),
        (-0.10, 35.0),
    ])
    def test_tiers_use_signed_edge(self, edge, expected):
        assert edge_base_score(edge) == expected

    def test_negative_edge_scores_below_positive(self):
        assert edge_base_score(-0.05) < edge_base_score(0.05)

    def test_confidence_adjustment(self):
        assert confidence_adjustment(0.75) == 0.0
        assert confidence_adjustment(1.0) == pytest.approx(2.5)
        assert confidence_adjustment(0.25) == pytest.approx(-5.0)

    def test_confidence_validated(self):
        with pytest.raises(InvalidProbabilityInput) as exc_info:
            confidence_adjustment(1.5)
        assert exc_info.value.field == "confidence"


class TestGradeMarketEdge:

    def test_small_favorite(self):
        result = grade_market_edge(-110, 0.55, 0.75, jitter_amplitude=0)
        assert result.base_score == 85.0
        assert result.adjusted_score == 85.0
        assert result.grade == Grade.A_MINUS

    def test_underdog_with_edge(self):
        result = grade_market_edge(150, 0.45, 0.75, jitter_amplitude=0)
        assert result.implied_probability == pytest.approx(0.4)
        assert result.edge == pytest.approx(0.05)
        assert result.base_score == 90.0
        assert result.grade == Grade.A
        assert result.kelly_fraction == pytest.approx(0.125)

    def test_high_confidence_lifts_grade(self):
        result = grade_market_edge(150, 0.45, 1.0, jitter_amplitude=0)
        assert result.adjusted_score == pytest.approx(92.5)
        assert result.grade == Grade.A_PLUS

    def test_negative_edge_grades_low(self):
        result = grade_market_edge(-200, 0.5, 0.5, jitter_amplitude=0)
        assert result.edge == pytest.approx(-0.10)
        assert result.adjusted_score == pytest.approx(32.5)
        assert result.grade == Grade.F

    def test_seeded_jitter_is_repeatable(self):
        first = grade_market_edge(-110, 0.55, 0.75, rng=make_rng(7))
        second = grade_market_edge(-110, 0.55, 0.75, rng=make_rng(7))
        assert first == second

    def test_jitter_bounded(self):
        rng = make_rng(123)
        for _ in range(200):
            result = grade_market_edge(-110, 0.55, 0.75, rng=rng)
            assert -3.0 <= result.jitter <= 3.0
            assert result.adjusted_score == pytest.approx(85.0 + result.jitter)

    def test_unseeded_jitter_varies(self):
        jitters = {grade_market_edge(-110, 0.55, 0.75).jitter for _ in range(20)}
        assert len(jitters) > 1

    def test_zero_odds_rejected(self):
        with pytest.raises(InvalidOddsInput):
            grade_market_edge(0, 0.55, 0.75)

    def test_to_dict(self):
        payload = grade_market_edge(150, 0.45, 0.75, jitter_amplitude=0).to_dict()
        assert payload["grade"] == "A"
        assert payload["edge_percentage"] == 5.0
        assert payload["kelly_fraction"] == 0.125
        assert payload["jitter"] == 0.0


class TestJitter:

    def test_zero_amplitude(self, seeded_rng):
        assert presentation_jitter(seeded_rng, 0) == 0.0

    def test_negative_amplitude(self, seeded_rng):
        with pytest.raises(ValueError):
            presentation_jitter(seeded_rng, -1)

    def test_same_seed_same_sequence(self):
        a, b = make_rng(42), make_rng(42)
        assert [presentation_jitter(a) for _ in range(5)] == [presentation_jitter(b) for _ in range(5)]
