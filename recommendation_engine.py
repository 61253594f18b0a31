"""
RECOMMENDATION_ENGINE.PY - Grades one game into a publishable recommendation

Flow per game:
    1. Cached recommendation?  -> return it
    2. Inputs not supplied     -> spend one API-quota unit, resolve via factor_source
    3. Composite grade         (core.composite_score)
    4. Market-edge grade       (core.market_edge, seeded jitter)
    5. Stability lock          (grade_stability, at most one step per re-grade)
    6. Recommendation floor    (tiering.is_recommendable, C+)

Several candidate bets for one game (sides, markets) are ranked with
rank_candidates: best grade first, larger edge breaking ties. best_pick does
the same across a slate of games.

Cache, quota, stability tracker, factor source and RNG are all injected so
the engine holds no process-wide state.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from core.cache import ApiQuota, DailyApiQuota, GradeCache, QuotaExceeded, TTLCache
from core.composite_score import FactorScores, compute_composite_breakdown
from core.errors import InvalidFactorInput, ScoringInputError
from core.factor_bands import factor_scores_from_raw
from core.market_edge import MarketEdgeGrade, grade_market_edge, make_rng, validate_odds, validate_probability
from core.scoring_contract import JITTER_AMPLITUDE
from env_config import Config
from grade_stability import GameInfo, GradeStabilityTracker
from tiering import Grade, filter_recommendable, get_grade_config, is_recommendable, sort_by_grade

logger = logging.getLogger(__name__)


@dataclass
class GradingInputs:
    """
    Already-resolved inputs for one candidate bet on one game.

    Odds and probabilities are validated on construction, before any factor
    work is done.
    """
    pick_team: str
    odds: float
    model_probability: float
    confidence: float
    factors: Optional[FactorScores] = None
    raw_factors: Optional[Mapping[str, Any]] = None
    bet_type: str = "moneyline"

    def __post_init__(self):
        self.odds = validate_odds(self.odds)
        self.model_probability = validate_probability(self.model_probability, "model_probability")
        self.confidence = validate_probability(self.confidence, "confidence")

    def resolve_factors(self, rng: random.Random, jitter_amplitude: float) -> FactorScores:
        if self.factors is not None:
            return self.factors
        if self.raw_factors is not None:
            return factor_scores_from_raw(self.raw_factors, rng, jitter_amplitude)
        raise InvalidFactorInput("Either factors or raw_factors is required")


FactorSource = Callable[[GameInfo], GradingInputs]


@dataclass
class Recommendation:
    game_id: str
    pick_team: str
    odds: float
    grade: Grade
    composite_grade: Grade
    composite: Dict[str, Any]
    market: MarketEdgeGrade
    kelly_fraction: float
    recommended: bool
    locked: bool = False
    units: float = 0.0
    action: str = ""
    bet_type: str = "moneyline"
    notes: Dict[str, Any] = field(default_factory=dict)

    @property
    def edge(self) -> float:
        return self.market.edge

    def to_dict(self) -> Dict[str, Any]:
        return {
            "game_id": self.game_id,
            "pick_team": self.pick_team,
            "bet_type": self.bet_type,
            "odds": self.odds,
            "grade": self.grade.value,
            "composite_grade": self.composite_grade.value,
            "composite_score": self.composite["composite_score"],
            "composite": self.composite,
            "market": self.market.to_dict(),
            "kelly_fraction": round(self.kelly_fraction, 4),
            "expected_value": round(self.market.expected_value, 4),
            "recommended": self.recommended,
            "locked": self.locked,
            "units": self.units,
            "action": self.action,
            "notes": self.notes,
        }


class RecommendationEngine:
    """Grades games; every collaborator is optional and injected."""

    CACHE_PREFIX = "recommendation"

    def __init__(
        self,
        cache: Optional[GradeCache] = None,
        quota: Optional[ApiQuota] = None,
        stability: Optional[GradeStabilityTracker] = None,
        factor_source: Optional[FactorSource] = None,
        rng: Optional[random.Random] = None,
        jitter_amplitude: float = JITTER_AMPLITUDE,
    ):
        self.cache = cache
        self.quota = quota
        self.stability = stability
        self.factor_source = factor_source
        self.rng = rng if rng is not None else make_rng()
        self.jitter_amplitude = jitter_amplitude

    def _cache_key(self, game_id: str) -> str:
        return f"{self.CACHE_PREFIX}:{game_id}"

    def _resolve_inputs(self, game: GameInfo) -> GradingInputs:
        if self.factor_source is None:
            raise ScoringInputError(f"No inputs for {game.game_id} and no factor_source configured", field="inputs")
        if self.quota is not None and not self.quota.try_consume():
            raise QuotaExceeded(f"Daily API quota exhausted; cannot resolve inputs for {game.game_id}")
        return self.factor_source(game)

    def recommend(self, game: GameInfo, inputs: Optional[GradingInputs] = None) -> Recommendation:
        """
        Grade a game.

        Args:
            game: Game identity and lineup/pitcher status
            inputs: Resolved odds/probabilities/factors. When None the cached
                recommendation is returned if present, otherwise inputs are
                fetched through factor_source.

        Raises:
            QuotaExceeded: inputs had to be fetched and the budget is spent
            ScoringInputError: inputs failed validation
        """
        key = self._cache_key(game.game_id)
        if inputs is None and self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        if inputs is None:
            inputs = self._resolve_inputs(game)

        recommendation = self._grade(game, inputs)

        if self.cache is not None:
            self.cache.set(key, recommendation)
        return recommendation

    def _grade(self, game: GameInfo, inputs: GradingInputs, use_stability: bool = True) -> Recommendation:
        factors = inputs.resolve_factors(self.rng, self.jitter_amplitude)
        composite = compute_composite_breakdown(factors)
        composite_grade = Grade(composite["grade"])

        market = grade_market_edge(
            inputs.odds,
            inputs.model_probability,
            inputs.confidence,
            rng=self.rng,
            jitter_amplitude=self.jitter_amplitude,
        )

        grade = composite_grade
        locked = False
        notes: Dict[str, Any] = {}

        if use_stability and self.stability is not None:
            existing = self.stability.get_stable_grade(game.game_id)
            if self.stability.should_generate_grade(game):
                stable = self.stability.lock_grade(
                    game,
                    composite_grade,
                    confidence=inputs.confidence,
                    pick_team=inputs.pick_team,
                    odds=inputs.odds,
                    analysis=composite["factors"],
                )
                grade = stable.grade
                if grade != composite_grade:
                    notes["stability_limited_from"] = composite_grade.value
            elif existing is not None:
                grade = existing.grade
                locked = True
                notes["locked_reason"] = existing.locked_reason

        recommended = is_recommendable(grade)
        config = get_grade_config(grade)

        logger.info(
            "Graded %s: %s composite=%.2f (%s) market=%s kelly=%.3f recommended=%s",
            game.game_id, inputs.pick_team, composite["composite_score"], grade.value,
            market.grade.value, market.kelly_fraction, recommended,
        )

        return Recommendation(
            game_id=game.game_id,
            pick_team=inputs.pick_team,
            odds=inputs.odds,
            grade=grade,
            composite_grade=composite_grade,
            composite=composite,
            market=market,
            kelly_fraction=market.kelly_fraction,
            recommended=recommended,
            locked=locked,
            units=config["units"] if recommended else 0.0,
            action=config["action"] if recommended else "SKIP",
            bet_type=inputs.bet_type,
            notes=notes,
        )

    def rank_candidates(self, game: GameInfo, candidates: Sequence[GradingInputs]) -> List[Recommendation]:
        """
        Grade every candidate bet for a game and rank the recommendable ones.

        Candidates are graded fresh: no cache, no quota, no stability lock.
        Order is grade descending, then edge descending.

        Raises:
            ScoringInputError: a candidate failed validation
        """
        graded = [self._grade(game, inputs, use_stability=False) for inputs in candidates]
        kept = filter_recommendable(graded, grade_of=lambda rec: rec.grade)
        kept.sort(key=lambda rec: rec.edge, reverse=True)
        return sort_by_grade(kept, grade_of=lambda rec: rec.grade)

    def recommend_best(self, game: GameInfo, candidates: Sequence[GradingInputs]) -> Optional[Recommendation]:
        """Top-ranked candidate for a game, or None when nothing clears C+."""
        ranked = self.rank_candidates(game, candidates)
        if not ranked:
            logger.info("No recommendable bet for %s (%d candidates)", game.game_id, len(candidates))
            return None
        return ranked[0]

    def best_pick(self, slate: Iterable[Tuple[GameInfo, Sequence[GradingInputs]]]) -> Optional[Recommendation]:
        """
        Best single pick across a slate of games.

        Each game contributes its own best candidate; the winner is chosen
        with the same grade-then-edge ordering.
        """
        finalists = []
        for game, candidates in slate:
            best = self.recommend_best(game, candidates)
            if best is not None:
                finalists.append(best)
        if not finalists:
            return None
        finalists.sort(key=lambda rec: rec.edge, reverse=True)
        winner = sort_by_grade(finalists, grade_of=lambda rec: rec.grade)[0]
        logger.info(
            "Best pick of %d: %s %s %s (%s, edge=%.4f)",
            len(finalists), winner.game_id, winner.bet_type, winner.pick_team,
            winner.grade.value, winner.edge,
        )
        return winner


def build_engine(config: Any = None, factor_source: Optional[FactorSource] = None) -> RecommendationEngine:
    """Wire an engine from env_config.Config."""
    if config is None:
        config = Config

    stability = GradeStabilityTracker(ttl_hours=config.GRADE_LOCK_TTL_HOURS) if config.ENABLE_GRADE_STABILITY else None
    return RecommendationEngine(
        cache=TTLCache(default_ttl=config.GRADE_CACHE_TTL_SECONDS),
        quota=DailyApiQuota(daily_limit=config.DAILY_API_QUOTA),
        stability=stability,
        factor_source=factor_source,
        rng=make_rng(config.GRADE_JITTER_SEED),
        jitter_amplitude=config.GRADE_JITTER_AMPLITUDE,
    )
