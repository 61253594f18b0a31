"""
GRADING ROUTER - Pick grading endpoints

Endpoints:
    - GET  /grading/thresholds      - Canonical weights and grade tables
    - POST /grading/composite       - Six factor scores -> composite grade
    - POST /grading/market-edge     - Odds + model probability -> market grade
    - POST /grading/factors/banded  - Raw stats -> banded factor scores (+ grade)
    - POST /grading/recommend       - Full recommendation for one game
    - POST /grading/recommend/best  - Rank candidate bets for one game
    - POST /picks/settle            - Settle a placed pick against a final score

Input errors raise core.errors.ScoringInputError; main.py maps them to 400.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from core.composite_score import FactorScores, compute_composite_breakdown
from core.factor_bands import factor_scores_from_raw
from core.market_edge import grade_market_edge, make_rng
from core.scoring_contract import SCORING_CONTRACT
from env_config import Config
from grade_stability import GameInfo
from models.api_models import (
    BandedFactorsRequest,
    CompositeGradeRequest,
    MarketEdgeRequest,
    RecommendBestRequest,
    RecommendRequest,
    SettlePickRequest,
)
from recommendation_engine import GradingInputs, RecommendationEngine
from settlement import GameResult, Pick, settle_pick

logger = logging.getLogger(__name__)

router = APIRouter(tags=["grading"])


def get_engine(request: Request) -> RecommendationEngine:
    return request.app.state.engine


@router.get("/grading/thresholds")
async def grading_thresholds() -> Dict[str, Any]:
    return {"status": "ok", "engine_version": Config.ENGINE_VERSION, "contract": SCORING_CONTRACT}


@router.post("/grading/composite")
async def grade_composite_endpoint(body: CompositeGradeRequest) -> Dict[str, Any]:
    factors = FactorScores.from_mapping(body.factors)
    return {"status": "ok", **compute_composite_breakdown(factors)}


@router.post("/grading/market-edge")
async def grade_market_edge_endpoint(body: MarketEdgeRequest) -> Dict[str, Any]:
    amplitude = Config.GRADE_JITTER_AMPLITUDE if body.jitter else 0.0
    result = grade_market_edge(
        body.odds,
        body.model_probability,
        body.confidence,
        rng=make_rng(body.seed),
        jitter_amplitude=amplitude,
    )
    return {"status": "ok", **result.to_dict()}


@router.post("/grading/factors/banded")
async def banded_factors_endpoint(body: BandedFactorsRequest) -> Dict[str, Any]:
    factors = factor_scores_from_raw(body.raw, rng=make_rng(body.seed))
    response: Dict[str, Any] = {"status": "ok", "factors": factors.to_dict()}
    if body.grade:
        breakdown = compute_composite_breakdown(factors)
        response["composite_score"] = breakdown["composite_score"]
        response["grade"] = breakdown["grade"]
    return response


def _grading_inputs(body: Any) -> GradingInputs:
    return GradingInputs(
        pick_team=body.pick_team,
        odds=body.odds,
        model_probability=body.model_probability,
        confidence=body.confidence,
        factors=FactorScores.from_mapping(body.factors) if body.factors is not None else None,
        raw_factors=body.raw_factors,
        bet_type=body.bet_type,
    )


def _has_inputs(body: RecommendRequest) -> bool:
    supplied = (body.odds, body.model_probability, body.factors, body.raw_factors)
    return bool(body.pick_team) or any(value is not None for value in supplied)


@router.post("/grading/recommend")
async def recommend_endpoint(
    body: RecommendRequest,
    engine: RecommendationEngine = Depends(get_engine),
) -> Dict[str, Any]:
    game = GameInfo(**body.game.model_dump())
    inputs = _grading_inputs(body) if _has_inputs(body) else None
    recommendation = engine.recommend(game, inputs)
    return {"status": "ok", **recommendation.to_dict()}


@router.post("/grading/recommend/best")
async def recommend_best_endpoint(
    body: RecommendBestRequest,
    engine: RecommendationEngine = Depends(get_engine),
) -> Dict[str, Any]:
    game = GameInfo(**body.game.model_dump())
    ranked = engine.rank_candidates(game, [_grading_inputs(candidate) for candidate in body.candidates])
    return {
        "status": "ok",
        "game_id": game.game_id,
        "candidates": len(body.candidates),
        "best": ranked[0].to_dict() if ranked else None,
        "ranked": [rec.to_dict() for rec in ranked],
    }


@router.post("/picks/settle")
async def settle_pick_endpoint(body: SettlePickRequest) -> Dict[str, Any]:
    settlement = settle_pick(Pick(**body.pick.model_dump()), GameResult(**body.result.model_dump()))
    return {"status": "ok", **settlement.to_dict()}
