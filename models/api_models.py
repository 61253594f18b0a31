"""
Pydantic models for grading API request/response validation.

Range checks on scoring inputs are left to the scoring core so every rejected
value produces the same typed error code (INVALID_FACTOR_INPUT, ...) whether
it arrives over HTTP or from another caller.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# GRADING REQUESTS
# ============================================================================

class CompositeGradeRequest(BaseModel):
    """Six factor scores keyed by name (snake_case or camelCase)."""
    factors: Dict[str, Any] = Field(..., description="offensive_production, pitching_matchup, ...")


class MarketEdgeRequest(BaseModel):
    """Market-edge grading inputs."""
    odds: float = Field(..., description="American odds (-110, +150, etc.)")
    model_probability: float = Field(..., description="Model win probability 0-1")
    confidence: float = Field(default=0.75, description="Model confidence 0-1")
    seed: Optional[int] = Field(None, description="Jitter seed for repeatable grades")
    jitter: bool = Field(default=True, description="Apply presentation jitter")


class BandedFactorsRequest(BaseModel):
    """Raw per-factor statistics to band into factor scores."""
    raw: Dict[str, Any] = Field(..., description="offensive, pitching, situational, momentum, market, confidence")
    seed: Optional[int] = Field(None, description="Jitter seed for repeatable scores")
    grade: bool = Field(default=True, description="Also return the composite grade")


class GameRequest(BaseModel):
    game_id: str = Field(..., description="Unique game identifier")
    home_team: str = ""
    away_team: str = ""
    game_time: Optional[str] = None
    home_pitcher: Optional[str] = None
    away_pitcher: Optional[str] = None
    home_lineup: List[str] = Field(default_factory=list)
    away_lineup: List[str] = Field(default_factory=list)


class RecommendRequest(BaseModel):
    """
    Full recommendation for one game.

    With only a game the engine serves the cached recommendation or fetches
    inputs through its factor source (one API-quota unit). Once any input is
    supplied, odds and model_probability are required.
    """
    game: GameRequest
    pick_team: str = Field(default="", description="Side being graded")
    bet_type: str = Field(default="moneyline", description="moneyline, spread or total")
    odds: Optional[float] = Field(None, description="American odds for pick_team")
    model_probability: Optional[float] = Field(None, description="Model win probability 0-1")
    confidence: float = Field(default=0.75, description="Model confidence 0-1")
    factors: Optional[Dict[str, Any]] = Field(None, description="Factor scores 0-100")
    raw_factors: Optional[Dict[str, Any]] = Field(None, description="Raw stats to band")


class CandidateRequest(BaseModel):
    """One candidate bet (side and market) for a game."""
    pick_team: str = Field(..., description="Side being graded")
    bet_type: str = Field(default="moneyline", description="moneyline, spread or total")
    odds: Optional[float] = Field(None, description="American odds for pick_team")
    model_probability: Optional[float] = Field(None, description="Model win probability 0-1")
    confidence: float = Field(default=0.75, description="Model confidence 0-1")
    factors: Optional[Dict[str, Any]] = Field(None, description="Factor scores 0-100")
    raw_factors: Optional[Dict[str, Any]] = Field(None, description="Raw stats to band")


class RecommendBestRequest(BaseModel):
    """Rank candidate bets for one game; best grade first, edge breaks ties."""
    game: GameRequest
    candidates: List[CandidateRequest] = Field(..., description="Bets to grade and rank")


# ============================================================================
# SETTLEMENT MODELS
# ============================================================================

class PickRequest(BaseModel):
    market: str = Field(..., description="moneyline, spread or total")
    selection: str = Field(..., description="Team name, or Over/Under for totals")
    odds: Optional[int] = Field(None, description="American odds")
    units: float = Field(default=1.0, ge=0, description="Units wagered")
    line: Optional[float] = Field(None, description="Spread handicap or total line")


class GameResultRequest(BaseModel):
    game_id: str
    home_team: str
    away_team: str
    home_score: int = Field(..., ge=0)
    away_score: int = Field(..., ge=0)


class SettlePickRequest(BaseModel):
    pick: PickRequest
    result: GameResultRequest
