"""
Pick Settlement - grade placed picks WIN/LOSS/PUSH/VOID against final scores

Responsibilities:
1. Decide the outcome of a moneyline, spread or total pick from a final score
2. Calculate profit_units from American odds

Conservative approach:
- Missing line on a spread/total pick -> VOID (never guessed)
- Unknown market or unknown selection -> VOID
- Fetching results and writing them back is the caller's job
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from core.market_edge import validate_odds

logger = logging.getLogger(__name__)

# Standard price assumed for spread/total picks stored without odds
DEFAULT_LINE_ODDS = -110

PUSH_TOLERANCE = 0.01


class PickResult(str, Enum):
    WIN = "WIN"
    LOSS = "LOSS"
    PUSH = "PUSH"
    VOID = "VOID"


class Market(str, Enum):
    MONEYLINE = "moneyline"
    SPREAD = "spread"
    TOTAL = "total"


MARKET_ALIASES = {
    "moneyline": Market.MONEYLINE,
    "h2h": Market.MONEYLINE,
    "ml": Market.MONEYLINE,
    "spread": Market.SPREAD,
    "spreads": Market.SPREAD,
    "runline": Market.SPREAD,
    "total": Market.TOTAL,
    "totals": Market.TOTAL,
    "over": Market.TOTAL,
    "under": Market.TOTAL,
}


@dataclass
class Pick:
    market: str
    selection: str
    odds: Optional[int] = None
    units: float = 1.0
    line: Optional[float] = None


@dataclass
class GameResult:
    game_id: str
    home_team: str
    away_team: str
    home_score: int
    away_score: int

    @property
    def summary(self) -> str:
        return f"{self.away_team} {self.away_score} - {self.home_score} {self.home_team}"


@dataclass
class Settlement:
    result: PickResult
    profit_units: float
    summary: str
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "result": self.result.value,
            "profit_units": round(self.profit_units, 2),
            "summary": self.summary,
            "reason": self.reason,
        }


# ============================================================================
# PROFIT CALCULATION
# ============================================================================

def calculate_profit(odds: int, units: float, result: PickResult) -> float:
    """
    Calculate profit/loss in units based on American odds.

    Args:
        odds: American odds (e.g., -110, +150)
        units: Units wagered
        result: WIN, LOSS, PUSH, VOID

    Returns:
        Profit in units (positive for win, negative for loss, 0 for push/void)
    """
    if units <= 0:
        return 0.0

    if result == PickResult.WIN:
        odds = validate_odds(odds)
        if odds > 0:
            return units * (odds / 100)
        else:
            return units * (100 / abs(odds))
    elif result == PickResult.LOSS:
        return -units
    else:
        return 0.0


# ============================================================================
# OUTCOMES
# ============================================================================

def _selection_side(selection: str, game: GameResult) -> Optional[str]:
    """Return "home"/"away" for a team selection, None if it matches neither."""
    selected = selection.lower().strip()
    home = game.home_team.lower().strip()
    away = game.away_team.lower().strip()

    if selected == home:
        return "home"
    if selected == away:
        return "away"
    # Nicknames / partial names ("Yankees" vs "New York Yankees")
    if selected and selected in home and selected not in away:
        return "home"
    if selected and selected in away and selected not in home:
        return "away"
    return None


def _moneyline_outcome(pick: Pick, game: GameResult) -> PickResult:
    side = _selection_side(pick.selection, game)
    if side is None:
        return PickResult.VOID
    if game.home_score == game.away_score:
        return PickResult.PUSH
    home_won = game.home_score > game.away_score
    return PickResult.WIN if (side == "home") == home_won else PickResult.LOSS


def _spread_outcome(pick: Pick, game: GameResult) -> PickResult:
    """Line is the handicap on the selected team (-1.5 = must win by 2+)."""
    side = _selection_side(pick.selection, game)
    if side is None:
        return PickResult.VOID

    selected, opponent = (
        (game.home_score, game.away_score) if side == "home" else (game.away_score, game.home_score)
    )
    margin = selected + pick.line - opponent
    if abs(margin) < PUSH_TOLERANCE:
        return PickResult.PUSH
    return PickResult.WIN if margin > 0 else PickResult.LOSS


def _total_outcome(pick: Pick, game: GameResult) -> PickResult:
    selection = pick.selection.lower()
    if "over" in selection:
        direction = 1
    elif "under" in selection:
        direction = -1
    else:
        return PickResult.VOID

    diff = (game.home_score + game.away_score) - pick.line
    if abs(diff) < PUSH_TOLERANCE:
        return PickResult.PUSH
    return PickResult.WIN if diff * direction > 0 else PickResult.LOSS


def settle_pick(pick: Pick, game: GameResult) -> Settlement:
    """
    Settle a single pick against a final game result.

    Returns:
        Settlement with result, profit_units and a score summary

    Raises:
        InvalidOddsInput: the pick carries odds that are not valid American odds
    """
    market = MARKET_ALIASES.get((pick.market or "").lower().strip())
    summary = game.summary

    if market is None:
        logger.warning("Unknown market type for settlement: %s", pick.market)
        return Settlement(PickResult.VOID, 0.0, summary, reason=f"Unknown market: {pick.market}")

    if market in (Market.SPREAD, Market.TOTAL) and pick.line is None:
        return Settlement(PickResult.VOID, 0.0, summary, reason=f"No line on {market.value} pick")

    if market == Market.MONEYLINE and pick.odds is None:
        return Settlement(PickResult.VOID, 0.0, summary, reason="No odds on moneyline pick")

    odds = validate_odds(pick.odds if pick.odds is not None else DEFAULT_LINE_ODDS)

    if market == Market.MONEYLINE:
        result = _moneyline_outcome(pick, game)
    elif market == Market.SPREAD:
        result = _spread_outcome(pick, game)
    else:
        result = _total_outcome(pick, game)

    profit = calculate_profit(odds, pick.units, result)
    reason = "" if result != PickResult.VOID else f"Selection {pick.selection!r} not in game"

    logger.info("Settled %s %s on %s: %s (%+.2f units)", market.value, pick.selection, game.game_id, result.value, profit)
    return Settlement(result, profit, summary, reason=reason)
