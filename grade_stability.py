"""
GRADE_STABILITY.PY - Keeps published grades from flapping between refreshes

A grade is generated once enough game information exists (both starters, or
at least teams + start time), then locked. After that it may only be
re-generated when:
    1. Lineups are posted for a grade that was locked on pitchers only
    2. More than REFRESH_HOURS have passed since the last update
and any re-grade moves at most one ordinal step (B+ -> A-, never B+ -> A).

Locked grades expire LOCK_TTL_HOURS after they were first locked.

State lives on the tracker instance; create one per process/worker and
inject it where needed.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from tiering import Grade, GradeLike, limit_grade_change, to_grade

logger = logging.getLogger(__name__)

LOCK_TTL_HOURS = 24
REFRESH_HOURS = 8
MAX_GRADE_STEP = 1

PITCHERS_AVAILABLE = "pitchers_available"
LINEUPS_POSTED = "lineups_posted"

UNANNOUNCED = {"", "TBD", "TBA"}


@dataclass
class GameInfo:
    game_id: str
    home_team: str = ""
    away_team: str = ""
    game_time: Optional[str] = None
    home_pitcher: Optional[str] = None
    away_pitcher: Optional[str] = None
    home_lineup: List[str] = field(default_factory=list)
    away_lineup: List[str] = field(default_factory=list)

    @property
    def has_both_pitchers(self) -> bool:
        return all(
            p is not None and p.strip().upper() not in UNANNOUNCED
            for p in (self.home_pitcher, self.away_pitcher)
        )

    @property
    def has_basic_info(self) -> bool:
        return bool(self.home_team and self.away_team and self.game_time)

    @property
    def has_lineups(self) -> bool:
        return bool(self.home_lineup) and bool(self.away_lineup)


@dataclass
class StableGrade:
    game_id: str
    grade: Grade
    confidence: float
    pick_team: str
    odds: float
    locked_at: datetime
    locked_reason: str
    last_update: datetime
    reasoning: str = ""
    analysis: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "game_id": self.game_id,
            "grade": self.grade.value,
            "confidence": self.confidence,
            "pick_team": self.pick_team,
            "odds": self.odds,
            "locked_at": self.locked_at.isoformat(),
            "locked_reason": self.locked_reason,
            "last_update": self.last_update.isoformat(),
            "reasoning": self.reasoning,
        }


class GradeStabilityTracker:
    """Per-game grade locks with controlled updates."""

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        ttl_hours: float = LOCK_TTL_HOURS,
        refresh_hours: float = REFRESH_HOURS,
        max_step: int = MAX_GRADE_STEP,
    ):
        self._clock = clock
        self._ttl = timedelta(hours=ttl_hours)
        self._refresh = timedelta(hours=refresh_hours)
        self._max_step = max_step
        self._grades: Dict[str, StableGrade] = {}

    def should_generate_grade(self, game: GameInfo) -> bool:
        """
        Decide whether a (re)grade is allowed for this game right now.

        No existing grade: allowed once starters or basic game info exist.
        Existing grade: only on lineups arriving or after the refresh window.
        """
        existing = self.get_stable_grade(game.game_id)

        if existing is None:
            return game.has_both_pitchers or game.has_basic_info

        if existing.locked_reason == PITCHERS_AVAILABLE and game.has_lineups:
            logger.info("Lineups now available for %s - allowing controlled re-grade", game.game_id)
            return True

        age = self._clock() - existing.last_update
        if age > self._refresh:
            logger.info("Refresh window passed for %s (%.1fh)", game.game_id, age.total_seconds() / 3600)
            return True

        logger.debug("Grade LOCKED for %s: %s (%s)", game.game_id, existing.grade.value, existing.locked_reason)
        return False

    def lock_grade(
        self,
        game: GameInfo,
        grade: GradeLike,
        confidence: float,
        pick_team: str,
        odds: float,
        reasoning: str = "",
        analysis: Optional[Dict[str, Any]] = None,
    ) -> StableGrade:
        """
        Store a grade for the game, limiting the move from any previous grade.

        Returns:
            The stored StableGrade (grade may differ from the one proposed)
        """
        now = self._clock()
        proposed = to_grade(grade)
        existing = self.get_stable_grade(game.game_id)
        reason = LINEUPS_POSTED if game.has_lineups else PITCHERS_AVAILABLE

        if existing is not None:
            limited = limit_grade_change(existing.grade, proposed, self._max_step)
            if limited != proposed:
                logger.info(
                    "Grade stability control: %s limited %s->%s to %s->%s",
                    game.game_id, existing.grade.value, proposed.value, existing.grade.value, limited.value,
                )
            proposed = limited

        stable = StableGrade(
            game_id=game.game_id,
            grade=proposed,
            confidence=confidence,
            pick_team=pick_team,
            odds=odds,
            locked_at=existing.locked_at if existing else now,
            locked_reason=reason,
            last_update=now,
            reasoning=reasoning,
            analysis=dict(analysis or {}),
        )
        self._grades[game.game_id] = stable
        return stable

    def get_stable_grade(self, game_id: str) -> Optional[StableGrade]:
        stable = self._grades.get(game_id)
        if stable is None:
            return None
        if self._clock() - stable.locked_at > self._ttl:
            del self._grades[game_id]
            return None
        return stable

    def clear_expired(self) -> int:
        now = self._clock()
        expired = [gid for gid, g in self._grades.items() if now - g.locked_at > self._ttl]
        for game_id in expired:
            del self._grades[game_id]
        if expired:
            logger.info("Cleared %d expired stable grades", len(expired))
        return len(expired)

    def stats(self) -> Dict[str, Any]:
        now = self._clock()
        by_reason: Dict[str, int] = {}
        total_age_hours = 0.0
        for stable in self._grades.values():
            by_reason[stable.locked_reason] = by_reason.get(stable.locked_reason, 0) + 1
            total_age_hours += (now - stable.locked_at).total_seconds() / 3600

        total = len(self._grades)
        return {
            "total": total,
            "by_reason": by_reason,
            "avg_age_hours": round(total_age_hours / total, 2) if total else 0.0,
        }
