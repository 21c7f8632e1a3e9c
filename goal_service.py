from __future__ import annotations

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from algorithms import MathTools
from localization import Translator
from period_filter import TimePeriod
from stats_service import StatisticsService

if TYPE_CHECKING:
    from record_store import RecordStore


class MotivationTier(Enum):
    GOAL_REACHED = (1.0, "Goal reached! Keep up the great work!")
    ALMOST_THERE = (0.75, "Almost there! Keep pushing!")
    ON_TRACK = (0.5, "Right on track! Keep this pace!")
    GOOD_START = (0.25, "Good start! Stay consistent!")
    GETTING_STARTED = (0.0, "One step at a time towards your goal!")

    @property
    def threshold(self) -> float:
        return self.value[0]

    @property
    def message(self) -> str:
        return self.value[1]


@dataclass(frozen=True)
class GoalProgress:
    current: int
    goal: int
    ratio: float
    display_ratio: float
    percent: int
    remaining: int
    complete: bool


class GoalService:
    """Track progress against the weekly workout and monthly XP goals."""

    def __init__(
        self,
        store: "RecordStore",
        stats: StatisticsService | None = None,
        translator: Translator | None = None,
    ) -> None:
        self.store = store
        self.stats = stats or StatisticsService(translator)
        self.translator = translator or self.stats.translator

    @staticmethod
    def is_complete(progress: float) -> bool:
        return progress >= 1.0

    @staticmethod
    def remaining(current: int, goal: int) -> int:
        return MathTools.remaining(current, goal)

    @staticmethod
    def motivation_tier(weekly: float, monthly: float) -> MotivationTier:
        """Pick the tier for the average of both ratios, each capped at 1."""
        average = (
            MathTools.clamp(weekly, 0.0, 1.0) + MathTools.clamp(monthly, 0.0, 1.0)
        ) / 2
        for tier in MotivationTier:
            if average >= tier.threshold:
                return tier
        return MotivationTier.GETTING_STARTED

    def weekly_workouts(self, now: datetime.datetime | None = None) -> int:
        return self.stats.count(self.store.filtered(TimePeriod.WEEK, now))

    def monthly_xp(self, now: datetime.datetime | None = None) -> int:
        return self.stats.total_xp(self.store.filtered(TimePeriod.MONTH, now))

    def weekly_progress(self, now: datetime.datetime | None = None) -> float:
        """Rolling seven day workout count divided by the weekly goal."""
        goal = self.store.settings()["weekly_workout_goal"]
        return MathTools.ratio(self.weekly_workouts(now), goal)

    def monthly_xp_progress(self, now: datetime.datetime | None = None) -> float:
        """XP earned this calendar month divided by the monthly XP goal."""
        goal = self.store.settings()["monthly_xp_goal"]
        return MathTools.ratio(self.monthly_xp(now), goal)

    @classmethod
    def _progress(cls, current: int, goal: int) -> GoalProgress:
        ratio = MathTools.ratio(current, goal)
        display = MathTools.clamp(ratio, 0.0, 1.0)
        return GoalProgress(
            current=current,
            goal=goal,
            ratio=ratio,
            display_ratio=display,
            percent=int(display * 100),
            remaining=cls.remaining(current, goal),
            complete=cls.is_complete(ratio),
        )

    def weekly_goal_progress(self, now: datetime.datetime | None = None) -> GoalProgress:
        goal = self.store.settings()["weekly_workout_goal"]
        return self._progress(self.weekly_workouts(now), goal)

    def monthly_xp_goal_progress(
        self, now: datetime.datetime | None = None
    ) -> GoalProgress:
        goal = self.store.settings()["monthly_xp_goal"]
        return self._progress(self.monthly_xp(now), goal)

    def current_tier(self, now: datetime.datetime | None = None) -> MotivationTier:
        return self.motivation_tier(
            self.weekly_progress(now), self.monthly_xp_progress(now)
        )

    def motivational_message(self, now: datetime.datetime | None = None) -> str:
        return self.translator.gettext(self.current_tier(now).message)
